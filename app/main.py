from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import logging

from app.storage.base import create_media_store
from app.settings import settings
from app.routers.image_service import router as image_router
from app.routers.gallery import router as gallery_router
from app.exceptions import add_exception_handlers

logging.basicConfig(level=logging.INFO)
log = logging.getLogger("image-gallery")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
        Async context manager for FastAPI application lifecycle events.
        Builds the media store named by MEDIA_STORE_URL and closes it on shutdown.
    """
    app.state.store = create_media_store(settings.media_store_url)
    yield
    app.state.store.close()

# Initialize App
app = FastAPI(
    title=settings.app_title,
    lifespan=lifespan,
    description="Image Gallery Service",
)

# Add exception handlers
add_exception_handlers(app)

# CORS - Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add the routers
app.include_router(image_router)
app.include_router(gallery_router)

# Check Health
@app.get("/health")
def read_health():
    """
        Health check end point

    """
    return "Image Gallery Service is running."

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
