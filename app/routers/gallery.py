from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.datastructures import UploadFile
from pathlib import Path
import httpx
import logging

from app.gallery.formatting import format_file_size, image_dimensions
from app.gallery.models import SelectedFile, ViewMode
from app.gallery.page import GalleryPage
from app.settings import settings

log = logging.getLogger(__name__)

router = APIRouter(tags=["gallery-page"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.filters["filesize"] = format_file_size
templates.env.filters["dimensions"] = image_dimensions

def api_client(request: Request) -> httpx.AsyncClient:
    """Client for the page's own API; failed API calls come back as 5xx responses."""
    transport = httpx.ASGITransport(app=request.app, raise_app_exceptions=False)
    return httpx.AsyncClient(transport=transport, base_url=str(request.base_url))

def render(request: Request, page: GalleryPage):
    return templates.TemplateResponse(
        request,
        "gallery.html",
        {"page": page, "title": settings.app_title},
    )

@router.get("/", response_class=HTMLResponse)
async def gallery_page(
    request: Request,
    folder: str = Query(settings.gallery_folder),
    q: str = Query(""),
    view: ViewMode = Query(ViewMode.GRID),
):
    """Renders the gallery, loading the listing through the list endpoint."""
    async with api_client(request) as client:
        page = GalleryPage(client, folder=folder, search_term=q, view_mode=view)
        await page.mount()
    return render(request, page)

@router.post("/", response_class=HTMLResponse)
async def gallery_upload(
    request: Request,
    folder: str = Query(settings.gallery_folder),
):
    """Upload form used when the page script is not running."""
    form = await request.form()
    files = [
        SelectedFile(name=f.filename or "", content_type=f.content_type or "", data=await f.read())
        for f in form.getlist("files")
        if isinstance(f, UploadFile)
    ]

    async with api_client(request) as client:
        page = GalleryPage(client, folder=folder)
        await page.mount()
        await page.handle_file_upload(files)
    return render(request, page)
