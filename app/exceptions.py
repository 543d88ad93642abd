"""
    Centralized exception handling for the FastAPI application.
"""
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

log = logging.getLogger(__name__)

class APIException(Exception):
    """Base class for API exceptions."""
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.detail)

class MissingFileException(APIException):
    """Exception for upload requests without a file part."""
    def __init__(self, detail: str = "No file provided"):
        super().__init__(status_code=400, detail=detail)

class UploadFailedException(APIException):
    """Exception for media store upload failures."""
    def __init__(self, detail: str = "Upload failed"):
        super().__init__(status_code=500, detail=detail)

class FetchFailedException(APIException):
    """Exception for media store listing failures."""
    def __init__(self, detail: str = "Failed to fetch images"):
        super().__init__(status_code=500, detail=detail)

async def api_exception_handler(request: Request, exc: APIException):
    """Handles API exceptions."""
    log.error(f"API Exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    """Handles FastAPI HTTP exceptions."""
    log.error(f"HTTP Exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles request validation errors with the same error body."""
    log.error(f"Validation Exception: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request"},
    )

async def generic_exception_handler(request: Request, exc: Exception):
    """Handles all other exceptions."""
    log.error(f"Unhandled Exception: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred."},
    )

def add_exception_handlers(app):
    """Adds exception handlers to the FastAPI app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
