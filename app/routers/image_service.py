from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
import logging

from app.storage.base import MediaStore
from app.dependencies.dependencies import get_media_store
from app.image_service.service import upload_image, fetch_images
from app.image_service.models import Descriptor, ListImagesResponse, ErrorResponse
from app.exceptions import MissingFileException
from app.settings import settings

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["image-gallery"]
)

@router.post(
    "/upload",
    response_model=Descriptor,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_image_handler(
    request: Request,
    store: MediaStore = Depends(get_media_store)
):
    """Forwards one multipart file to the media store's gallery folder."""
    # the form is read by hand so a missing or non-file "file" part is a 400
    form = await request.form()
    file = form.get("file")
    if not isinstance(file, UploadFile):
        raise MissingFileException()

    contents = await file.read()
    if not contents:
        raise MissingFileException()

    return await run_in_threadpool(
        upload_image,
        store,
        contents,
        filename=file.filename,
        folder=settings.gallery_folder,
    )

@router.get(
    "/images",
    response_model=ListImagesResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
def list_images_handler(
    folder: str = Query(settings.gallery_folder),
    store: MediaStore = Depends(get_media_store)
):
    """Lists the images under a folder, newest first."""
    return fetch_images(store, folder=folder)
