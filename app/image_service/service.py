from typing import Any, Dict, Optional
import logging

from app.storage.base import MediaStore, MediaStoreError
from app.image_service.models import Descriptor, ListImagesResponse
from app.exceptions import UploadFailedException, FetchFailedException
from app.settings import settings

log = logging.getLogger(__name__)

def to_descriptor(resource: Dict[str, Any], with_name: bool = True) -> Descriptor:
    """Projects a raw media store resource onto the wire descriptor."""
    original_filename = None
    if with_name:
        original_filename = resource.get("original_filename") or resource["public_id"]
    return Descriptor(
        public_id=resource["public_id"],
        secure_url=resource["secure_url"],
        width=resource.get("width"),
        height=resource.get("height"),
        format=resource.get("format"),
        bytes=resource.get("bytes"),
        created_at=resource["created_at"],
        original_filename=original_filename,
    )

def upload_image(
    store: MediaStore,
    data: bytes,
    filename: Optional[str] = None,
    folder: Optional[str] = None,
) -> Descriptor:
    """Uploads raw bytes to the media store under the gallery folder."""
    folder = folder or settings.gallery_folder
    try:
        resource = store.upload(data, folder=folder, filename=filename)
    except MediaStoreError as e:
        log.error(f"Upload error: {e}")
        raise UploadFailedException()

    descriptor = to_descriptor(resource, with_name=False)
    log.info("Uploaded image %s (%s bytes)", descriptor.public_id, descriptor.bytes)
    return descriptor

def fetch_images(store: MediaStore, folder: Optional[str] = None) -> ListImagesResponse:
    """Lists the newest images under a folder, capped at max_results."""
    folder = folder or settings.gallery_folder
    try:
        result = store.search(folder, max_results=settings.max_results)
    except MediaStoreError as e:
        log.error(f"Fetch images error: {e}")
        raise FetchFailedException()

    images = [to_descriptor(r) for r in result["resources"]]
    return ListImagesResponse(images=images, total_count=result.get("total_count", len(images)))
