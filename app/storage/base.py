from typing import Any, Dict, Optional
from urllib.parse import urlsplit
import logging

log = logging.getLogger(__name__)

class MediaStoreError(Exception):
    """Raised by media store adapters when the remote call fails."""

class MediaStore:
    """
        Interface of the external media store.

        upload() returns the stored-object resource and search() returns
        {"resources": [...], "total_count": n}. Resources carry the store's
        own field names: public_id, secure_url, width, height, format, bytes,
        created_at and, where known, original_filename.
    """

    def upload(self, data: bytes, folder: str, filename: Optional[str] = None) -> Dict[str, Any]:
        raise NotImplementedError

    def search(self, folder: str, max_results: int) -> Dict[str, Any]:
        raise NotImplementedError

    def close(self):
        pass

class UnconfiguredMediaStore(MediaStore):
    """Store used when no connection string is set. Every call fails."""

    def upload(self, data: bytes, folder: str, filename: Optional[str] = None) -> Dict[str, Any]:
        raise MediaStoreError("Media store is not configured (set MEDIA_STORE_URL)")

    def search(self, folder: str, max_results: int) -> Dict[str, Any]:
        raise MediaStoreError("Media store is not configured (set MEDIA_STORE_URL)")

def create_media_store(url: Optional[str]) -> MediaStore:
    """Builds the media store adapter named by the connection string scheme."""
    if not url:
        log.warning("MEDIA_STORE_URL is not set; media store calls will fail")
        return UnconfiguredMediaStore()

    scheme = urlsplit(url).scheme
    if scheme == "cloudinary":
        from app.storage.cloudinary import CloudinaryMediaStore
        return CloudinaryMediaStore.from_url(url)
    if scheme == "s3":
        from app.storage.s3 import S3MediaStore
        return S3MediaStore.from_url(url)
    raise ValueError(f"Unsupported media store scheme: {scheme!r}")
