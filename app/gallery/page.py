"""
    View-model of the gallery page.

    Holds the state the server render needs and drives the two API endpoints
    through an httpx client. Every failure ends as one entry in `alerts`,
    which the rendered page replays as blocking browser alerts. Drag state
    and clipboard access only exist in the browser script.
"""
from typing import List, Optional, Sequence
import asyncio
import logging
import httpx

from app.gallery.formatting import filter_images, matches_search
from app.gallery.models import SelectedFile, StoredImage, ViewMode

log = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load images. Please refresh the page."
UPLOAD_FAILED = "Upload failed. Please try again."

class FetchError(Exception):
    """The list endpoint answered with an error."""

class UploadError(Exception):
    """The upload endpoint answered with an error."""

class GalleryPage:
    def __init__(
        self,
        client: httpx.AsyncClient,
        folder: str = "gallery",
        search_term: str = "",
        view_mode: ViewMode = ViewMode.GRID,
    ):
        self.client = client
        self.folder = folder

        self.images: List[StoredImage] = []
        self.loading = True
        self.uploading = False
        self.search_term = search_term
        self.view_mode = ViewMode(view_mode)
        self.alerts: List[str] = []

    def alert(self, message: str):
        self.alerts.append(message)

    async def mount(self):
        await self.fetch_images()

    async def fetch_images(self):
        """Replaces the image set with the current listing of the folder."""
        try:
            self.loading = True
            response = await self.client.get("/api/images", params={"folder": self.folder})
            if not response.is_success:
                raise FetchError(f"Failed to fetch images ({response.status_code})")

            data = response.json()
            self.images = [StoredImage.from_descriptor(img) for img in data["images"]]
        except (FetchError, httpx.HTTPError, ValueError, KeyError) as e:
            log.error(f"Error fetching images: {e}")
            self.alert(LOAD_FAILED)
        finally:
            self.loading = False

    async def upload_file(self, file: SelectedFile) -> StoredImage:
        response = await self.client.post(
            "/api/upload",
            files={"file": (file.name, file.data, file.content_type)},
        )
        if not response.is_success:
            try:
                error = response.json().get("error")
            except ValueError:
                error = None
            raise UploadError(error or "Upload failed")

        return StoredImage.from_descriptor(response.json(), original_name=file.name)

    async def handle_file_upload(self, files: Optional[Sequence[SelectedFile]]):
        """
            Uploads every image in `files` concurrently, then reloads the list.

            Non-image files are skipped. A single failed upload fails the
            whole batch with one alert and no reload, even though the other
            uploads may already be stored.
        """
        if not files:
            return

        self.uploading = True
        uploads = [self.upload_file(f) for f in files if f.content_type.startswith("image/")]

        try:
            await asyncio.gather(*uploads)
            await self.fetch_images()
        except (UploadError, httpx.HTTPError, ValueError) as e:
            log.error(f"Upload error: {e}")
            self.alert(UPLOAD_FAILED)
        finally:
            self.uploading = False

    def is_visible(self, image: StoredImage) -> bool:
        return matches_search(image, self.search_term)

    @property
    def filtered_images(self) -> List[StoredImage]:
        return filter_images(self.images, self.search_term)
