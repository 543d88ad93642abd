from typing import Iterable, List, Optional
import math

from app.gallery.models import StoredImage

SIZES = ["Bytes", "KB", "MB", "GB"]

def format_file_size(size: Optional[int]) -> str:
    """
        Formats a byte count with the largest unit that keeps the value >= 1.

        Values are rounded half-up to two decimals and trailing zeros are
        dropped, so 1536 -> "1.5 KB" and 2048 -> "2 KB". Zero is "0 Byte"
        (singular) and a missing size is "Unknown".
    """
    if size is None:
        return "Unknown"
    if size == 0:
        return "0 Byte"

    i = 0
    while i < len(SIZES) - 1 and size >= 1024 ** (i + 1):
        i += 1
    value = math.floor(size / 1024 ** i * 100 + 0.5) / 100
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZES[i]}"

def image_dimensions(image: StoredImage) -> str:
    if image.width and image.height:
        return f"{image.width} × {image.height}"
    return "Unknown"

def matches_search(image: StoredImage, search_term: str) -> bool:
    """Case-insensitive substring match on the name or the public id."""
    term = search_term.lower()
    return term in image.original_name.lower() or term in image.public_id.lower()

def filter_images(images: Iterable[StoredImage], search_term: str) -> List[StoredImage]:
    return [image for image in images if matches_search(image, search_term)]
