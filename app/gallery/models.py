from typing import Any, Dict, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel

class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"

class StoredImage(BaseModel):
    """One uploaded image as the gallery page knows it."""
    id: str
    url: str
    public_id: str
    original_name: str
    uploaded_at: datetime
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    bytes: Optional[int] = None

    @classmethod
    def from_descriptor(cls, data: Dict[str, Any], original_name: Optional[str] = None) -> "StoredImage":
        public_id = data["public_id"]
        name = original_name or data.get("original_filename") or public_id.split("/")[-1] or "Unknown"
        return cls(
            id=public_id,
            url=data["secure_url"],
            public_id=public_id,
            original_name=name,
            uploaded_at=data["created_at"],
            width=data.get("width"),
            height=data.get("height"),
            format=data.get("format"),
            bytes=data.get("bytes"),
        )

class SelectedFile(BaseModel):
    """A file picked in the file dialog or dropped on the page."""
    name: str
    content_type: str
    data: bytes = b""
