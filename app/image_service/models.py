from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

class Descriptor(BaseModel):
    """Normalized record describing one stored image."""
    public_id: str
    secure_url: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    bytes: Optional[int] = None
    created_at: datetime
    original_filename: Optional[str] = None

class ListImagesResponse(BaseModel):
    images: List[Descriptor]
    total_count: int

class ErrorResponse(BaseModel):
    error: str
