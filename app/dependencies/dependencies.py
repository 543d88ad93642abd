from fastapi import Request
from app.storage.base import MediaStore

def get_media_store(request: Request) -> MediaStore:
    """Dependency provider for the media store"""
    return request.app.state.store
