import pytest

from app.image_service import service
from app.storage.base import MediaStoreError
from app.exceptions import UploadFailedException, FetchFailedException


def make_resource(public_id="gallery/abc", **extra):
    resource = {
        "public_id": public_id,
        "secure_url": f"https://media.example.com/{public_id}.png",
        "created_at": "2024-05-01T10:00:00Z",
    }
    resource.update(extra)
    return resource


# ------------------------------
# upload_image
# ------------------------------

def test_upload_image_success(mocker):
    mock_store = mocker.Mock()
    mock_store.upload.return_value = make_resource(
        width=10, height=20, format="png", bytes=123, original_filename="cat"
    )

    descriptor = service.upload_image(mock_store, b"12345", filename="cat.png")

    mock_store.upload.assert_called_once_with(b"12345", folder="gallery", filename="cat.png")
    assert descriptor.public_id == "gallery/abc"
    assert descriptor.width == 10
    assert descriptor.format == "png"
    assert descriptor.bytes == 123
    assert descriptor.original_filename is None


def test_upload_image_store_error(mocker):
    mock_store = mocker.Mock()
    mock_store.upload.side_effect = MediaStoreError("quota exceeded")

    with pytest.raises(UploadFailedException) as exc_info:
        service.upload_image(mock_store, b"x", filename="f.png")

    assert exc_info.value.detail == "Upload failed"
    assert "quota" not in exc_info.value.detail


# ------------------------------
# fetch_images
# ------------------------------

def test_fetch_images_defaults_to_gallery_folder(mocker):
    mock_store = mocker.Mock()
    mock_store.search.return_value = {"resources": [], "total_count": 0}

    service.fetch_images(mock_store)

    mock_store.search.assert_called_once_with("gallery", max_results=500)


def test_fetch_images_defaults_original_filename(mocker):
    mock_store = mocker.Mock()
    mock_store.search.return_value = {
        "resources": [
            make_resource("gallery/one", original_filename="holiday"),
            make_resource("gallery/two"),
        ],
        "total_count": 812,
    }

    resp = service.fetch_images(mock_store, folder="gallery")

    assert [d.original_filename for d in resp.images] == ["holiday", "gallery/two"]
    assert resp.total_count == 812


def test_fetch_images_store_error(mocker):
    mock_store = mocker.Mock()
    mock_store.search.side_effect = MediaStoreError("boom")

    with pytest.raises(FetchFailedException):
        service.fetch_images(mock_store, folder="gallery")


def test_to_descriptor_keeps_missing_metadata_empty():
    descriptor = service.to_descriptor(make_resource("gallery/notes"))
    assert descriptor.width is None
    assert descriptor.height is None
    assert descriptor.format is None
    assert descriptor.bytes is None
