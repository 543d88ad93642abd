import os
import pytest
from moto import mock_aws
from fastapi.testclient import TestClient

# Set test environment variables BEFORE importing app modules

# Dummy AWS credentials for moto
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

MEDIA_STORE_URL = "s3://testing:testing@image-gallery-bucket?region=us-east-1"
os.environ["MEDIA_STORE_URL"] = MEDIA_STORE_URL
os.environ.pop("CLOUDINARY_URL", None)

from app.main import app
from app.storage.s3 import S3MediaStore


@pytest.fixture(scope="function")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"


@pytest.fixture(scope="function")
def s3_store(aws_credentials):
    """S3 media store backed by moto; the bucket is created on init."""
    with mock_aws():
        yield S3MediaStore.from_url(MEDIA_STORE_URL)


@pytest.fixture(scope="function")
def test_client(s3_store):
    with TestClient(app) as client:
        # Replace the store built by the lifespan with the mocked one
        app.state.store = s3_store
        yield client
