import boto3
from typing import Any, Dict, List, Optional
from botocore.exceptions import BotoCoreError, ClientError
from datetime import datetime, timezone
from io import BytesIO
from urllib.parse import parse_qs, quote, unquote, urlsplit
from PIL import Image, UnidentifiedImageError
import logging
import os
import uuid

from app.storage.base import MediaStore, MediaStoreError

log = logging.getLogger(__name__)

# -------------------------
# S3 Media Store
# -------------------------
class S3MediaStore(MediaStore):
    """
        Media store on an S3-compatible bucket.

        S3 does not inspect what it stores, so the adapter infers format and
        dimensions itself and keeps them, with the original filename, as
        object metadata. Objects are keyed by their public id.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_url: Optional[str] = None,
    ):
        session = boto3.session.Session(region_name=region)
        kwargs = {
            "aws_access_key_id": aws_access_key_id,
            "aws_secret_access_key": aws_secret_access_key,
        }
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self.client = session.client("s3", **kwargs)
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_url = public_url
        log.info("Initialized S3 client for bucket %s", bucket)

        # Ensure bucket exists at initialization
        self.ensure_bucket()

    @classmethod
    def from_url(cls, url: str) -> "S3MediaStore":
        """Parses s3://<key>:<secret>@<bucket>?region=..&endpoint_url=..&public_url=.."""
        parts = urlsplit(url)
        if not parts.hostname:
            raise ValueError("S3 URL must name a bucket: s3://key:secret@bucket")
        query = {k: v[-1] for k, v in parse_qs(parts.query).items()}
        return cls(
            bucket=parts.hostname,
            region=query.get("region", "us-east-1"),
            aws_access_key_id=unquote(parts.username) if parts.username else None,
            aws_secret_access_key=unquote(parts.password) if parts.password else None,
            endpoint_url=query.get("endpoint_url"),
            public_url=query.get("public_url"),
        )

    def ensure_bucket(self):
        try:
            self.client.head_bucket(Bucket=self.bucket)
            log.debug("Bucket %s already exists", self.bucket)
        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            if error_code in ("404", "NoSuchBucket"):
                self.client.create_bucket(Bucket=self.bucket)
                log.info("Created bucket %s", self.bucket)
            else:
                log.error("Failed to check/create bucket: %s", e)
                raise

    def object_url(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, data: bytes, folder: str, filename: Optional[str] = None) -> Dict[str, Any]:
        public_id = f"{folder}/{uuid.uuid4().hex}"
        info = inspect_bytes(data, filename)
        metadata = {k: str(v) for k, v in info.items() if v is not None and k != "content_type"}
        if filename:
            # sent as x-amz-meta-* headers: ASCII only, no underscores in the key
            metadata["filename"] = quote(os.path.splitext(filename)[0])

        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=public_id,
                Body=data,
                ContentType=info.get("content_type") or "application/octet-stream",
                Metadata=metadata,
            )
            head = self.client.head_object(Bucket=self.bucket, Key=public_id)
        except (BotoCoreError, ClientError) as e:
            raise MediaStoreError(f"S3 upload failed: {e}") from e

        log.debug("Uploaded %s to s3://%s/%s", filename, self.bucket, public_id)
        return self.to_resource(public_id, head)

    def search(self, folder: str, max_results: int) -> Dict[str, Any]:
        try:
            objects: List[Dict[str, Any]] = []
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=f"{folder}/"):
                objects.extend(page.get("Contents", []))

            objects.sort(key=lambda o: (o["LastModified"], o["Key"]), reverse=True)
            resources = [
                self.to_resource(o["Key"], self.client.head_object(Bucket=self.bucket, Key=o["Key"]))
                for o in objects[:max_results]
            ]
        except (BotoCoreError, ClientError) as e:
            raise MediaStoreError(f"S3 search failed: {e}") from e

        log.debug("Found %d objects under s3://%s/%s/", len(objects), self.bucket, folder)
        return {"resources": resources, "total_count": len(objects)}

    def to_resource(self, key: str, head: Dict[str, Any]) -> Dict[str, Any]:
        meta = head.get("Metadata", {})
        created_at = head.get("LastModified") or datetime.now(timezone.utc)
        return {
            "public_id": key,
            "secure_url": self.object_url(key),
            "width": int(meta["width"]) if "width" in meta else None,
            "height": int(meta["height"]) if "height" in meta else None,
            "format": meta.get("format"),
            "bytes": head.get("ContentLength"),
            "created_at": created_at,
            "original_filename": unquote(meta["filename"]) if "filename" in meta else None,
        }

    def close(self):
        log.info("Closed S3 client")

MIME_MAP = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
}

# format names as the hosted store reports them
FORMAT_NAMES = {
    "jpeg": "jpg",
    "tiff": "tif",
}

def inspect_bytes(data: bytes, filename: Optional[str]) -> Dict[str, Any]:
    """
        Infers the resource type of an upload: images get their real format
        and dimensions, anything else falls back to the filename extension.
    """
    try:
        with Image.open(BytesIO(data)) as img:
            return {
                "format": FORMAT_NAMES.get(img.format.lower(), img.format.lower()),
                "width": img.width,
                "height": img.height,
                "content_type": MIME_MAP.get(img.format.upper()),
            }
    except (UnidentifiedImageError, OSError):
        ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
        return {"format": FORMAT_NAMES.get(ext, ext) or None, "content_type": None}
