"""Object storage for venue and court images.

Images go to S3 compatible buckets and are served from a public base URL.
Uploads never overwrite an existing object and are abandoned after the
configured timeout.
"""
import asyncio
import logging
import re
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_BUCKETS = ("venue-images", "court-images", "court-photos")


def clean_file_name(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9.-] with an underscore."""
    return re.sub(r"[^a-zA-Z0-9.-]", "_", name or "")


def get_storage_client():
    """Create and return an S3 client for the configured endpoint."""
    return boto3.client(
        "s3",
        endpoint_url=settings.STORAGE_ENDPOINT_URL,
        aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        region_name=settings.STORAGE_REGION,
        config=Config(signature_version="s3v4"),
    )


class StorageService:
    """Uploads images and resolves their public URLs."""

    def __init__(self, client=None):
        self._client = client
        self.timeout = settings.UPLOAD_TIMEOUT_SECONDS
        self.public_url = settings.STORAGE_PUBLIC_URL.rstrip("/")

    @property
    def client(self):
        if self._client is None:
            self._client = get_storage_client()
        return self._client

    def get_public_url(self, bucket: str, path: str) -> str:
        """Public URL of an object."""
        return f"{self.public_url}/{bucket}/{path}"

    def _object_exists(self, bucket: str, path: str) -> bool:
        try:
            self.client.head_object(Bucket=bucket, Key=path)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise

    def _put(self, content: bytes, content_type: str, bucket: str, path: str):
        if self._object_exists(bucket, path):
            raise FileExistsError(f"{bucket}/{path} already exists")

        self.client.put_object(
            Bucket=bucket,
            Key=path,
            Body=content,
            ContentType=content_type,
            CacheControl=f"max-age={settings.UPLOAD_CACHE_CONTROL}",
        )

    async def upload_image(
        self,
        content: bytes,
        content_type: str,
        bucket: str,
        path: str,
    ) -> Optional[str]:
        """
        Upload an image and return its public URL.

        Args:
            content: Raw file bytes
            content_type: MIME type of the file
            bucket: One of ALLOWED_BUCKETS
            path: Object key inside the bucket

        Returns:
            Public URL, or None if the upload failed or timed out
        """
        if bucket not in ALLOWED_BUCKETS:
            logger.error(f"Refusing upload to unknown bucket '{bucket}'")
            return None

        logger.info(f"Uploading image to {bucket}/{path}")
        logger.info(f"File details: type={content_type}, size={len(content)} bytes")

        try:
            # boto3 is blocking, run it off the event loop
            await asyncio.wait_for(
                asyncio.to_thread(self._put, content, content_type, bucket, path),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Upload request timed out ({self.timeout:g}s): {bucket}/{path}")
            return None
        except Exception as e:
            logger.error(f"Exception uploading image to {bucket}/{path}: {e}")
            return None

        public_url = self.get_public_url(bucket, path)
        logger.info(f"Image uploaded successfully: {public_url}")
        return public_url


# Singleton instance
storage_service = StorageService()
