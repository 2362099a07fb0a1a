"""Object storage on Cloudflare R2 (S3 API)"""

import logging
from functools import lru_cache

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import (
    PRESIGNED_URL_EXPIRATION,
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_NAME,
    R2_SECRET_ACCESS_KEY,
)

logger = logging.getLogger(__name__)

# Extensions served inline when opened through a presigned URL
INLINE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".pdf")


class StorageError(Exception):
    """Raised when the object store rejects or fails an operation"""


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


class R2ObjectStore:
    """Private bucket; objects are read back through short-lived presigned URLs"""

    def __init__(self, client=None, bucket: str = R2_BUCKET_NAME):
        self._client = client
        self.bucket = bucket

    @property
    def client(self):
        if self._client is None:
            self._client = get_r2_client()
        return self._client

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ACL="private",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Failed to upload {key} to R2: {e}")
            raise StorageError(f"Upload failed for {key}") from e

        logger.info(f"✅ Uploaded {key} ({len(data)} bytes)")
        return key

    def get_url(self, key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
        """Generate a presigned URL for accessing a private object in R2."""
        params = {"Bucket": self.bucket, "Key": key}
        if key.lower().endswith(INLINE_EXTENSIONS):
            params["ResponseContentDisposition"] = "inline"

        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params=params,
                ExpiresIn=expiration,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
            raise StorageError(f"Cannot sign URL for {key}") from e


@lru_cache(maxsize=1)
def get_object_store() -> R2ObjectStore:
    return R2ObjectStore()
