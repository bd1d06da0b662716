# app/core/s3.py
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000"


class ObjectStoreError(Exception):
    """Raised when bytes cannot be written to or removed from the bucket."""


def get_s3_client():
    """
    Initializes and returns an S3 client.
    Conditionally configures the endpoint_url for local development with MinIO.
    """
    if settings.AWS_S3_ENDPOINT_URL:
        return boto3.client(
            "s3",
            endpoint_url=settings.AWS_S3_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_S3_REGION,
        )
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_S3_REGION,
    )


def public_url_for(path: str) -> str:
    if settings.AWS_S3_PUBLIC_BASE_URL:
        return f"{settings.AWS_S3_PUBLIC_BASE_URL.rstrip('/')}/{path}"
    if settings.AWS_S3_ENDPOINT_URL:
        return f"{settings.AWS_S3_ENDPOINT_URL.rstrip('/')}/{settings.AWS_S3_BUCKET_NAME}/{path}"
    return (
        f"https://{settings.AWS_S3_BUCKET_NAME}.s3."
        f"{settings.AWS_S3_REGION}.amazonaws.com/{path}"
    )


class ObjectStore:
    """Stores uploaded media in the configured bucket and hands back public URLs."""

    def __init__(self, client=None, bucket: Optional[str] = None):
        self.client = client or get_s3_client()
        self.bucket = bucket or settings.AWS_S3_BUCKET_NAME

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type or "application/octet-stream",
                CacheControl=CACHE_CONTROL,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to upload %s: %s", path, e)
            raise ObjectStoreError(f"upload failed for {path}") from e
        return public_url_for(path)

    def delete(self, path: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=path)
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to delete %s: %s", path, e)
            raise ObjectStoreError(f"delete failed for {path}") from e


def get_object_store() -> ObjectStore:
    return ObjectStore()
