"""Blob storage for article images.

Two backends share one small interface (``put``/``url``/``exists``/
``delete``): Amazon S3 through boto3, and the local filesystem through
Django's ``FileSystemStorage``. ``BLOB_BACKEND`` picks one at startup.
Articles store the returned key, never the URL.
"""

import logging
import os
import uuid

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.core.files.storage import FileSystemStorage

logger = logging.getLogger(__name__)

ARTICLE_IMAGE_DIR = "images/articles"


def build_key(directory: str, filename: str) -> str:
    """Unique key under ``directory`` keeping the upload's extension."""
    ext = os.path.splitext(filename or "")[1].lower()
    return f"{directory}/{uuid.uuid4().hex}{ext}"


class BlobStore:
    """Interface shared by the storage backends."""

    def put(self, directory: str, uploaded_file) -> str:
        raise NotImplementedError

    def url(self, key: str) -> str:
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Files under ``MEDIA_ROOT``, served from ``MEDIA_URL``."""

    def __init__(self, location=None, base_url=None):
        self.storage = FileSystemStorage(
            location=location or settings.MEDIA_ROOT,
            base_url=base_url or settings.MEDIA_URL,
        )

    def put(self, directory: str, uploaded_file) -> str:
        key = self.storage.save(build_key(directory, uploaded_file.name), uploaded_file)
        logger.info("Image stored", extra={"backend": "local", "key": key})
        return key

    def url(self, key: str) -> str:
        return self.storage.url(key)

    def exists(self, key: str) -> bool:
        return self.storage.exists(key)

    def delete(self, key: str) -> None:
        self.storage.delete(key)


class S3BlobStore(BlobStore):
    """Public-read objects in a single S3 bucket."""

    def __init__(self, bucket_name=None, region_name=None, client=None):
        self.bucket_name = bucket_name or settings.AWS_STORAGE_BUCKET_NAME
        self.region_name = region_name or settings.AWS_S3_REGION_NAME
        if not self.bucket_name:
            raise ImproperlyConfigured("AWS_STORAGE_BUCKET_NAME must be set when BLOB_BACKEND=s3")
        self.s3_client = client or self._create_s3_client()

    def _create_s3_client(self):
        boto_config = BotoConfig(
            region_name=self.region_name,
            signature_version="s3v4",
            retries={"max_attempts": 3, "mode": "standard"},
        )
        return boto3.client(
            "s3",
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            config=boto_config,
        )

    def put(self, directory: str, uploaded_file) -> str:
        key = build_key(directory, uploaded_file.name)
        extra_args = {"ACL": "public-read"}
        content_type = getattr(uploaded_file, "content_type", None)
        if content_type:
            extra_args["ContentType"] = content_type
        self.s3_client.upload_fileobj(uploaded_file, self.bucket_name, key, ExtraArgs=extra_args)
        logger.info("Image stored", extra={"backend": "s3", "bucket": self.bucket_name, "key": key})
        return key

    def url(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{self.region_name}.amazonaws.com/{key}"

    def exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
        return True

    def delete(self, key: str) -> None:
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError):
            logger.error("S3 delete failed", extra={"bucket": self.bucket_name, "key": key})
            raise


_store: BlobStore | None = None


def get_blob_store() -> BlobStore:
    """Return the process-wide blob store selected by ``BLOB_BACKEND``."""

    global _store
    if _store is None:
        backend = settings.BLOB_BACKEND
        if backend == "s3":
            _store = S3BlobStore()
        elif backend == "local":
            _store = LocalBlobStore()
        else:
            raise ImproperlyConfigured(f"Unknown BLOB_BACKEND {backend!r}; expected 'local' or 's3'")
    return _store


__all__ = [
    "ARTICLE_IMAGE_DIR",
    "BlobStore",
    "LocalBlobStore",
    "S3BlobStore",
    "get_blob_store",
]
