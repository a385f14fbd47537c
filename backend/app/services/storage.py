"""
Object storage for uploaded study materials.

Files live in one of three buckets chosen from the material type on upload
and recovered from the stored path on delete:

    study-documents   pdf, document, ebook (and anything unknown)
    study-images      image, diagram
    study-videos      video, lecture

Backends:
    local   files under STORAGE_ROOT/<bucket>/<key> (default)
    s3      S3 or an S3-compatible endpoint (R2, MinIO) via boto3

Configuration:
    STORAGE_BACKEND, STORAGE_ROOT, STORAGE_PUBLIC_BASE_URL
    AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_S3_ENDPOINT, AWS_REGION
"""

import os
import logging
from pathlib import Path
from typing import Iterable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

DOCUMENTS_BUCKET = "study-documents"
IMAGES_BUCKET = "study-images"
VIDEOS_BUCKET = "study-videos"
BUCKETS = (DOCUMENTS_BUCKET, IMAGES_BUCKET, VIDEOS_BUCKET)

MATERIAL_TYPE_BUCKETS = {
    "pdf": DOCUMENTS_BUCKET,
    "document": DOCUMENTS_BUCKET,
    "ebook": DOCUMENTS_BUCKET,
    "image": IMAGES_BUCKET,
    "diagram": IMAGES_BUCKET,
    "video": VIDEOS_BUCKET,
    "lecture": VIDEOS_BUCKET,
}


class StorageError(Exception):
    """Raised when the storage backend rejects an operation."""
    pass


def bucket_for_material_type(material_type: Optional[str]) -> str:
    return MATERIAL_TYPE_BUCKETS.get((material_type or "").lower(), DOCUMENTS_BUCKET)


def bucket_for_path(file_path: str) -> str:
    for bucket in BUCKETS:
        if bucket in file_path:
            return bucket
    return DOCUMENTS_BUCKET


class ObjectStorage:
    """Interface every backend implements."""

    def upload(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store data and return the object path."""
        raise NotImplementedError

    def remove(self, bucket: str, paths: Iterable[str]) -> None:
        raise NotImplementedError

    def public_url(self, bucket: str, path: str) -> str:
        raise NotImplementedError


class LocalObjectStorage(ObjectStorage):
    def __init__(self, root: Optional[str] = None, public_base_url: Optional[str] = None):
        self.root = Path(root or os.getenv("STORAGE_ROOT", "./storage"))
        self.public_base_url = (public_base_url or os.getenv("STORAGE_PUBLIC_BASE_URL", "/storage")).rstrip("/")

    def _resolve(self, bucket: str, key: str) -> Path:
        bucket_root = (self.root / bucket).resolve()
        target = (bucket_root / key).resolve()
        if bucket_root not in target.parents:
            raise StorageError(f"Invalid object key: {key}")
        return target

    def upload(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        target = self._resolve(bucket, key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(str(e))
        return key

    def remove(self, bucket: str, paths: Iterable[str]) -> None:
        for path in paths:
            target = self._resolve(bucket, path)
            try:
                target.unlink()
            except FileNotFoundError:
                raise StorageError(f"Object not found: {bucket}/{path}")
            except OSError as e:
                raise StorageError(str(e))

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{path}"


class S3ObjectStorage(ObjectStorage):
    def __init__(self):
        self.endpoint = os.getenv("AWS_S3_ENDPOINT")
        self.region = os.getenv("AWS_REGION", "us-east-1")
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=self.region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
            config=Config(retries={"max_attempts": 1}),
        )

    def upload(self, bucket: str, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(str(e))
        return key

    def remove(self, bucket: str, paths: Iterable[str]) -> None:
        objects = [{"Key": p} for p in paths]
        if not objects:
            return
        try:
            self._client.delete_objects(Bucket=bucket, Delete={"Objects": objects})
        except (BotoCoreError, ClientError) as e:
            raise StorageError(str(e))

    def public_url(self, bucket: str, path: str) -> str:
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{bucket}/{path}"
        return f"https://{bucket}.s3.{self.region}.amazonaws.com/{path}"


_storage: Optional[ObjectStorage] = None


def get_storage() -> ObjectStorage:
    """Lazily build the configured backend."""
    global _storage

    if _storage is None:
        backend = os.getenv("STORAGE_BACKEND", "local").lower()
        if backend == "s3":
            _storage = S3ObjectStorage()
        elif backend == "local":
            _storage = LocalObjectStorage()
        else:
            raise ValueError(f"Unknown STORAGE_BACKEND '{backend}' (expected 'local' or 's3')")
        logger.info(f"Object storage backend: {backend}")

    return _storage


def set_storage(storage: Optional[ObjectStorage]) -> None:
    """Swap the backend (tests, or a reconfigured deployment)."""
    global _storage
    _storage = storage
