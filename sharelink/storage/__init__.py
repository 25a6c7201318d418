from sharelink import config
from sharelink.storage.base import ObjectStore, ObjectStoreError
from sharelink.storage.local import LocalObjectStore
from sharelink.storage.s3 import S3ObjectStore


def build_object_store() -> ObjectStore:
    """Build the configured backend. Called once per process at startup."""
    if config.STORAGE_BACKEND == "s3":
        return S3ObjectStore(
            bucket=config.S3_BUCKET,
            endpoint_url=config.S3_ENDPOINT,
            access_key=config.S3_ACCESS_KEY,
            secret_key=config.S3_SECRET_KEY,
            region=config.S3_REGION,
            connect_timeout=config.STORAGE_CONNECT_TIMEOUT,
            read_timeout=config.STORAGE_READ_TIMEOUT,
        )
    if config.STORAGE_BACKEND == "local":
        return LocalObjectStore(
            base_dir=config.FILES_DIR,
            public_base_url=config.PUBLIC_BASE_URL,
            signing_secret=config.SIGNING_SECRET,
        )
    raise ValueError(f"Unknown storage backend: {config.STORAGE_BACKEND}")


__all__ = [
    "LocalObjectStore",
    "ObjectStore",
    "ObjectStoreError",
    "S3ObjectStore",
    "build_object_store",
]
