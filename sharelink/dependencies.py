"""Service wiring.

Clients (database engine, object store) are built once per process and
handed to every service explicitly. Routes pull the services off
``app.state`` through the getters below.
"""

from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.orm import sessionmaker

from sharelink.api.download.services.download_service import DownloadService
from sharelink.api.files.repositories.files_repository import FilesRepository
from sharelink.api.files.services.files_service import FilesService
from sharelink.api.ratelimit.repositories.rate_limit_repository import RateLimitRepository
from sharelink.api.ratelimit.services.rate_limiter import RateLimiter
from sharelink.api.upload.services.upload_service import UploadService
from sharelink.config import SIGNED_URL_TTL_SECONDS, UPLOAD_LIMIT_PER_DAY
from sharelink.lifecycle import utcnow
from sharelink.storage import ObjectStore


@dataclass
class Services:
    store: ObjectStore
    rate_limiter: RateLimiter
    upload: UploadService
    download: DownloadService
    files: FilesService


def build_services(
    session_factory: sessionmaker | None = None,
    store: ObjectStore | None = None,
    upload_limit: int = UPLOAD_LIMIT_PER_DAY,
    signed_url_ttl: int = SIGNED_URL_TTL_SECONDS,
    clock=utcnow,
) -> Services:
    if session_factory is None:
        from sharelink.database import SessionLocal

        session_factory = SessionLocal
    if store is None:
        from sharelink.storage import build_object_store

        store = build_object_store()

    files_repository = FilesRepository(session_factory)
    rate_limiter = RateLimiter(RateLimitRepository(session_factory), limit=upload_limit, clock=clock)

    return Services(
        store=store,
        rate_limiter=rate_limiter,
        upload=UploadService(files_repository, rate_limiter, store, clock=clock),
        download=DownloadService(files_repository, store, signed_url_ttl=signed_url_ttl, clock=clock),
        files=FilesService(files_repository, store, clock=clock),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_upload_service(request: Request) -> UploadService:
    return get_services(request).upload


def get_download_service(request: Request) -> DownloadService:
    return get_services(request).download


def get_files_service(request: Request) -> FilesService:
    return get_services(request).files
