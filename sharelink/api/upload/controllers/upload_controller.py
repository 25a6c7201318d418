"""Upload controller — handles multipart file uploads."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from sharelink import config
from sharelink.api.upload.dto.upload import UploadResponse
from sharelink.api.upload.services.upload_service import UploadService
from sharelink.dependencies import get_upload_service
from sharelink.errors import FileTooLarge

router = APIRouter(prefix="/api", tags=["Upload"])

CHUNK_SIZE = 1024 * 1024  # 1MB
UNKNOWN_ORIGIN = "unknown"


def get_origin_id(request: Request) -> str:
    """Client address from proxy headers. Clients can forge these."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip", "").strip()
    return real_ip or UNKNOWN_ORIGIN


def share_base_url(request: Request) -> str:
    if config.SHARE_BASE_URL:
        return config.SHARE_BASE_URL
    origin = request.headers.get("origin")
    if origin:
        return origin.rstrip("/")
    return str(request.base_url).rstrip("/")


async def read_limited(file: UploadFile, max_size: int) -> bytes:
    """Read the upload, giving up as soon as it passes ``max_size``."""
    chunks = []
    size = 0
    while chunk := await file.read(CHUNK_SIZE):
        size += len(chunk)
        if size > max_size:
            raise FileTooLarge(f"Upload passed {max_size} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    request: Request,
    file: UploadFile = File(...),
    original_filename: str | None = Form(None, alias="originalFilename"),
    password: str | None = Form(None),
    service: UploadService = Depends(get_upload_service),
):
    """Upload a file and get back its share link."""
    filename = original_filename if original_filename is not None else (file.filename or "")

    # Cheap rejections before the body is read
    service.validate(file.size or 0, filename, file.content_type, password)
    data = await read_limited(file, service.max_file_size)

    result = await run_in_threadpool(
        service.upload,
        data,
        filename,
        file.content_type,
        get_origin_id(request),
        password,
        file.size,
    )
    record = result.record

    return UploadResponse(
        file_id=record.id,
        download_url=f"{share_base_url(request)}/file/{record.id}",
        filename=record.original_filename,
        size=record.file_size,
        expires_at=record.expires_at,
        remaining_uploads=result.remaining_uploads,
    )
