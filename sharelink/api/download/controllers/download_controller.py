"""Download controller — share lookup, download resolution and local blob serving."""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from sharelink.api.download.dto.download import (
    FileInfo,
    ResolveByIdRequest,
    ResolvedDownload,
    ResolveRequest,
)
from sharelink.api.download.services.download_service import DownloadService
from sharelink.dependencies import Services, get_download_service, get_services
from sharelink.storage import LocalObjectStore, ObjectStoreError

router = APIRouter(tags=["Download"])

CHUNK_SIZE = 1024 * 1024  # 1MB


@router.get("/api/share/{file_id}", response_model=FileInfo)
async def get_share(file_id: str, service: DownloadService = Depends(get_download_service)):
    """Public details of a live share, for the download page."""
    return await run_in_threadpool(service.describe, file_id)


@router.post("/api/share/{file_id}/resolve", response_model=ResolvedDownload)
async def resolve_share(
    file_id: str,
    body: ResolveRequest | None = None,
    service: DownloadService = Depends(get_download_service),
):
    password = body.password if body else None
    return await run_in_threadpool(service.resolve, file_id, password)


@router.post("/api/resolve", response_model=ResolvedDownload)
async def resolve(body: ResolveByIdRequest, service: DownloadService = Depends(get_download_service)):
    return await run_in_threadpool(service.resolve, body.file_id, body.password)


@router.get("/blob/{key}")
async def get_blob(
    key: str,
    expires: int = Query(...),
    signature: str = Query(...),
    services: Services = Depends(get_services),
):
    """Serve a blob behind a signed URL issued by the local store."""
    store = services.store
    if not isinstance(store, LocalObjectStore):
        raise HTTPException(status_code=404, detail="Not found")

    try:
        path, content_type = store.open(key, expires, signature)
    except ObjectStoreError:
        raise HTTPException(status_code=403, detail="Invalid or expired link")

    def iterfile():
        with open(path, "rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                yield chunk

    # Content-Type set verbatim so text/* does not gain a charset parameter
    return StreamingResponse(
        iterfile(),
        headers={
            "Content-Type": content_type,
            "Content-Length": str(path.stat().st_size),
        },
    )
