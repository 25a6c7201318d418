"""Files controller — admin API routes for file management."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from sharelink.api.files.dto.file import FileResponse, FileStatsResponse, FileStatus
from sharelink.api.files.services.files_service import FilesService
from sharelink.auth import require_admin
from sharelink.dependencies import get_files_service

router = APIRouter(prefix="/api/files", tags=["Files"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[FileResponse])
def list_files(
    status_filter: FileStatus = Query("all", alias="status"),
    q: str | None = Query(None, max_length=255),
    service: FilesService = Depends(get_files_service),
):
    return service.list_files(status_filter, q)


@router.get("/stats", response_model=FileStatsResponse)
def get_stats(service: FilesService = Depends(get_files_service)):
    return service.get_stats()


@router.get("/{file_id}", response_model=FileResponse)
def get_file(file_id: str, service: FilesService = Depends(get_files_service)):
    file = service.get_file(file_id)
    if not file:
        raise HTTPException(status_code=404, detail="File not found")
    return file


@router.post("/{file_id}/deactivate", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_file(file_id: str, service: FilesService = Depends(get_files_service)):
    if not service.deactivate_file(file_id):
        raise HTTPException(status_code=404, detail="File not found")


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(file_id: str, service: FilesService = Depends(get_files_service)):
    if not service.delete_file(file_id):
        raise HTTPException(status_code=404, detail="File not found")
