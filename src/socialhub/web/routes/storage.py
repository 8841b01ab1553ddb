"""Serves uploaded objects at their public URLs."""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from socialhub.db.client import DataClient
from socialhub.db.errors import StorageError
from socialhub.web.dependencies import get_data_client

router = APIRouter(prefix="/storage", tags=["storage"])


@router.get("/{bucket}/{path:path}")
async def get_object(
    bucket: str,
    path: str,
    client: DataClient = Depends(get_data_client),
) -> FileResponse:
    try:
        target = client.storage.from_(bucket).local_path(path)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        ) from e

    if not target.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Object '{bucket}/{path}' not found",
        )
    return FileResponse(target)
