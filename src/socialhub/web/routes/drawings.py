"""Drawing endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.drawings import DrawingsPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    CanvasSave,
    DrawingCreate,
    DrawingListResponse,
    DrawingResponse,
)

router = APIRouter(prefix="/api/drawings", tags=["drawings"])

MAX_THUMBNAIL_BYTES = 5 * 1024 * 1024


def _drawings_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> DrawingsPage:
    page = DrawingsPage(client, session)
    page.load()
    return page


def _not_found(drawing_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Drawing '{drawing_id}' not found",
    )


@router.get("", response_model=DrawingListResponse)
async def list_drawings(
    search: str = "",
    page: DrawingsPage = Depends(_drawings_page),
) -> DrawingListResponse:
    drawings = page.search(search)
    return DrawingListResponse(
        drawings=[DrawingResponse(**d) for d in drawings],
        count=len(drawings),
    )


@router.post("", response_model=DrawingResponse, status_code=status.HTTP_201_CREATED)
async def create_drawing(
    body: DrawingCreate,
    page: DrawingsPage = Depends(_drawings_page),
) -> DrawingResponse:
    if not body.title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required",
        )
    drawing = page.create(
        title=body.title,
        image_data=body.image_data,
        width=body.width,
        height=body.height,
        is_public=body.is_public,
    )
    if drawing is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create drawing",
        )
    return DrawingResponse(**drawing)


@router.put("/{drawing_id}/canvas", response_model=DrawingResponse)
async def save_canvas(
    drawing_id: str,
    body: CanvasSave,
    page: DrawingsPage = Depends(_drawings_page),
) -> DrawingResponse:
    """Store new canvas contents."""
    if page.find(page.drawings, drawing_id) is None:
        raise _not_found(drawing_id)
    drawing = page.save(drawing_id, body.image_data, body.width, body.height)
    if drawing is None:
        raise _not_found(drawing_id)
    return DrawingResponse(**drawing)


@router.put("/{drawing_id}/thumbnail", response_model=DrawingResponse)
async def upload_thumbnail(
    drawing_id: str,
    request: Request,
    page: DrawingsPage = Depends(_drawings_page),
) -> DrawingResponse:
    """Upload a PNG rendering (raw request body)."""
    if page.find(page.drawings, drawing_id) is None:
        raise _not_found(drawing_id)

    data = await request.body()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty upload",
        )
    if len(data) > MAX_THUMBNAIL_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Thumbnail too large",
        )

    drawing = page.upload_thumbnail(drawing_id, data)
    if drawing is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not store thumbnail",
        )
    return DrawingResponse(**drawing)


@router.delete("/{drawing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_drawing(drawing_id: str, page: DrawingsPage = Depends(_drawings_page)) -> None:
    if not page.delete(drawing_id):
        raise _not_found(drawing_id)
