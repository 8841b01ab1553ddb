"""Map endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.maps import MapsPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    MapCreate,
    MapListResponse,
    MapResponse,
    MapSave,
    MapTemplateListResponse,
    MapTemplateResponse,
)

router = APIRouter(prefix="/api/maps", tags=["maps"])


def _maps_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> MapsPage:
    page = MapsPage(client, session)
    page.load()
    return page


def _not_found(map_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Map '{map_id}' not found",
    )


@router.get("", response_model=MapListResponse)
async def list_maps(search: str = "", page: MapsPage = Depends(_maps_page)) -> MapListResponse:
    maps = page.search(search)
    return MapListResponse(maps=[MapResponse(**m) for m in maps], count=len(maps))


@router.get("/templates", response_model=MapTemplateListResponse)
async def list_templates(page: MapsPage = Depends(_maps_page)) -> MapTemplateListResponse:
    """Public templates, most used first."""
    return MapTemplateListResponse(
        templates=[MapTemplateResponse(**t) for t in page.templates],
        count=len(page.templates),
    )


@router.post("", response_model=MapResponse, status_code=status.HTTP_201_CREATED)
async def create_map(body: MapCreate, page: MapsPage = Depends(_maps_page)) -> MapResponse:
    if not body.title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required",
        )
    if body.template_id and page.find(page.templates, body.template_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template '{body.template_id}' not found",
        )
    created = page.create(
        title=body.title,
        description=body.description,
        template_id=body.template_id,
        is_public=body.is_public,
    )
    if created is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create map",
        )
    return MapResponse(**created)


@router.put("/{map_id}/data", response_model=MapResponse)
async def save_map(map_id: str, body: MapSave, page: MapsPage = Depends(_maps_page)) -> MapResponse:
    if page.find(page.maps, map_id) is None:
        raise _not_found(map_id)
    saved = page.save(map_id, body.map_data)
    if saved is None:
        raise _not_found(map_id)
    return MapResponse(**saved)


@router.post("/{map_id}/visibility", response_model=MapResponse)
async def toggle_visibility(map_id: str, page: MapsPage = Depends(_maps_page)) -> MapResponse:
    updated = page.toggle_public(map_id)
    if updated is None:
        raise _not_found(map_id)
    return MapResponse(**updated)


@router.delete("/{map_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_map(map_id: str, page: MapsPage = Depends(_maps_page)) -> None:
    if not page.delete(map_id):
        raise _not_found(map_id)
