"""Posts API: paginated public posts and post creation.

Errors here are reported as {"error": "..."} bodies for existing clients
of this endpoint.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from socialhub.auth.session import SessionHolder
from socialhub.config.app_config import load_app_config
from socialhub.db.client import DataClient
from socialhub.db.errors import DataClientError
from socialhub.pages.feed import FeedPage, list_public_posts
from socialhub.web.dependencies import get_data_client, optional_session

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])


class PostCreateRequest(BaseModel):
    content: str | None = None
    image_url: str | None = None
    video_url: str | None = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("")
async def list_posts(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    client: DataClient = Depends(get_data_client),
    session: SessionHolder | None = Depends(optional_session),
) -> Any:
    """Public posts newest first, with like/comment counts."""
    feed = load_app_config().feed
    size = min(limit or feed.api_default_limit, feed.api_max_limit)
    try:
        posts = list_public_posts(
            client,
            page=page,
            limit=size,
            viewer_id=session.user_id if session else None,
        )
    except DataClientError as e:
        logger.error("posts.fetch_failed", error=str(e))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch posts")
    return {"posts": posts}


@router.post("")
async def create_post(
    body: PostCreateRequest,
    client: DataClient = Depends(get_data_client),
    session: SessionHolder | None = Depends(optional_session),
) -> Any:
    if session is None or not session.is_authenticated:
        return _error(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    if not body.content or not body.content.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Content is required")

    post = FeedPage(client, session).create(
        body.content,
        image_url=body.image_url,
        video_url=body.video_url,
    )
    if post is None:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create post")

    post["user_profile"] = post.pop("users", None)
    return {"post": post}
