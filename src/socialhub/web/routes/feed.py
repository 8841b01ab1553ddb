"""Feed endpoints: timeline, likes, bookmarks, comments."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from socialhub.auth.session import SessionHolder
from socialhub.config.app_config import load_app_config
from socialhub.db.client import DataClient
from socialhub.pages.feed import TABS, VISIBILITIES, FeedPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    CommentCreate,
    CommentResponse,
    FeedPostCreate,
    FeedResponse,
    PostResponse,
)

router = APIRouter(prefix="/api/feed", tags=["feed"])


def _feed_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> FeedPage:
    return FeedPage(client, session, page_size=load_app_config().feed.page_size)


def _loaded(page: FeedPage, tab: str = "for-you") -> FeedPage:
    page.load(tab)
    return page


def _not_found(post_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Post '{post_id}' not found",
    )


@router.get("", response_model=FeedResponse)
async def get_feed(
    tab: str = Query(default="for-you"),
    page: FeedPage = Depends(_feed_page),
) -> FeedResponse:
    """Newest public posts with the caller's like/bookmark flags."""
    if tab not in TABS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Tab must be one of: {', '.join(TABS)}",
        )
    _loaded(page, tab)
    return FeedResponse(posts=[PostResponse(**p) for p in page.posts], count=len(page.posts))


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(body: FeedPostCreate, page: FeedPage = Depends(_feed_page)) -> PostResponse:
    if not body.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Content is required",
        )
    if body.visibility not in VISIBILITIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Visibility must be one of: {', '.join(VISIBILITIES)}",
        )
    post = page.create(body.content, body.visibility, body.location, body.tags)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create post",
        )
    return PostResponse(**post)


@router.post("/{post_id}/like", response_model=PostResponse)
async def toggle_like(post_id: str, page: FeedPage = Depends(_feed_page)) -> PostResponse:
    _loaded(page)
    if page.find(page.posts, post_id) is None:
        raise _not_found(post_id)
    post = page.toggle_like(post_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update like",
        )
    return PostResponse(**post)


@router.post("/{post_id}/bookmark", response_model=PostResponse)
async def toggle_bookmark(post_id: str, page: FeedPage = Depends(_feed_page)) -> PostResponse:
    _loaded(page)
    if page.find(page.posts, post_id) is None:
        raise _not_found(post_id)
    post = page.toggle_bookmark(post_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update bookmark",
        )
    return PostResponse(**post)


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: str, page: FeedPage = Depends(_feed_page)) -> list[CommentResponse]:
    """Comments on a post, oldest first."""
    _loaded(page)
    comments = page.open_comments(post_id)
    if page.selected is None:
        raise _not_found(post_id)
    return [CommentResponse(**c) for c in comments]


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str,
    body: CommentCreate,
    page: FeedPage = Depends(_feed_page),
) -> CommentResponse:
    if not body.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Comment is empty",
        )
    _loaded(page)
    page.open_comments(post_id)
    if page.selected is None:
        raise _not_found(post_id)
    comment = page.add_comment(body.content)
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not add comment",
        )
    return CommentResponse(**comment)
