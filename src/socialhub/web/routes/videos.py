"""Video endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient
from socialhub.pages.videos import INTERACTIONS, VideosPage
from socialhub.web.dependencies import current_session, get_data_client
from socialhub.web.schemas import (
    PlaylistCreate,
    PlaylistResponse,
    VideoCommentCreate,
    VideoCommentResponse,
    VideoCreate,
    VideoListResponse,
    VideoPlayResponse,
    VideoResponse,
)

router = APIRouter(prefix="/api/videos", tags=["videos"])

MAX_VIDEO_BYTES = 200 * 1024 * 1024


def _videos_page(
    client: DataClient = Depends(get_data_client),
    session: SessionHolder = Depends(current_session),
) -> VideosPage:
    page = VideosPage(client, session)
    page.load()
    return page


def _not_found(video_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Video '{video_id}' not found",
    )


def _created(video: dict | None) -> VideoResponse:
    if video is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not upload video",
        )
    return VideoResponse(**video)


@router.get("", response_model=VideoListResponse)
async def list_videos(
    search: str = "",
    category: str = "all",
    page: VideosPage = Depends(_videos_page),
) -> VideoListResponse:
    videos = page.visible(search=search, category=category)
    return VideoListResponse(videos=[VideoResponse(**v) for v in videos], count=len(videos))


@router.get("/bookmarks", response_model=VideoListResponse)
async def bookmarked_videos(page: VideosPage = Depends(_videos_page)) -> VideoListResponse:
    videos = page.bookmarked()
    return VideoListResponse(videos=[VideoResponse(**v) for v in videos], count=len(videos))


@router.post("", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def create_video(body: VideoCreate, page: VideosPage = Depends(_videos_page)) -> VideoResponse:
    """Publish a video entry with placeholder media."""
    if not body.title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required",
        )
    return _created(page.upload(**body.model_dump()))


@router.post("/upload", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def upload_video(
    request: Request,
    title: str = Query(..., max_length=200),
    filename: str = "video.mp4",
    description: str = "",
    category: str = "",
    tags: str = "",
    is_public: bool = True,
    duration: int | None = Query(default=None, ge=0),
    page: VideosPage = Depends(_videos_page),
) -> VideoResponse:
    """Upload a video file (raw request body) and publish it."""
    if not title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required",
        )
    data = await request.body()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty upload",
        )
    if len(data) > MAX_VIDEO_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Video too large",
        )
    return _created(
        page.upload(
            title=title,
            description=description,
            category=category,
            tags=tags,
            is_public=is_public,
            data=data,
            filename=filename,
            duration=duration,
        )
    )


@router.post("/{video_id}/interactions/{kind}", response_model=VideoResponse)
async def toggle_interaction(
    video_id: str,
    kind: str,
    page: VideosPage = Depends(_videos_page),
) -> VideoResponse:
    """Toggle like, dislike or bookmark."""
    if kind not in INTERACTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Interaction must be one of: {', '.join(INTERACTIONS)}",
        )
    if page.find(page.videos, video_id) is None:
        raise _not_found(video_id)
    video = page.toggle_interaction(video_id, kind)
    if video is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not update interaction",
        )
    return VideoResponse(**video)


@router.post("/{video_id}/play", response_model=VideoPlayResponse)
async def play_video(video_id: str, page: VideosPage = Depends(_videos_page)) -> VideoPlayResponse:
    """Count a view and return the video with its comments."""
    video = page.play(video_id)
    if video is None:
        raise _not_found(video_id)
    return VideoPlayResponse(
        video=VideoResponse(**video),
        comments=[VideoCommentResponse(**c) for c in page.comments],
    )


@router.post(
    "/{video_id}/comments",
    response_model=VideoCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    video_id: str,
    body: VideoCommentCreate,
    page: VideosPage = Depends(_videos_page),
) -> VideoCommentResponse:
    if not body.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Comment is empty",
        )
    page.selected = page.find(page.videos, video_id)
    if page.selected is None:
        raise _not_found(video_id)
    comment = page.add_comment(body.content, body.timestamp_seconds)
    if comment is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not add comment",
        )
    return VideoCommentResponse(**comment)


@router.get("/playlists", response_model=list[PlaylistResponse])
async def list_playlists(page: VideosPage = Depends(_videos_page)) -> list[PlaylistResponse]:
    return [PlaylistResponse(**p) for p in page.playlists]


@router.post("/playlists", response_model=PlaylistResponse, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    body: PlaylistCreate,
    page: VideosPage = Depends(_videos_page),
) -> PlaylistResponse:
    if not body.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name is required",
        )
    playlist = page.create_playlist(body.name, body.description, body.is_public)
    if playlist is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create playlist",
        )
    return PlaylistResponse(**playlist)
