"""Pydantic schemas for the Web API.

Request bodies and response models for auth and every feature page.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# COMMON
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
    timestamp: str
    database: bool = True


class AuthorProfile(BaseModel):
    """Public profile fields embedded in content rows."""

    username: str
    full_name: str | None = None
    avatar_url: str | None = None
    is_verified: bool | None = None


# =============================================================================
# AUTH SCHEMAS
# =============================================================================


class SignUpRequest(BaseModel):
    """Request body for creating an account."""

    email: str = Field(..., min_length=3, max_length=200)
    password: str = Field(..., min_length=1, max_length=128)
    username: str = Field(..., min_length=3, max_length=30)
    full_name: str | None = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileResponse(BaseModel):
    """A user's profile."""

    id: str
    username: str
    full_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    birth_date: str | None = None
    is_verified: bool = False
    is_private: bool = False
    follower_count: int = 0
    following_count: int = 0
    post_count: int = 0
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    full_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = None
    bio: str | None = Field(default=None, max_length=500)
    website: str | None = None
    location: str | None = None
    birth_date: str | None = None
    is_private: bool | None = None


class TokenResponse(BaseModel):
    """Session token issued at sign-up/login."""

    token: str
    token_type: str = "bearer"
    user: ProfileResponse | None = None


# =============================================================================
# NOTE SCHEMAS
# =============================================================================


class NoteCreate(BaseModel):
    title: str = Field(..., max_length=200)
    content: str = ""
    category: str = ""
    tags: list[str] | str = Field(default_factory=list)
    reminder_date: str | None = None


class NoteUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    content: str | None = None
    category: str | None = None
    tags: list[str] | str | None = None
    is_pinned: bool | None = None
    is_archived: bool | None = None
    reminder_date: str | None = None


class NoteResponse(BaseModel):
    id: str
    user_id: str
    title: str
    content: str
    category: str
    tags: list[str]
    is_pinned: bool
    is_archived: bool
    reminder_date: str | None = None
    created_at: str
    updated_at: str


class NoteListResponse(BaseModel):
    notes: list[NoteResponse]
    count: int
    categories: list[str]


# =============================================================================
# DRAWING SCHEMAS
# =============================================================================


class DrawingCreate(BaseModel):
    title: str = Field(..., max_length=200)
    image_data: str = ""
    width: int = Field(default=800, ge=1, le=10000)
    height: int = Field(default=600, ge=1, le=10000)
    is_public: bool = False


class CanvasSave(BaseModel):
    image_data: str
    width: int = Field(default=800, ge=1, le=10000)
    height: int = Field(default=600, ge=1, le=10000)


class DrawingResponse(BaseModel):
    id: str
    user_id: str
    title: str
    canvas_data: dict[str, Any] | None = None
    thumbnail_url: str | None = None
    is_public: bool
    collaborators: list[str]
    created_at: str
    updated_at: str


class DrawingListResponse(BaseModel):
    drawings: list[DrawingResponse]
    count: int


# =============================================================================
# MAP SCHEMAS
# =============================================================================


class MapCreate(BaseModel):
    title: str = Field(..., max_length=200)
    description: str = ""
    template_id: str | None = None
    is_public: bool = False


class MapSave(BaseModel):
    map_data: dict[str, Any]


class MapResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    map_data: dict[str, Any] | None = None
    is_public: bool
    collaborators: list[str]
    template_id: str | None = None
    created_at: str
    updated_at: str
    users: AuthorProfile | None = None


class MapListResponse(BaseModel):
    maps: list[MapResponse]
    count: int


class MapTemplateResponse(BaseModel):
    id: str
    name: str
    description: str
    template_data: dict[str, Any] | None = None
    category: str
    usage_count: int
    is_public: bool
    created_at: str


class MapTemplateListResponse(BaseModel):
    templates: list[MapTemplateResponse]
    count: int


# =============================================================================
# LIBRARY SCHEMAS
# =============================================================================


class BookCreate(BaseModel):
    title: str = Field(..., max_length=300)
    author: str = Field(..., max_length=200)
    genre: str = ""
    description: str = ""
    total_pages: int = Field(default=0, ge=0)
    language: str = "en"
    publisher: str = ""


class BookResponse(BaseModel):
    id: str
    user_id: str
    title: str
    author: str
    genre: str
    description: str
    cover_url: str | None = None
    file_url: str | None = None
    total_pages: int
    language: str
    publication_date: str | None = None
    publisher: str
    rating: float
    rating_count: int
    created_at: str


class BookListResponse(BaseModel):
    books: list[BookResponse]
    count: int


class ProgressUpdate(BaseModel):
    status: str
    current_page: int | None = Field(default=None, ge=0)


class ProgressResponse(BaseModel):
    id: str
    user_id: str
    book_id: str
    current_page: int
    progress_percentage: int
    status: str
    started_at: str | None = None
    completed_at: str | None = None
    notes: str
    is_favorite: bool
    bookmarks: list[Any]


class GoalCreate(BaseModel):
    target_books: int = Field(..., ge=1)
    target_pages: int = Field(default=0, ge=0)


class GoalResponse(BaseModel):
    id: str
    user_id: str
    year: int
    target_books: int
    current_books: int
    target_pages: int
    current_pages: int


class CollectionCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str = ""
    is_public: bool = False


class CollectionResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: str
    is_public: bool
    book_count: int
    created_at: str


class LibraryStatsResponse(BaseModel):
    total: int
    to_read: int
    reading: int
    completed: int
    paused: int
    goal: GoalResponse | None = None
    goal_progress: int = 0


# =============================================================================
# QUIZ SCHEMAS
# =============================================================================


class QuizCreate(BaseModel):
    title: str = Field(..., max_length=200)
    description: str = ""
    category: str = ""
    difficulty: str = "medium"
    time_limit_minutes: int | None = Field(default=None, ge=1)
    passing_score: int = Field(default=70, ge=0, le=100)
    is_public: bool = True
    is_timed: bool = False
    max_attempts: int | None = Field(default=None, ge=1)


class QuizResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    category: str
    difficulty: str
    questions_count: int
    time_limit: int | None = None
    is_public: bool
    is_timed: bool
    passing_score: int
    max_attempts: int | None = None
    created_at: str
    updated_at: str
    users: AuthorProfile | None = None


class QuizListResponse(BaseModel):
    quizzes: list[QuizResponse]
    count: int


class QuestionCreate(BaseModel):
    question_text: str
    correct_answer: str
    options: list[str] = Field(default_factory=list)
    question_type: str = "multiple_choice"
    explanation: str = ""
    points: int = Field(default=1, ge=1)


class QuestionResponse(BaseModel):
    """A question as shown to quiz takers (no answer)."""

    id: str
    quiz_id: str
    question_text: str
    question_type: str
    options: list[str]
    points: int
    order_index: int
    image_url: str | None = None


class AttemptSubmit(BaseModel):
    answers: dict[str, str] = Field(default_factory=dict)
    time_left: int | None = Field(default=None, ge=0)


class AttemptResponse(BaseModel):
    id: str
    quiz_id: str
    user_id: str
    score: int
    max_score: int
    percentage: int
    time_taken: int
    answers: dict[str, str]
    passed: bool
    attempt_number: int
    completed_at: str


class AttemptListResponse(BaseModel):
    attempts: list[AttemptResponse]
    count: int


# =============================================================================
# VIDEO SCHEMAS
# =============================================================================


class VideoCreate(BaseModel):
    title: str = Field(..., max_length=200)
    description: str = ""
    category: str = ""
    tags: list[str] | str = Field(default_factory=list)
    is_public: bool = True


class VideoResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    video_url: str
    thumbnail_url: str | None = None
    duration: int
    views: int
    likes: int
    dislikes: int
    is_public: bool
    category: str
    tags: list[str]
    created_at: str
    updated_at: str
    users: AuthorProfile | None = None
    is_liked: bool = False
    is_disliked: bool = False
    is_bookmarked: bool = False


class VideoListResponse(BaseModel):
    videos: list[VideoResponse]
    count: int


class VideoCommentCreate(BaseModel):
    content: str = Field(..., max_length=2000)
    timestamp_seconds: float | None = Field(default=None, ge=0)


class VideoCommentResponse(BaseModel):
    id: str
    video_id: str
    user_id: str
    parent_id: str | None = None
    content: str
    timestamp_seconds: float | None = None
    like_count: int
    created_at: str
    users: AuthorProfile | None = None


class VideoPlayResponse(BaseModel):
    video: VideoResponse
    comments: list[VideoCommentResponse]


class PlaylistCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str = ""
    is_public: bool = False


class PlaylistResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: str
    is_public: bool
    video_count: int
    total_duration: int
    created_at: str


# =============================================================================
# FEED / POST SCHEMAS
# =============================================================================


class FeedPostCreate(BaseModel):
    content: str = Field(..., max_length=5000)
    visibility: str = "public"
    location: str | None = None
    tags: list[str] | str = Field(default_factory=list)


class PostResponse(BaseModel):
    id: str
    user_id: str
    content: str
    media_urls: list[str]
    post_type: str
    visibility: str
    location: str | None = None
    tags: list[str]
    image_url: str | None = None
    video_url: str | None = None
    is_public: bool
    like_count: int
    comment_count: int
    share_count: int
    created_at: str
    updated_at: str
    users: AuthorProfile | None = None
    is_liked: bool = False
    is_bookmarked: bool = False


class FeedResponse(BaseModel):
    posts: list[PostResponse]
    count: int


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=2000)


class CommentResponse(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    like_count: int
    created_at: str
    users: AuthorProfile | None = None


# =============================================================================
# CHAT SCHEMAS
# =============================================================================


class ConversationCreate(BaseModel):
    name: str = Field(..., max_length=100)
    description: str = ""
    type: str = "group"


class ParticipantAdd(BaseModel):
    user_id: str
    role: str = "member"


class MessageCreate(BaseModel):
    content: str = Field(..., max_length=5000)


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str | None = None
    message_type: str
    media_url: str | None = None
    reply_to_id: str | None = None
    is_edited: bool
    is_deleted: bool
    created_at: str
    updated_at: str
    users: AuthorProfile | None = None


class ConversationResponse(BaseModel):
    id: str
    type: str
    name: str | None = None
    description: str | None = None
    avatar_url: str | None = None
    created_by: str
    is_active: bool
    settings: dict[str, Any]
    created_at: str
    updated_at: str
    last_message: MessageResponse | None = None
    unread_count: int = 0


class ConversationListResponse(BaseModel):
    conversations: list[ConversationResponse]
    count: int


class ParticipantResponse(BaseModel):
    id: str
    conversation_id: str
    user_id: str
    role: str
    joined_at: str
    last_read_at: str
    users: AuthorProfile | None = None


# =============================================================================
# DASHBOARD SCHEMAS
# =============================================================================


class DashboardStatsResponse(BaseModel):
    notes_count: int
    drawings_count: int
    posts_count: int
    conversations_count: int
    maps_count: int
    books_count: int
    videos_count: int
    quizzes_count: int


class ActivityResponse(BaseModel):
    id: str
    type: str
    title: str
    description: str
    created_at: str
    data: dict[str, Any] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class DashboardResponse(BaseModel):
    stats: DashboardStatsResponse
    recent_activity: list[ActivityResponse]
