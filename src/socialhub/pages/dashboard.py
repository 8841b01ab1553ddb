"""Dashboard page: per-feature counts and recent activity."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import structlog

from socialhub.pages.base import Page, Row

logger = structlog.get_logger(__name__)

RECENT_ACTIVITY_LIMIT = 10

# Stat name -> collection counted by the owning-user column
COUNTED = {
    "notes_count": "notes",
    "drawings_count": "drawings",
    "posts_count": "posts",
    "conversations_count": "conversation_participants",
    "maps_count": "maps",
    "books_count": "books",
    "videos_count": "videos",
    "quizzes_count": "quizzes",
}

ACTIVITY_TITLES = {
    "note_created": "Created a new note",
    "drawing_created": "Started a new drawing",
    "post_created": "Shared a new post",
    "message_sent": "Sent a message",
    "map_created": "Created a new map",
    "book_added": "Added a book to library",
    "video_uploaded": "Uploaded a video",
    "quiz_created": "Created a quiz",
    "quiz_completed": "Completed a quiz",
}

# Types whose description is "<Label>: <title>"
_TITLED = {
    "note_created": ("Note", "Untitled"),
    "drawing_created": ("Drawing", "Untitled"),
    "map_created": ("Map", "Untitled"),
    "book_added": ("Book", "Unknown"),
    "video_uploaded": ("Video", "Untitled"),
    "quiz_created": ("Quiz", "Untitled"),
}


def activity_title(activity_type: str) -> str:
    return ACTIVITY_TITLES.get(activity_type, "Activity")


def activity_description(activity_type: str, data: dict[str, Any] | None) -> str:
    data = data or {}
    if activity_type in _TITLED:
        label, fallback = _TITLED[activity_type]
        return f"{label}: {data.get('title') or fallback}"
    if activity_type == "post_created":
        content = data.get("content")
        return f"{content[:50]}..." if content else "New post"
    if activity_type == "message_sent":
        return "In a conversation"
    if activity_type == "quiz_completed":
        return f"Score: {data.get('percentage') or 0}%"
    return "Recent activity"


@dataclass
class DashboardStats:
    notes_count: int = 0
    drawings_count: int = 0
    posts_count: int = 0
    conversations_count: int = 0
    maps_count: int = 0
    books_count: int = 0
    videos_count: int = 0
    quizzes_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class ActivityItem:
    id: str
    type: str
    title: str
    description: str
    created_at: str
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_row(cls, row: Row) -> ActivityItem:
        return cls(
            id=row["id"],
            type=row["activity_type"],
            title=activity_title(row["activity_type"]),
            description=activity_description(row["activity_type"], row["activity_data"]),
            created_at=row["created_at"],
            data=row["activity_data"] or {},
        )


class DashboardPage(Page):
    feature = "dashboard"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.stats = DashboardStats()
        self.activity: list[ActivityItem] = []

    def load(self) -> bool:
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load"):
                counts = {
                    stat: self._count(table) for stat, table in COUNTED.items()
                }
                rows = (
                    self.client.table("user_activity")
                    .select()
                    .eq("user_id", self.user_id)
                    .order("created_at", ascending=False)
                    .limit(RECENT_ACTIVITY_LIMIT)
                    .execute()
                    .data
                )
                self.stats = DashboardStats(**counts)
                self.activity = [ActivityItem.from_row(row) for row in rows]
                logger.debug("dashboard.loaded", user_id=self.user_id, activities=len(rows))
                return True
            return False
        finally:
            self.loading = False

    def _count(self, table: str) -> int:
        result = (
            self.client.table(table)
            .select("id", count=True)
            .eq("user_id", self.user_id)
            .limit(0)
            .execute()
        )
        return result.count or 0
