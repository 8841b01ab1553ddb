"""Videos page: public catalog, uploads, reactions, comments and playlists."""

from __future__ import annotations

from pathlib import PurePosixPath

import structlog

from socialhub.db.client import upload_file, utc_now
from socialhub.db.errors import StorageError
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import matches_search, parse_tags

logger = structlog.get_logger(__name__)

CATEGORIES = [
    "Education",
    "Entertainment",
    "Music",
    "Gaming",
    "Technology",
    "Sports",
    "Travel",
    "Cooking",
    "Art",
    "Science",
    "News",
    "Other",
]

INTERACTIONS = ("like", "dislike", "bookmark")

VIDEO_BUCKET = "videos"
PLACEHOLDER_VIDEO_URL = "/placeholder-video.mp4"
PLACEHOLDER_THUMBNAIL_URL = "/placeholder.svg?height=180&width=320&text=Video"
PLACEHOLDER_DURATION = 300

# Interaction type -> flag on the cached video row
_FLAGS = {"like": "is_liked", "dislike": "is_disliked", "bookmark": "is_bookmarked"}
# Interaction type -> counter column on videos
_COUNTERS = {"like": "likes", "dislike": "dislikes"}
_OPPOSITE = {"like": "dislike", "dislike": "like"}


def format_duration(seconds: int) -> str:
    seconds = max(0, int(seconds or 0))
    return f"{seconds // 60}:{seconds % 60:02d}"


class VideosPage(Page):
    feature = "videos"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.videos: list[Row] = []
        self.playlists: list[Row] = []
        self.selected: Row | None = None
        self.comments: list[Row] = []

    def load(self) -> bool:
        """Fetch public videos with authors and the user's reaction flags."""
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load"):
                videos = (
                    self.client.table("videos")
                    .select()
                    .eq("is_public", True)
                    .order("created_at", ascending=False)
                    .embed_user()
                    .execute()
                    .data
                )
                self.videos = self._with_flags(videos)
            with self.remote("load_playlists"):
                self.playlists = (
                    self.client.table("video_playlists")
                    .select()
                    .eq("user_id", self.user_id)
                    .order("created_at", ascending=False)
                    .execute()
                    .data
                )
            return True
        finally:
            self.loading = False

    def _with_flags(self, videos: list[Row]) -> list[Row]:
        interactions = (
            self.client.table("video_interactions")
            .select("video_id, interaction_type")
            .eq("user_id", self.user_id)
            .in_("video_id", [v["id"] for v in videos])
            .execute()
            .data
        )
        mine = {(i["video_id"], i["interaction_type"]) for i in interactions}
        for video in videos:
            for kind, flag in _FLAGS.items():
                video[flag] = (video["id"], kind) in mine
        return videos

    def visible(self, search: str = "", category: str = "all") -> list[Row]:
        """Videos matching title, description, tags or author username."""
        rows = []
        for video in self.videos:
            author = (video.get("users") or {}).get("username")
            if not matches_search(search, video["title"], video["description"], video["tags"], author):
                continue
            if category != "all" and video["category"] != category:
                continue
            rows.append(video)
        return rows

    def bookmarked(self) -> list[Row]:
        return [v for v in self.videos if v.get("is_bookmarked")]

    def upload(
        self,
        title: str,
        description: str = "",
        category: str = "",
        tags: str | list[str] | None = None,
        is_public: bool = True,
        data: bytes | None = None,
        filename: str | None = None,
        duration: int | None = None,
    ) -> Row | None:
        """Publish a video.

        With data, the file is stored in the videos bucket and its public
        URL recorded; otherwise placeholder media is used.
        """
        if not title.strip() or not self.user_id:
            return None

        video_url = PLACEHOLDER_VIDEO_URL
        stored = None
        if data is not None:
            suffix = PurePosixPath(filename or "video.mp4").suffix or ".mp4"
            path = f"{self.user_id}/{utc_now().replace(':', '')}{suffix}"
            try:
                stored, video_url = upload_file(self.client, data, VIDEO_BUCKET, path)
            except StorageError:
                return None

        with self.remote("upload"):
            video = (
                self.client.table("videos")
                .insert(
                    {
                        "user_id": self.user_id,
                        "title": title,
                        "description": description,
                        "video_url": video_url,
                        "thumbnail_url": PLACEHOLDER_THUMBNAIL_URL,
                        "duration": duration if duration is not None else PLACEHOLDER_DURATION,
                        "category": category or "Other",
                        "tags": parse_tags(tags),
                        "is_public": is_public,
                    }
                )
                .embed_user()
                .single()
            )
            video.update(is_liked=False, is_disliked=False, is_bookmarked=False)
            self.videos = [video] + self.videos
            self.log_activity("video_uploaded", video_id=video["id"], title=title)
            logger.info("videos.uploaded", video_id=video["id"], stored=data is not None)
            return video
        if stored is not None:
            self.discard_upload(VIDEO_BUCKET, stored)
        return None

    def create_playlist(self, name: str, description: str = "", is_public: bool = False) -> Row | None:
        if not name.strip() or not self.user_id:
            return None
        with self.remote("create_playlist"):
            playlist = (
                self.client.table("video_playlists")
                .insert(
                    {
                        "user_id": self.user_id,
                        "name": name,
                        "description": description,
                        "is_public": is_public,
                    }
                )
                .single()
            )
            self.playlists = [playlist] + self.playlists
            return playlist
        return None

    def toggle_interaction(self, video_id: str, kind: str) -> Row | None:
        """Flip a like, dislike or bookmark for the current user.

        Liking clears an existing dislike and vice versa. The likes and
        dislikes counters follow the flags.
        """
        if kind not in INTERACTIONS or not self.user_id:
            return None
        video = self.find(self.videos, video_id)
        if video is None:
            return None

        flag = _FLAGS[kind]
        active = bool(video.get(flag))
        updates: Row = {flag: not active}
        counters: dict[str, int] = {}

        with self.remote("toggle_interaction", video_id=video_id, kind=kind):
            interactions = self.client.table("video_interactions")
            if active:
                self._remove_interaction(video_id, kind)
                if kind in _COUNTERS:
                    counters[_COUNTERS[kind]] = video[_COUNTERS[kind]] - 1
            else:
                interactions.insert(
                    {"video_id": video_id, "user_id": self.user_id, "interaction_type": kind}
                ).execute()
                if kind in _COUNTERS:
                    counters[_COUNTERS[kind]] = video[_COUNTERS[kind]] + 1
                    opposite = _OPPOSITE[kind]
                    if video.get(_FLAGS[opposite]):
                        self._remove_interaction(video_id, opposite)
                        counters[_COUNTERS[opposite]] = video[_COUNTERS[opposite]] - 1
                        updates[_FLAGS[opposite]] = False

            if counters:
                self.client.table("videos").update(counters).eq("id", video_id).execute()

            updated = {**video, **updates, **counters}
            self.videos = self.replace(self.videos, updated)
            if self.selected and self.selected["id"] == video_id:
                self.selected = updated
            return updated
        return None

    def _remove_interaction(self, video_id: str, kind: str) -> None:
        (
            self.client.table("video_interactions")
            .delete()
            .eq("video_id", video_id)
            .eq("user_id", self.user_id)
            .eq("interaction_type", kind)
            .execute()
        )

    def play(self, video_id: str) -> Row | None:
        """Select a video, count a view and load its top-level comments."""
        video = self.find(self.videos, video_id)
        if video is None:
            return None

        self.selected = video
        self.load_comments(video_id)

        with self.remote("view", video_id=video_id):
            self.client.table("videos").update({"views": video["views"] + 1}).eq(
                "id", video_id
            ).execute()
            self.selected = {**video, "views": video["views"] + 1}
            self.videos = self.replace(self.videos, self.selected)
        return self.selected

    def load_comments(self, video_id: str) -> list[Row]:
        with self.remote("load_comments", video_id=video_id):
            self.comments = (
                self.client.table("video_comments")
                .select()
                .eq("video_id", video_id)
                .is_null("parent_id")
                .order("created_at", ascending=False)
                .embed_user()
                .execute()
                .data
            )
        return self.comments

    def add_comment(self, content: str, timestamp_seconds: float | None = None) -> Row | None:
        """Comment on the selected video, optionally at a playback position."""
        if not content.strip() or self.selected is None or not self.user_id:
            return None

        with self.remote("add_comment", video_id=self.selected["id"]):
            comment = (
                self.client.table("video_comments")
                .insert(
                    {
                        "video_id": self.selected["id"],
                        "user_id": self.user_id,
                        "content": content,
                        "timestamp_seconds": timestamp_seconds or None,
                    }
                )
                .embed_user()
                .single()
            )
            self.comments = [comment] + self.comments
            return comment
        return None
