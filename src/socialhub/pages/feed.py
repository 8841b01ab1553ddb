"""Feed page: public posts with likes, bookmarks and comments."""

from __future__ import annotations

import structlog

from socialhub.db.client import PROFILE_FIELDS
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import parse_tags

logger = structlog.get_logger(__name__)

FEED_SIZE = 20
TABS = ("for-you", "following", "trending")
VISIBILITIES = ("public", "friends", "private")

# Feed rows also show the verified badge
AUTHOR_FIELDS = PROFILE_FIELDS + ("is_verified",)


class FeedPage(Page):
    feature = "feed"

    def __init__(self, client, session, page_size: int = FEED_SIZE):
        super().__init__(client, session)
        self.page_size = page_size
        self.posts: list[Row] = []
        self.selected: Row | None = None
        self.comments: list[Row] = []

    def load(self, tab: str = "for-you") -> bool:
        """Fetch the newest public posts with the user's like/bookmark flags.

        Every tab shows public posts until following is modelled.
        """
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load", tab=tab):
                posts = (
                    self.client.table("posts")
                    .select()
                    .eq("visibility", "public")
                    .order("created_at", ascending=False)
                    .limit(self.page_size)
                    .embed_user(fields=AUTHOR_FIELDS)
                    .execute()
                    .data
                )
                self.posts = self._with_flags(posts)
                logger.debug("feed.loaded", tab=tab, posts=len(posts))
                return True
            return False
        finally:
            self.loading = False

    def _with_flags(self, posts: list[Row]) -> list[Row]:
        post_ids = [p["id"] for p in posts]
        liked = {
            row["post_id"]
            for row in self.client.table("likes")
            .select("post_id")
            .eq("user_id", self.user_id)
            .in_("post_id", post_ids)
            .execute()
            .data
        }
        saved = {
            row["item_id"]
            for row in self.client.table("saved_items")
            .select("item_id")
            .eq("user_id", self.user_id)
            .eq("item_type", "post")
            .in_("item_id", post_ids)
            .execute()
            .data
        }
        for post in posts:
            post["is_liked"] = post["id"] in liked
            post["is_bookmarked"] = post["id"] in saved
        return posts

    def create(
        self,
        content: str,
        visibility: str = "public",
        location: str | None = None,
        tags: str | list[str] | None = None,
        image_url: str | None = None,
        video_url: str | None = None,
    ) -> Row | None:
        if not content.strip() or not self.user_id:
            return None
        if visibility not in VISIBILITIES:
            return None

        with self.remote("create"):
            post = (
                self.client.table("posts")
                .insert(
                    {
                        "user_id": self.user_id,
                        "content": content,
                        "visibility": visibility,
                        "is_public": visibility == "public",
                        "location": location or None,
                        "tags": parse_tags(tags),
                        "post_type": "text",
                        "image_url": image_url or None,
                        "video_url": video_url or None,
                    }
                )
                .embed_user(fields=AUTHOR_FIELDS)
                .single()
            )
            post.update(is_liked=False, is_bookmarked=False)
            self.posts = [post] + self.posts
            self.log_activity("post_created", post_id=post["id"], content=content)
            return post
        return None

    def toggle_like(self, post_id: str) -> Row | None:
        post = self.find(self.posts, post_id)
        if post is None or not self.user_id:
            return None

        with self.remote("toggle_like", post_id=post_id):
            if post["is_liked"]:
                (
                    self.client.table("likes")
                    .delete()
                    .eq("post_id", post_id)
                    .eq("user_id", self.user_id)
                    .execute()
                )
                count = post["like_count"] - 1
            else:
                self.client.table("likes").insert(
                    {"post_id": post_id, "user_id": self.user_id}
                ).execute()
                count = post["like_count"] + 1

            self.client.table("posts").update({"like_count": count}).eq("id", post_id).execute()
            updated = {**post, "is_liked": not post["is_liked"], "like_count": count}
            self.posts = self.replace(self.posts, updated)
            return updated
        return None

    def toggle_bookmark(self, post_id: str) -> Row | None:
        """Save or unsave a post (saved_items with item_type "post")."""
        post = self.find(self.posts, post_id)
        if post is None or not self.user_id:
            return None

        with self.remote("toggle_bookmark", post_id=post_id):
            if post["is_bookmarked"]:
                (
                    self.client.table("saved_items")
                    .delete()
                    .eq("item_id", post_id)
                    .eq("item_type", "post")
                    .eq("user_id", self.user_id)
                    .execute()
                )
            else:
                self.client.table("saved_items").insert(
                    {"item_id": post_id, "item_type": "post", "user_id": self.user_id}
                ).execute()

            updated = {**post, "is_bookmarked": not post["is_bookmarked"]}
            self.posts = self.replace(self.posts, updated)
            return updated
        return None

    def open_comments(self, post_id: str) -> list[Row]:
        """Select a post and load its comments, oldest first."""
        self.selected = self.find(self.posts, post_id)
        self.comments = []
        if self.selected is None:
            return self.comments

        with self.remote("load_comments", post_id=post_id):
            self.comments = (
                self.client.table("comments")
                .select()
                .eq("post_id", post_id)
                .order("created_at")
                .embed_user()
                .execute()
                .data
            )
        return self.comments

    def add_comment(self, content: str) -> Row | None:
        """Comment on the selected post and bump its comment_count."""
        post = self.selected
        if not content.strip() or post is None or not self.user_id:
            return None

        with self.remote("add_comment", post_id=post["id"]):
            comment = (
                self.client.table("comments")
                .insert({"post_id": post["id"], "user_id": self.user_id, "content": content})
                .embed_user()
                .single()
            )
            self.comments = self.comments + [comment]

            cached = self.find(self.posts, post["id"]) or post
            count = cached["comment_count"] + 1
            self.client.table("posts").update({"comment_count": count}).eq(
                "id", post["id"]
            ).execute()
            self.selected = {**cached, "comment_count": count}
            self.posts = self.replace(self.posts, self.selected)
            return comment
        return None


def list_public_posts(
    client,
    page: int = 1,
    limit: int = 10,
    viewer_id: str | None = None,
) -> list[Row]:
    """One page of public posts, newest first, for the posts API.

    Each row carries user_profile, like_count and comment_count counted
    from the likes/comments rows, and is_liked for the viewer.

    Raises:
        DataClientError: If the store fails
    """
    offset = (max(page, 1) - 1) * limit
    posts = (
        client.table("posts")
        .select()
        .eq("is_public", True)
        .order("created_at", ascending=False)
        .range(offset, offset + limit - 1)
        .embed_user(key="user_profile")
        .execute()
        .data
    )
    post_ids = [p["id"] for p in posts]
    likes = client.table("likes").select("post_id, user_id").in_("post_id", post_ids).execute().data
    comments = client.table("comments").select("post_id").in_("post_id", post_ids).execute().data

    for post in posts:
        likers = [like["user_id"] for like in likes if like["post_id"] == post["id"]]
        post["like_count"] = len(likers)
        post["comment_count"] = sum(1 for c in comments if c["post_id"] == post["id"])
        post["is_liked"] = viewer_id is not None and viewer_id in likers
    return posts
