"""Drawings page: saved canvases with optional PNG thumbnails."""

from __future__ import annotations

from typing import Any

import structlog

from socialhub.db.client import upload_file, utc_now
from socialhub.db.errors import StorageError
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import matches_search

logger = structlog.get_logger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
BACKGROUND = "#FFFFFF"

THUMBNAIL_BUCKET = "drawings"


def canvas_payload(
    image_data: str = "",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> dict[str, Any]:
    """Build the stored canvas_data object.

    image_data is the canvas rendered as a data URL. Empty means a blank
    white canvas.
    """
    return {
        "width": width,
        "height": height,
        "background": BACKGROUND,
        "imageData": image_data,
    }


class DrawingsPage(Page):
    feature = "drawings"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.drawings: list[Row] = []
        self.current: Row | None = None

    def load(self) -> bool:
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load"):
                self.drawings = (
                    self.client.table("drawings")
                    .select()
                    .eq("user_id", self.user_id)
                    .order("updated_at", ascending=False)
                    .execute()
                    .data
                )
                return True
            return False
        finally:
            self.loading = False

    def search(self, query: str = "") -> list[Row]:
        return [d for d in self.drawings if matches_search(query, d["title"])]

    def open(self, drawing_id: str) -> Row | None:
        self.current = self.find(self.drawings, drawing_id)
        return self.current

    def create(
        self,
        title: str,
        image_data: str = "",
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        is_public: bool = False,
    ) -> Row | None:
        """Create a drawing and make it the current one."""
        if not title.strip() or not self.user_id:
            return None

        with self.remote("create"):
            drawing = (
                self.client.table("drawings")
                .insert(
                    {
                        "user_id": self.user_id,
                        "title": title,
                        "canvas_data": canvas_payload(image_data, width, height),
                        "is_public": is_public,
                        "collaborators": [],
                    }
                )
                .single()
            )
            self.drawings = [drawing] + self.drawings
            self.current = drawing
            self.log_activity("drawing_created", drawing_id=drawing["id"], title=title)
            return drawing
        return None

    def save(
        self,
        drawing_id: str,
        image_data: str,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> Row | None:
        """Store new canvas contents."""
        with self.remote("save", drawing_id=drawing_id):
            drawing = (
                self.client.table("drawings")
                .update(
                    {
                        "canvas_data": canvas_payload(image_data, width, height),
                        "updated_at": utc_now(),
                    }
                )
                .eq("id", drawing_id)
                .eq("user_id", self.user_id)
                .single()
            )
            self.drawings = self.replace(self.drawings, drawing)
            self.current = drawing
            return drawing
        return None

    def delete(self, drawing_id: str) -> bool:
        with self.remote("delete", drawing_id=drawing_id):
            deleted = (
                self.client.table("drawings")
                .delete()
                .eq("id", drawing_id)
                .eq("user_id", self.user_id)
                .execute()
                .data
            )
            self.drawings = [d for d in self.drawings if d["id"] != drawing_id]
            if self.current and self.current["id"] == drawing_id:
                self.current = None
            return bool(deleted)
        return False

    def upload_thumbnail(self, drawing_id: str, png_bytes: bytes) -> Row | None:
        """Store a PNG rendering in the drawings bucket and link it."""
        if not self.user_id or self.find(self.drawings, drawing_id) is None:
            return None

        path = f"{self.user_id}/{drawing_id}-{utc_now().replace(':', '')}.png"
        try:
            stored, url = upload_file(self.client, png_bytes, THUMBNAIL_BUCKET, path)
        except StorageError:
            return None

        with self.remote("thumbnail", drawing_id=drawing_id):
            drawing = (
                self.client.table("drawings")
                .update({"thumbnail_url": url, "updated_at": utc_now()})
                .eq("id", drawing_id)
                .eq("user_id", self.user_id)
                .single()
            )
            self.drawings = self.replace(self.drawings, drawing)
            if self.current and self.current["id"] == drawing_id:
                self.current = drawing
            logger.info("drawings.thumbnail_uploaded", drawing_id=drawing_id, url=url)
            return drawing
        self.discard_upload(THUMBNAIL_BUCKET, stored)
        return None
