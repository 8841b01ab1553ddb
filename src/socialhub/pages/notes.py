"""Notes page: personal notes with categories, tags, pinning and archiving."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog

from socialhub.db.client import utc_now
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import matches_search, parse_tags

logger = structlog.get_logger(__name__)

CATEGORIES = ["Personal", "Work", "Study", "Ideas", "Projects", "Other"]
DEFAULT_CATEGORY = "Personal"
SORT_KEYS = ("updated_at", "created_at", "title")

EDITABLE_FIELDS = frozenset(
    {"title", "content", "category", "tags", "is_pinned", "is_archived", "reminder_date"}
)

# Fields that may be cleared by setting them to None
NULLABLE_FIELDS = frozenset({"reminder_date"})


class NotesPage(Page):
    feature = "notes"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.notes: list[Row] = []

    def load(self) -> bool:
        """Fetch the user's notes, most recently updated first."""
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load"):
                self.notes = (
                    self.client.table("notes")
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

    def visible(
        self,
        search: str = "",
        category: str = "all",
        sort_by: str = "updated_at",
    ) -> list[Row]:
        """Non-archived notes matching search/category, pinned first.

        Search matches title, content or any tag, case-insensitively.
        """
        rows = [
            note
            for note in self.notes
            if not note["is_archived"]
            and (category == "all" or note["category"] == category)
            and matches_search(search, note["title"], note["content"], note["tags"])
        ]

        if sort_by == "title":
            rows.sort(key=lambda note: note["title"].casefold())
        else:
            key = "created_at" if sort_by == "created_at" else "updated_at"
            rows.sort(key=lambda note: note[key], reverse=True)

        # Stable sort keeps the chosen order within pinned/unpinned groups
        rows.sort(key=lambda note: not note["is_pinned"])
        return rows

    def categories(self) -> list[str]:
        """Known categories plus any custom ones already used."""
        extra = sorted({n["category"] for n in self.notes} - set(CATEGORIES))
        return CATEGORIES + extra

    def create(
        self,
        title: str,
        content: str = "",
        category: str = "",
        tags: str | list[str] | None = None,
        reminder_date: datetime | str | None = None,
    ) -> Row | None:
        if not title.strip() or not self.user_id:
            return None

        if isinstance(reminder_date, datetime):
            reminder_date = reminder_date.isoformat()

        with self.remote("create"):
            note = (
                self.client.table("notes")
                .insert(
                    {
                        "user_id": self.user_id,
                        "title": title,
                        "content": content,
                        "category": category or DEFAULT_CATEGORY,
                        "tags": parse_tags(tags),
                        "reminder_date": reminder_date or None,
                    }
                )
                .single()
            )
            self.notes = [note] + self.notes
            self.log_activity("note_created", note_id=note["id"], title=title)
            logger.info("notes.created", note_id=note["id"])
            return note
        return None

    def update(self, note_id: str, **changes: Any) -> Row | None:
        """Apply changes to one of the user's notes and stamp updated_at.

        None is ignored for every field except reminder_date, which it clears.
        """
        values = {
            k: v
            for k, v in changes.items()
            if k in EDITABLE_FIELDS and (v is not None or k in NULLABLE_FIELDS)
        }
        if "tags" in values:
            values["tags"] = parse_tags(values["tags"])
        if isinstance(values.get("reminder_date"), datetime):
            values["reminder_date"] = values["reminder_date"].isoformat()
        values["updated_at"] = utc_now()

        with self.remote("update", note_id=note_id):
            note = (
                self.client.table("notes")
                .update(values)
                .eq("id", note_id)
                .eq("user_id", self.user_id)
                .single()
            )
            if self.find(self.notes, note_id):
                self.notes = self.replace(self.notes, note)
            else:
                self.notes = [note] + self.notes
            return note
        return None

    def delete(self, note_id: str) -> bool:
        with self.remote("delete", note_id=note_id):
            deleted = (
                self.client.table("notes")
                .delete()
                .eq("id", note_id)
                .eq("user_id", self.user_id)
                .execute()
                .data
            )
            self.notes = [n for n in self.notes if n["id"] != note_id]
            return bool(deleted)
        return False

    def toggle_pin(self, note_id: str) -> Row | None:
        note = self.find(self.notes, note_id)
        if note is None:
            return None
        return self.update(note_id, is_pinned=not note["is_pinned"])

    def archive(self, note_id: str) -> Row | None:
        return self.update(note_id, is_archived=True)
