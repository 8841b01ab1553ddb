"""Maps page: mind maps and diagrams, optionally started from a template."""

from __future__ import annotations

import copy
from typing import Any

import structlog

from socialhub.db.client import utc_now
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import matches_search

logger = structlog.get_logger(__name__)


def empty_map() -> dict[str, Any]:
    return {"elements": [], "zoom": 1, "center": {"x": 400, "y": 300}}


class MapsPage(Page):
    feature = "maps"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.maps: list[Row] = []
        self.templates: list[Row] = []
        self.current: Row | None = None

    def load(self) -> bool:
        """Fetch the user's maps (with owner profile) and public templates."""
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load"):
                self.maps = (
                    self.client.table("maps")
                    .select()
                    .eq("user_id", self.user_id)
                    .order("updated_at", ascending=False)
                    .embed_user()
                    .execute()
                    .data
                )
                self.load_templates()
                return True
            return False
        finally:
            self.loading = False

    def load_templates(self) -> list[Row]:
        with self.remote("load_templates"):
            self.templates = (
                self.client.table("map_templates")
                .select()
                .eq("is_public", True)
                .order("usage_count", ascending=False)
                .execute()
                .data
            )
        return self.templates

    def search(self, query: str = "") -> list[Row]:
        return [m for m in self.maps if matches_search(query, m["title"], m["description"])]

    def create(
        self,
        title: str,
        description: str = "",
        template_id: str | None = None,
        is_public: bool = False,
    ) -> Row | None:
        """Create a map seeded from a template's data, or an empty canvas.

        Using a template bumps its usage_count.
        """
        if not title.strip() or not self.user_id:
            return None

        template = self.find(self.templates, template_id) if template_id else None
        if template is not None and template.get("template_data") is not None:
            map_data = copy.deepcopy(template["template_data"])
        else:
            map_data = empty_map()

        with self.remote("create"):
            created = (
                self.client.table("maps")
                .insert(
                    {
                        "user_id": self.user_id,
                        "title": title,
                        "description": description,
                        "map_data": map_data,
                        "is_public": is_public,
                        "template_id": template_id or None,
                        "collaborators": [],
                    }
                )
                .embed_user()
                .single()
            )
            self.maps = [created] + self.maps
            self.current = created
            self.log_activity("map_created", map_id=created["id"], title=title)
            if template is not None:
                self._bump_template(template)
            return created
        return None

    def _bump_template(self, template: Row) -> None:
        with self.remote("template_usage", template_id=template["id"]):
            updated = (
                self.client.table("map_templates")
                .update({"usage_count": (template.get("usage_count") or 0) + 1})
                .eq("id", template["id"])
                .single()
            )
            self.templates = self.replace(self.templates, updated)

    def save(self, map_id: str, map_data: dict[str, Any]) -> Row | None:
        """Replace map_data, stamping lastModified inside it."""
        data = dict(map_data)
        data["lastModified"] = utc_now()

        with self.remote("save", map_id=map_id):
            saved = (
                self.client.table("maps")
                .update({"map_data": data, "updated_at": utc_now()})
                .eq("id", map_id)
                .eq("user_id", self.user_id)
                .embed_user()
                .single()
            )
            self.maps = self.replace(self.maps, saved)
            self.current = saved
            return saved
        return None

    def delete(self, map_id: str) -> bool:
        with self.remote("delete", map_id=map_id):
            deleted = (
                self.client.table("maps")
                .delete()
                .eq("id", map_id)
                .eq("user_id", self.user_id)
                .execute()
                .data
            )
            self.maps = [m for m in self.maps if m["id"] != map_id]
            if self.current and self.current["id"] == map_id:
                self.current = None
            return bool(deleted)
        return False

    def toggle_public(self, map_id: str) -> Row | None:
        existing = self.find(self.maps, map_id)
        if existing is None:
            return None

        with self.remote("toggle_public", map_id=map_id):
            updated = (
                self.client.table("maps")
                .update({"is_public": not existing["is_public"]})
                .eq("id", map_id)
                .eq("user_id", self.user_id)
                .embed_user()
                .single()
            )
            self.maps = self.replace(self.maps, updated)
            return updated
        return None

    def create_template(
        self,
        name: str,
        template_data: dict[str, Any],
        description: str = "",
        category: str = "General",
    ) -> Row | None:
        """Add a public template (used by the seed command)."""
        if not name.strip():
            return None
        with self.remote("create_template"):
            template = (
                self.client.table("map_templates")
                .insert(
                    {
                        "name": name,
                        "description": description,
                        "template_data": template_data,
                        "category": category,
                    }
                )
                .single()
            )
            self.templates.append(template)
            logger.info("maps.template_created", template_id=template["id"], name=name)
            return template
        return None
