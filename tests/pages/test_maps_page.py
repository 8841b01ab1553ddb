"""Tests for MapsPage."""

import pytest

from socialhub.pages.maps import MapsPage, empty_map


@pytest.fixture
def page(data_client, session):
    page = MapsPage(data_client, session)
    page.load()
    return page


@pytest.fixture
def template(page):
    data = {"elements": [{"id": "root", "text": "Idea"}], "zoom": 2, "center": {"x": 0, "y": 0}}
    return page.create_template("Mind Map", data, "Branches", "Brainstorming")


class TestCreateMap:
    """Tests for MapsPage.create."""

    def test_empty_map_default(self, page):
        created = page.create("Plan")
        assert created["map_data"] == empty_map()
        assert created["users"]["username"] == "ana"
        assert page.current["id"] == created["id"]

    def test_from_template_copies_data_and_bumps_usage(self, page, template, data_client):
        created = page.create("Brainstorm", template_id=template["id"])
        assert created["map_data"] == template["template_data"]
        assert created["template_id"] == template["id"]
        stored = data_client.table("map_templates").select().eq("id", template["id"]).single()
        assert stored["usage_count"] == 1
        assert page.templates[0]["usage_count"] == 1

    def test_blank_title(self, page):
        assert page.create(" ") is None


class TestTemplates:
    def test_load_templates_by_usage(self, page, data_client):
        page.create_template("Rare", {"elements": []})
        popular = page.create_template("Popular", {"elements": []})
        data_client.table("map_templates").update({"usage_count": 5}).eq("id", popular["id"]).execute()
        assert [t["name"] for t in page.load_templates()] == ["Popular", "Rare"]

    def test_private_templates_hidden(self, page, data_client):
        hidden = page.create_template("Hidden", {"elements": []})
        data_client.table("map_templates").update({"is_public": False}).eq("id", hidden["id"]).execute()
        assert page.load_templates() == []


class TestSaveAndVisibility:
    def test_save_stamps_last_modified(self, page):
        created = page.create("Plan")
        saved = page.save(created["id"], {"elements": [{"id": "a"}]})
        assert saved["map_data"]["elements"] == [{"id": "a"}]
        assert "lastModified" in saved["map_data"]

    def test_toggle_public(self, page):
        created = page.create("Plan")
        assert page.toggle_public(created["id"])["is_public"] is True
        assert page.toggle_public(created["id"])["is_public"] is False

    def test_search_and_delete(self, page):
        created = page.create("Roadmap", "2025 goals")
        page.create("Family tree")
        assert [m["title"] for m in page.search("goals")] == ["Roadmap"]
        assert page.delete(created["id"])
        assert [m["title"] for m in page.maps] == ["Family tree"]
