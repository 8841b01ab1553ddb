"""Tests for NotesPage."""

import pytest

from socialhub.pages.notes import CATEGORIES, NotesPage


@pytest.fixture
def page(data_client, session):
    page = NotesPage(data_client, session)
    page.load()
    return page


class TestCreateNote:
    """Tests for NotesPage.create."""

    def test_create_defaults(self, page):
        note = page.create("Groceries", "milk, eggs")
        assert note["title"] == "Groceries"
        assert note["category"] == "Personal"
        assert note["tags"] == []
        assert note["is_pinned"] is False
        assert page.notes[0]["id"] == note["id"]

    def test_create_parses_tags(self, page):
        note = page.create("Plan", tags="work, q3 ,, ideas")
        assert note["tags"] == ["work", "q3", "ideas"]

    def test_blank_title_rejected(self, page):
        assert page.create("   ") is None
        assert page.notes == []

    def test_logs_activity(self, page, data_client, session):
        note = page.create("Diary")
        activity = data_client.table("user_activity").select().eq("user_id", session.user_id).single()
        assert activity["activity_type"] == "note_created"
        assert activity["activity_data"] == {"note_id": note["id"], "title": "Diary"}

    def test_signed_out_cannot_create(self, data_client):
        from socialhub.auth.session import SessionHolder

        assert NotesPage(data_client, SessionHolder(data_client)).create("x") is None


class TestVisibleNotes:
    """Tests for filtering, sorting and pinning."""

    @pytest.fixture
    def filled(self, page):
        page.create("beta", "second", category="Work", tags=["alpha"])
        page.create("Alpha", "first", category="Study")
        gamma = page.create("gamma", "third", category="Work")
        page.toggle_pin(gamma["id"])
        return page

    def test_pinned_first_then_title(self, filled):
        titles = [n["title"] for n in filled.visible(sort_by="title")]
        assert titles == ["gamma", "Alpha", "beta"]

    def test_category_filter(self, filled):
        titles = {n["title"] for n in filled.visible(category="Work")}
        assert titles == {"beta", "gamma"}

    def test_search_matches_tags(self, filled):
        """'alpha' matches the Alpha title and the beta tag."""
        titles = {n["title"] for n in filled.visible(search="ALPHA")}
        assert titles == {"Alpha", "beta"}

    def test_archived_hidden(self, filled):
        beta = next(n for n in filled.notes if n["title"] == "beta")
        archived = filled.archive(beta["id"])
        assert archived["is_archived"] is True
        assert "beta" not in [n["title"] for n in filled.visible()]

    def test_categories_include_custom(self, page):
        page.create("x", category="Recipes")
        assert page.categories() == CATEGORIES + ["Recipes"]


class TestUpdateDeleteNote:
    """Tests for update, toggle_pin and delete."""

    def test_update_stamps_updated_at(self, page):
        note = page.create("Old")
        updated = page.update(note["id"], title="New", user_id="someone-else")
        assert updated["title"] == "New"
        assert updated["user_id"] == note["user_id"]
        assert updated["updated_at"] >= note["updated_at"]

    def test_update_ignores_none_except_reminder(self, page):
        note = page.create("Keep", reminder_date="2030-01-01T09:00:00")
        updated = page.update(note["id"], title=None, is_pinned=None, category=None, reminder_date=None)
        assert updated["title"] == "Keep"
        assert updated["is_pinned"] is False
        assert updated["category"] == "Personal"
        assert updated["reminder_date"] is None

    def test_toggle_pin_twice(self, page):
        note = page.create("Pin me")
        assert page.toggle_pin(note["id"])["is_pinned"] is True
        assert page.toggle_pin(note["id"])["is_pinned"] is False

    def test_toggle_pin_unknown(self, page):
        assert page.toggle_pin("missing") is None

    def test_delete(self, page):
        note = page.create("Bye")
        assert page.delete(note["id"]) is True
        assert page.notes == []
        assert page.delete(note["id"]) is False

    def test_cannot_touch_other_users_notes(self, page, data_client, other_session):
        """Writes are scoped to the owner."""
        note = page.create("Mine")
        theirs = NotesPage(data_client, other_session)
        assert theirs.update(note["id"], title="Hacked") is None
        assert theirs.delete(note["id"]) is False
        page.load()
        assert page.notes[0]["title"] == "Mine"
