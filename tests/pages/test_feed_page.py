"""Tests for FeedPage and the public posts listing."""

import pytest

from socialhub.pages.feed import FeedPage, list_public_posts


@pytest.fixture
def page(data_client, session):
    page = FeedPage(data_client, session)
    page.load()
    return page


@pytest.fixture
def post(page):
    return page.create("Hello world", location="Madrid", tags="intro, hello")


class TestCreatePost:
    def test_create(self, page, post):
        assert post["visibility"] == "public"
        assert post["is_public"] is True
        assert post["tags"] == ["intro", "hello"]
        assert post["users"]["username"] == "ana"
        assert post["users"]["is_verified"] is False
        assert page.posts[0]["id"] == post["id"]

    def test_friends_only_not_public(self, page):
        post = page.create("Just friends", visibility="friends")
        assert post["is_public"] is False

    def test_rejects_blank_or_bad_visibility(self, page):
        assert page.create("  ") is None
        assert page.create("x", visibility="everyone") is None

    def test_media_urls(self, page):
        post = page.create("Look", image_url="https://img.example.com/a.png")
        assert post["image_url"] == "https://img.example.com/a.png"
        assert post["video_url"] is None


class TestLoadFeed:
    def test_only_public_newest_first(self, data_client, session, other_session):
        mine = FeedPage(data_client, session)
        mine.create("first")
        mine.create("hidden", visibility="private")
        FeedPage(data_client, other_session).create("second")

        page = FeedPage(data_client, session)
        assert page.load()
        assert [p["content"] for p in page.posts] == ["second", "first"]

    def test_page_size(self, data_client, session):
        page = FeedPage(data_client, session, page_size=2)
        for i in range(3):
            page.create(f"post {i}")
        page.load()
        assert [p["content"] for p in page.posts] == ["post 2", "post 1"]


class TestReactions:
    def test_toggle_like(self, page, post, data_client):
        liked = page.toggle_like(post["id"])
        assert liked["is_liked"] is True
        assert liked["like_count"] == 1
        assert data_client.table("posts").select().eq("id", post["id"]).single()["like_count"] == 1
        unliked = page.toggle_like(post["id"])
        assert unliked["like_count"] == 0
        assert data_client.table("likes").select().execute().data == []

    def test_toggle_bookmark(self, page, post, data_client, session):
        page.toggle_bookmark(post["id"])
        saved = data_client.table("saved_items").select().single()
        assert saved["item_type"] == "post"
        assert saved["item_id"] == post["id"]

        fresh = FeedPage(data_client, session)
        fresh.load()
        assert fresh.posts[0]["is_bookmarked"] is True

        fresh.toggle_bookmark(post["id"])
        assert data_client.table("saved_items").select().execute().data == []

    def test_unknown_post(self, page):
        assert page.toggle_like("missing") is None


class TestComments:
    def test_comments_oldest_first_and_counted(self, page, post, data_client):
        page.open_comments(post["id"])
        page.add_comment("one")
        page.add_comment("two")
        assert [c["content"] for c in page.open_comments(post["id"])] == ["one", "two"]
        assert page.selected["comment_count"] == 2
        assert data_client.table("posts").select().eq("id", post["id"]).single()["comment_count"] == 2

    def test_comment_without_selection(self, page, post):
        assert page.add_comment("orphan") is None


class TestListPublicPosts:
    """Tests for the paginated posts listing."""

    @pytest.fixture
    def posts(self, data_client, session, other_session):
        mine = FeedPage(data_client, session)
        first = mine.create("first")
        second = mine.create("second")
        theirs = FeedPage(data_client, other_session)
        theirs.load()
        theirs.toggle_like(first["id"])
        theirs.open_comments(first["id"])
        theirs.add_comment("nice")
        return first, second

    def test_counts_from_rows(self, data_client, posts):
        rows = list_public_posts(data_client)
        assert [r["content"] for r in rows] == ["second", "first"]
        assert rows[1]["like_count"] == 1
        assert rows[1]["comment_count"] == 1
        assert rows[1]["user_profile"]["username"] == "ana"
        assert "users" not in rows[1]

    def test_is_liked_for_viewer(self, data_client, posts, session, other_session):
        assert list_public_posts(data_client, viewer_id=other_session.user_id)[1]["is_liked"]
        assert not list_public_posts(data_client, viewer_id=session.user_id)[1]["is_liked"]
        assert not list_public_posts(data_client)[1]["is_liked"]

    def test_pagination(self, data_client, posts):
        assert [r["content"] for r in list_public_posts(data_client, page=2, limit=1)] == ["first"]
        assert list_public_posts(data_client, page=3, limit=1) == []
