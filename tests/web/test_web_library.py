"""Tests for library endpoints."""

import pytest


@pytest.fixture
def book(api, auth_headers):
    response = api.post(
        "/api/library/books",
        headers=auth_headers,
        json={"title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction", "total_pages": 400},
    )
    assert response.status_code == 201
    return response.json()


class TestBooks:
    def test_add_and_list(self, api, auth_headers, book):
        api.post("/api/library/books", headers=auth_headers, json={"title": "Emma", "author": "Austen"})
        data = api.get("/api/library/books", headers=auth_headers, params={"genre": "Science Fiction"}).json()
        assert [b["title"] for b in data["books"]] == ["Dune"]
        found = api.get("/api/library/books", headers=auth_headers, params={"search": "austen"}).json()
        assert [b["title"] for b in found["books"]] == ["Emma"]

    def test_title_and_author_required(self, api, auth_headers):
        response = api.post("/api/library/books", headers=auth_headers, json={"title": "x", "author": " "})
        assert response.status_code == 400

    def test_filter_by_reading_status(self, api, auth_headers, book):
        api.put(f"/api/library/books/{book['id']}/progress", headers=auth_headers, json={"status": "reading"})
        reading = api.get("/api/library/books", headers=auth_headers, params={"reading_status": "reading"})
        assert [b["id"] for b in reading.json()["books"]] == [book["id"]]
        done = api.get("/api/library/books", headers=auth_headers, params={"reading_status": "completed"})
        assert done.json()["count"] == 0


class TestProgress:
    """Tests for PUT /books/{id}/progress and GET /progress."""

    def test_update_progress(self, api, auth_headers, book):
        response = api.put(
            f"/api/library/books/{book['id']}/progress",
            headers=auth_headers,
            json={"status": "reading", "current_page": 100},
        )
        assert response.status_code == 200
        entry = response.json()
        assert entry["progress_percentage"] == 25
        assert entry["started_at"]

        listed = api.get("/api/library/progress", headers=auth_headers).json()
        assert [p["book_id"] for p in listed] == [book["id"]]

    def test_bad_status(self, api, auth_headers, book):
        response = api.put(
            f"/api/library/books/{book['id']}/progress", headers=auth_headers, json={"status": "skimmed"}
        )
        assert response.status_code == 400

    def test_unknown_book(self, api, auth_headers):
        response = api.put("/api/library/books/nope/progress", headers=auth_headers, json={"status": "reading"})
        assert response.status_code == 404


class TestGoalAndStats:
    def test_stats_without_goal(self, api, auth_headers, book):
        stats = api.get("/api/library/stats", headers=auth_headers).json()
        assert stats["total"] == 1
        assert stats["reading"] == 0
        assert stats["goal"] is None
        assert stats["goal_progress"] == 0

    def test_goal_advances_on_completion(self, api, auth_headers, book):
        created = api.post("/api/library/goal", headers=auth_headers, json={"target_books": 4})
        assert created.status_code == 201

        api.put(
            f"/api/library/books/{book['id']}/progress",
            headers=auth_headers,
            json={"status": "completed", "current_page": 400},
        )
        stats = api.get("/api/library/stats", headers=auth_headers).json()
        assert stats["completed"] == 1
        assert stats["goal"]["current_books"] == 1
        assert stats["goal"]["current_pages"] == 400
        assert stats["goal_progress"] == 25

    def test_second_goal_conflicts(self, api, auth_headers):
        api.post("/api/library/goal", headers=auth_headers, json={"target_books": 4})
        response = api.post("/api/library/goal", headers=auth_headers, json={"target_books": 8})
        assert response.status_code == 409

    def test_goal_target_must_be_positive(self, api, auth_headers):
        assert api.post("/api/library/goal", headers=auth_headers, json={"target_books": 0}).status_code == 422


class TestCollections:
    def test_create_and_list(self, api, auth_headers):
        response = api.post("/api/library/collections", headers=auth_headers, json={"name": "Summer"})
        assert response.status_code == 201
        assert response.json()["book_count"] == 0
        listed = api.get("/api/library/collections", headers=auth_headers).json()
        assert [c["name"] for c in listed] == ["Summer"]

    def test_blank_name(self, api, auth_headers):
        assert api.post("/api/library/collections", headers=auth_headers, json={"name": ""}).status_code == 400
