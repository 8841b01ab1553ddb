"""Tests for quiz endpoints."""

import pytest


def _quiz(api, headers, **overrides):
    body = {"title": "Capitals", "category": "Geography", "difficulty": "easy", **overrides}
    response = api.post("/api/quizzes", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _question(api, headers, quiz_id, text, answer, points=1):
    return api.post(
        f"/api/quizzes/{quiz_id}/questions",
        headers=headers,
        json={"question_text": text, "correct_answer": answer, "options": [answer, "Other"], "points": points},
    )


@pytest.fixture
def quiz(api, auth_headers):
    quiz = _quiz(api, auth_headers)
    assert _question(api, auth_headers, quiz["id"], "Capital of France?", "Paris").status_code == 201
    assert _question(api, auth_headers, quiz["id"], "Capital of Peru?", "Lima", points=3).status_code == 201
    return quiz


class TestCreateQuiz:
    def test_create(self, api, auth_headers):
        quiz = _quiz(api, auth_headers)
        assert quiz["questions_count"] == 0
        assert quiz["users"]["username"] == "ana"

    def test_bad_difficulty(self, api, auth_headers):
        response = api.post("/api/quizzes", headers=auth_headers, json={"title": "x", "difficulty": "brutal"})
        assert response.status_code == 400

    def test_timed_needs_limit(self, api, auth_headers):
        response = api.post("/api/quizzes", headers=auth_headers, json={"title": "x", "is_timed": True})
        assert response.status_code == 400

    def test_timed_limit_stored_in_seconds(self, api, auth_headers):
        quiz = _quiz(api, auth_headers, is_timed=True, time_limit_minutes=2)
        assert quiz["time_limit"] == 120

    def test_private_quizzes_not_listed(self, api, auth_headers, other_headers):
        _quiz(api, auth_headers, title="Secret", is_public=False)
        _quiz(api, auth_headers, title="Open")
        titles = [q["title"] for q in api.get("/api/quizzes", headers=other_headers).json()["quizzes"]]
        assert titles == ["Open"]

    def test_filter_by_difficulty(self, api, auth_headers):
        _quiz(api, auth_headers, title="Hard one", difficulty="hard")
        _quiz(api, auth_headers, title="Easy one")
        data = api.get("/api/quizzes", headers=auth_headers, params={"difficulty": "hard"}).json()
        assert [q["title"] for q in data["quizzes"]] == ["Hard one"]


class TestQuestions:
    def test_questions_in_order_without_answers(self, api, auth_headers, quiz):
        questions = api.get(f"/api/quizzes/{quiz['id']}/questions", headers=auth_headers).json()
        assert [q["order_index"] for q in questions] == [0, 1]
        assert all("correct_answer" not in q for q in questions)
        listed = api.get("/api/quizzes", headers=auth_headers).json()["quizzes"]
        assert listed[0]["questions_count"] == 2

    def test_only_owner_adds_questions(self, api, other_headers, quiz):
        assert _question(api, other_headers, quiz["id"], "Sneaky?", "yes").status_code == 404

    def test_bad_question_type(self, api, auth_headers, quiz):
        response = api.post(
            f"/api/quizzes/{quiz['id']}/questions",
            headers=auth_headers,
            json={"question_text": "?", "correct_answer": "a", "question_type": "essay"},
        )
        assert response.status_code == 400

    def test_unknown_quiz(self, api, auth_headers):
        assert api.get("/api/quizzes/nope/questions", headers=auth_headers).status_code == 404


class TestAttempts:
    """Tests for POST /{id}/attempts and GET /attempts."""

    def _answers(self, api, headers, quiz_id, *answers):
        questions = api.get(f"/api/quizzes/{quiz_id}/questions", headers=headers).json()
        return {q["id"]: a for q, a in zip(questions, answers)}

    def test_scored_on_points(self, api, auth_headers, other_headers, quiz):
        answers = self._answers(api, other_headers, quiz["id"], "Paris", "Quito")
        response = api.post(f"/api/quizzes/{quiz['id']}/attempts", headers=other_headers, json={"answers": answers})
        assert response.status_code == 201
        attempt = response.json()
        assert attempt["score"] == 1
        assert attempt["max_score"] == 4
        assert attempt["percentage"] == 25
        assert attempt["passed"] is False
        assert attempt["attempt_number"] == 1

        history = api.get("/api/quizzes/attempts", headers=other_headers).json()
        assert history["count"] == 1

    def test_all_correct_passes(self, api, auth_headers, quiz):
        answers = self._answers(api, auth_headers, quiz["id"], "Paris", "Lima")
        attempt = api.post(
            f"/api/quizzes/{quiz['id']}/attempts", headers=auth_headers, json={"answers": answers}
        ).json()
        assert attempt["percentage"] == 100
        assert attempt["passed"] is True

    def test_max_attempts(self, api, auth_headers):
        quiz = _quiz(api, auth_headers, max_attempts=1)
        _question(api, auth_headers, quiz["id"], "1+1?", "2")
        url = f"/api/quizzes/{quiz['id']}/attempts"
        assert api.post(url, headers=auth_headers, json={"answers": {}}).status_code == 201
        second = api.post(url, headers=auth_headers, json={"answers": {}})
        assert second.status_code == 409
        assert second.json()["detail"] == "Maximum attempts reached"

    def test_no_questions(self, api, auth_headers):
        quiz = _quiz(api, auth_headers)
        response = api.post(f"/api/quizzes/{quiz['id']}/attempts", headers=auth_headers, json={})
        assert response.status_code == 400

    def test_timed_attempt_records_time_taken(self, api, auth_headers):
        quiz = _quiz(api, auth_headers, is_timed=True, time_limit_minutes=1)
        _question(api, auth_headers, quiz["id"], "1+1?", "2")
        attempt = api.post(
            f"/api/quizzes/{quiz['id']}/attempts", headers=auth_headers, json={"answers": {}, "time_left": 45}
        ).json()
        assert attempt["time_taken"] == 15
