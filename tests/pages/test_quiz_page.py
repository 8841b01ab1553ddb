"""Tests for QuizPage and QuizRun."""

import pytest

from socialhub.pages.quiz import QuizPage, QuizRun, format_time, score_answers


@pytest.fixture
def page(data_client, session):
    page = QuizPage(data_client, session)
    page.load()
    return page


@pytest.fixture
def quiz(page):
    quiz = page.create_quiz("Capitals", "Europe", "Geography", "easy", passing_score=50)
    page.add_question(quiz["id"], "Capital of France?", "Paris", ["Paris", "Rome"], points=2)
    page.add_question(quiz["id"], "Capital of Italy?", "Rome", ["Paris", "Rome"])
    page.add_question(quiz["id"], "Madrid is in Spain", "true", question_type="true_false")
    return page.find(page.quizzes, quiz["id"])


class TestHelpers:
    @pytest.mark.parametrize("seconds,expected", [(0, "0:00"), (5, "0:05"), (125, "2:05"), (-3, "0:00")])
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_score_answers_weighted(self):
        questions = [
            {"id": "a", "points": 2, "correct_answer": "x"},
            {"id": "b", "points": 1, "correct_answer": "y"},
        ]
        assert score_answers(questions, {"a": "x", "b": "n"}) == (2, 3, 1)
        assert score_answers(questions, {}) == (0, 3, 0)


class TestCreateQuiz:
    """Tests for create_quiz and add_question."""

    def test_untimed_has_no_limit(self, page):
        quiz = page.create_quiz("Q", time_limit_minutes=5)
        assert quiz["time_limit"] is None
        assert quiz["category"] == "Other"

    def test_timed_converts_minutes(self, page):
        quiz = page.create_quiz("Q", is_timed=True, time_limit_minutes="2")
        assert quiz["time_limit"] == 120
        assert quiz["is_timed"] is True

    def test_timed_without_limit_rejected(self, page):
        assert page.create_quiz("Q", is_timed=True) is None

    def test_bad_difficulty(self, page):
        assert page.create_quiz("Q", difficulty="insane") is None

    def test_passing_score_parsed(self, page):
        assert page.create_quiz("Q", passing_score="80")["passing_score"] == 80
        assert page.create_quiz("Q", passing_score="abc") is None
        assert page.create_quiz("Q", passing_score=None) is None
        assert len(page.quizzes) == 1

    def test_questions_ordered_and_counted(self, page, quiz):
        questions = page.questions(quiz["id"])
        assert [q["order_index"] for q in questions] == [0, 1, 2]
        assert quiz["questions_count"] == 3

    def test_only_owner_adds_questions(self, quiz, data_client, other_session):
        assert QuizPage(data_client, other_session).add_question(quiz["id"], "Q?", "A") is None

    def test_question_needs_answer(self, page, quiz):
        assert page.add_question(quiz["id"], "Q?", " ") is None


class TestQuizRun:
    """Tests for taking a quiz."""

    def test_navigation_and_progress(self, page, quiz):
        run = page.start(quiz["id"])
        assert isinstance(run, QuizRun)
        assert run.question["question_text"] == "Capital of France?"
        assert run.progress == 33
        assert run.next() is None
        assert run.progress == 67
        run.previous()
        run.previous()
        assert run.index == 0

    def test_next_on_last_submits(self, page, quiz):
        run = page.start(quiz["id"])
        questions = run.questions
        run.answer(questions[0]["id"], "Paris")
        run.next()
        run.answer(questions[1]["id"], "Paris")
        run.next()
        run.answer(questions[2]["id"], "true")
        attempt = run.next()
        assert run.completed
        assert attempt["score"] == 3
        assert attempt["max_score"] == 4
        assert attempt["percentage"] == 75
        assert attempt["passed"] is True
        assert attempt["attempt_number"] == 1
        assert run.submit() is attempt

    def test_answers_frozen_after_submit(self, page, quiz):
        run = page.start(quiz["id"])
        run.submit()
        run.answer(run.questions[0]["id"], "Paris")
        assert run.answers == {}

    def test_failed_attempt(self, page, quiz):
        attempt = page.start(quiz["id"]).submit()
        assert attempt["percentage"] == 0
        assert attempt["passed"] is False

    def test_timer_auto_submits(self, page):
        quiz = page.create_quiz("Timed", is_timed=True, time_limit_minutes=1)
        page.add_question(quiz["id"], "1+1?", "2")
        run = page.start(quiz["id"])
        assert run.time_left == 60
        assert run.tick(45) is None
        attempt = run.tick(30)
        assert run.time_left == 0
        assert attempt["time_taken"] == 60

    def test_no_questions_no_attempt(self, page):
        quiz = page.create_quiz("Empty")
        run = page.start(quiz["id"])
        assert run.question is None
        assert run.submit() is None
        assert not run.completed


class TestAttempts:
    """Tests for attempt history and limits."""

    def test_attempt_numbers_and_best(self, page, quiz):
        first = page.start(quiz["id"]).submit()
        run = page.start(quiz["id"])
        run.answer(run.questions[0]["id"], "Paris")
        second = run.submit()
        assert second["attempt_number"] == 2
        assert page.latest_attempt(quiz["id"])["id"] == second["id"]
        assert page.best_attempt(quiz["id"])["id"] == second["id"]
        assert first["id"] in [a["id"] for a in page.attempts_for(quiz["id"])]

    def test_max_attempts(self, page):
        quiz = page.create_quiz("Once", max_attempts=1)
        page.add_question(quiz["id"], "Q?", "A")
        assert page.start(quiz["id"]).submit()
        assert page.start(quiz["id"]) is None

    def test_activity_logged(self, page, quiz, data_client, session):
        page.start(quiz["id"]).submit()
        types = [
            row["activity_type"]
            for row in data_client.table("user_activity").select().eq("user_id", session.user_id).execute().data
        ]
        assert types.count("quiz_completed") == 1

    def test_visible_filters(self, page, quiz):
        page.create_quiz("Atoms", "Chemistry basics", "Science", "hard")
        assert [q["title"] for q in page.visible(category="Science")] == ["Atoms"]
        assert [q["title"] for q in page.visible(difficulty="easy")] == ["Capitals"]
        assert [q["title"] for q in page.visible(search="europe")] == ["Capitals"]

    def test_private_quizzes_not_listed(self, page, data_client, session):
        page.create_quiz("Secret", is_public=False)
        fresh = QuizPage(data_client, session)
        fresh.load()
        assert fresh.quizzes == []
