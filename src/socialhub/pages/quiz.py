"""Quiz page: browse and create quizzes, take them, keep attempt history.

Taking a quiz goes through a QuizRun:

    run = page.start(quiz_id)
    run.answer(run.question["id"], "Paris")
    run.next()                     # submits after the last question
    run.tick(1)                    # timed quizzes auto-submit at 0
    attempt = run.submit()
"""

from __future__ import annotations

from typing import Any

import structlog

from socialhub.db.client import utc_now
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import matches_search

logger = structlog.get_logger(__name__)

CATEGORIES = [
    "General Knowledge",
    "Science",
    "History",
    "Geography",
    "Literature",
    "Mathematics",
    "Technology",
    "Sports",
    "Entertainment",
    "Art",
    "Music",
    "Other",
]

DIFFICULTIES = ["easy", "medium", "hard"]
QUESTION_TYPES = ["multiple_choice", "true_false", "short_answer"]


def format_time(seconds: int) -> str:
    """Seconds as M:SS (e.g. 125 -> "2:05")."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


def score_answers(questions: list[Row], answers: dict[str, str]) -> tuple[int, int, int]:
    """Score answers against questions.

    Only exact matches with correct_answer earn the question's points.

    Returns:
        (earned points, total points, correct answer count)
    """
    earned = total = correct = 0
    for question in questions:
        total += question["points"]
        if answers.get(question["id"]) == question["correct_answer"]:
            earned += question["points"]
            correct += 1
    return earned, total, correct


class QuizRun:
    """One in-progress attempt at a quiz."""

    def __init__(self, page: QuizPage, quiz: Row, questions: list[Row]):
        self.page = page
        self.quiz = quiz
        self.questions = questions
        self.index = 0
        self.answers: dict[str, str] = {}
        self.time_left: int | None = (
            quiz["time_limit"] if quiz["is_timed"] and quiz["time_limit"] else None
        )
        self.completed = False
        self.attempt: Row | None = None

    @property
    def question(self) -> Row | None:
        if not self.questions:
            return None
        return self.questions[self.index]

    @property
    def progress(self) -> int:
        """Percent of the way through the questions (1-based position)."""
        if not self.questions:
            return 0
        return round((self.index + 1) / len(self.questions) * 100)

    def answer(self, question_id: str, answer: str) -> None:
        if not self.completed:
            self.answers[question_id] = answer

    def next(self) -> Row | None:
        """Advance; on the last question this submits and returns the attempt."""
        if self.index < len(self.questions) - 1:
            self.index += 1
            return None
        return self.submit()

    def previous(self) -> None:
        if self.index > 0:
            self.index -= 1

    def tick(self, seconds: int = 1) -> Row | None:
        """Count the timer down; submits when it runs out."""
        if self.time_left is None or self.completed:
            return None
        self.time_left = max(0, self.time_left - seconds)
        if self.time_left == 0:
            return self.submit()
        return None

    def time_taken(self) -> int:
        if not self.quiz["time_limit"] or self.time_left is None:
            return 0
        return self.quiz["time_limit"] - self.time_left

    def submit(self) -> Row | None:
        if self.completed:
            return self.attempt
        attempt = self.page.record_attempt(self)
        if attempt is not None:
            self.completed = True
            self.attempt = attempt
        return attempt


class QuizPage(Page):
    feature = "quiz"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.quizzes: list[Row] = []
        self.attempts: list[Row] = []

    def load(self) -> bool:
        """Fetch public quizzes with authors, and the user's attempts."""
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load"):
                self.quizzes = (
                    self.client.table("quizzes")
                    .select()
                    .eq("is_public", True)
                    .order("created_at", ascending=False)
                    .embed_user()
                    .execute()
                    .data
                )
            with self.remote("load_attempts"):
                self.attempts = (
                    self.client.table("quiz_attempts")
                    .select()
                    .eq("user_id", self.user_id)
                    .order("completed_at", ascending=False)
                    .execute()
                    .data
                )
            return True
        finally:
            self.loading = False

    def visible(self, search: str = "", category: str = "all", difficulty: str = "all") -> list[Row]:
        return [
            quiz
            for quiz in self.quizzes
            if matches_search(search, quiz["title"], quiz["description"], quiz["category"])
            and (category == "all" or quiz["category"] == category)
            and (difficulty == "all" or quiz["difficulty"] == difficulty)
        ]

    def create_quiz(
        self,
        title: str,
        description: str = "",
        category: str = "",
        difficulty: str = "medium",
        time_limit_minutes: int | str | None = None,
        passing_score: int | str = 70,
        is_public: bool = True,
        is_timed: bool = False,
        max_attempts: int | None = None,
    ) -> Row | None:
        """Create a quiz. The time limit is given in minutes, stored in seconds."""
        if not title.strip() or not self.user_id:
            return None
        if difficulty not in DIFFICULTIES:
            return None

        try:
            passing = int(passing_score)
        except (TypeError, ValueError):
            return None

        time_limit = None
        if is_timed:
            try:
                time_limit = int(time_limit_minutes) * 60
            except (TypeError, ValueError):
                return None

        with self.remote("create_quiz"):
            quiz = (
                self.client.table("quizzes")
                .insert(
                    {
                        "user_id": self.user_id,
                        "title": title,
                        "description": description,
                        "category": category or "Other",
                        "difficulty": difficulty,
                        "time_limit": time_limit,
                        "passing_score": passing,
                        "is_public": is_public,
                        "is_timed": is_timed,
                        "max_attempts": max_attempts,
                        "questions_count": 0,
                    }
                )
                .embed_user()
                .single()
            )
            self.quizzes = [quiz] + self.quizzes
            self.log_activity("quiz_created", quiz_id=quiz["id"], title=title)
            return quiz
        return None

    def add_question(
        self,
        quiz_id: str,
        question_text: str,
        correct_answer: str,
        options: list[str] | None = None,
        question_type: str = "multiple_choice",
        explanation: str = "",
        points: int = 1,
    ) -> Row | None:
        """Append a question to one of the user's quizzes."""
        if not question_text.strip() or not correct_answer.strip():
            return None
        if question_type not in QUESTION_TYPES:
            return None

        with self.remote("add_question", quiz_id=quiz_id):
            quiz = (
                self.client.table("quizzes")
                .select()
                .eq("id", quiz_id)
                .eq("user_id", self.user_id)
                .maybe_single()
            )
            if quiz is None:
                return None

            existing = (
                self.client.table("questions")
                .select("order_index")
                .eq("quiz_id", quiz_id)
                .order("order_index", ascending=False)
                .limit(1)
                .execute()
                .data
            )
            next_index = existing[0]["order_index"] + 1 if existing else 0

            question = (
                self.client.table("questions")
                .insert(
                    {
                        "quiz_id": quiz_id,
                        "question_text": question_text,
                        "question_type": question_type,
                        "options": options or [],
                        "correct_answer": correct_answer,
                        "explanation": explanation,
                        "points": points,
                        "order_index": next_index,
                    }
                )
                .single()
            )
            updated = (
                self.client.table("quizzes")
                .update({"questions_count": quiz["questions_count"] + 1, "updated_at": utc_now()})
                .eq("id", quiz_id)
                .embed_user()
                .single()
            )
            self.quizzes = self.replace(self.quizzes, updated)
            return question
        return None

    def questions(self, quiz_id: str) -> list[Row]:
        """A quiz's questions in order."""
        with self.remote("questions", quiz_id=quiz_id):
            return (
                self.client.table("questions")
                .select()
                .eq("quiz_id", quiz_id)
                .order("order_index")
                .execute()
                .data
            )
        return []

    def attempts_for(self, quiz_id: str) -> list[Row]:
        return [a for a in self.attempts if a["quiz_id"] == quiz_id]

    def latest_attempt(self, quiz_id: str) -> Row | None:
        return next(iter(self.attempts_for(quiz_id)), None)

    def best_attempt(self, quiz_id: str) -> Row | None:
        attempts = self.attempts_for(quiz_id)
        if not attempts:
            return None
        return max(attempts, key=lambda a: a["percentage"])

    def can_attempt(self, quiz: Row) -> bool:
        limit = quiz.get("max_attempts")
        return not limit or len(self.attempts_for(quiz["id"])) < limit

    def start(self, quiz_id: str) -> QuizRun | None:
        """Load a quiz's questions in order and begin a run."""
        quiz = self.find(self.quizzes, quiz_id)
        if quiz is None or not self.user_id:
            return None
        if not self.can_attempt(quiz):
            logger.info("quiz.attempts_exhausted", quiz_id=quiz_id, user_id=self.user_id)
            return None

        with self.remote("start", quiz_id=quiz_id):
            questions = (
                self.client.table("questions")
                .select()
                .eq("quiz_id", quiz_id)
                .order("order_index")
                .execute()
                .data
            )
            return QuizRun(self, quiz, questions)
        return None

    def record_attempt(self, run: QuizRun) -> Row | None:
        """Score a run and store the attempt."""
        quiz = run.quiz
        if not run.questions or not self.user_id:
            return None
        if not self.can_attempt(quiz):
            logger.info("quiz.attempts_exhausted", quiz_id=quiz["id"], user_id=self.user_id)
            return None

        earned, total, correct = score_answers(run.questions, run.answers)
        percentage = round(earned / total * 100) if total else 0
        passed = percentage >= quiz["passing_score"]

        values: dict[str, Any] = {
            "quiz_id": quiz["id"],
            "user_id": self.user_id,
            "score": earned,
            "max_score": total,
            "percentage": percentage,
            "time_taken": run.time_taken(),
            "answers": dict(run.answers),
            "passed": passed,
            "attempt_number": len(self.attempts_for(quiz["id"])) + 1,
            "completed_at": utc_now(),
        }

        with self.remote("submit", quiz_id=quiz["id"]):
            attempt = self.client.table("quiz_attempts").insert(values).single()
            self.attempts = [attempt] + self.attempts
            self.log_activity(
                "quiz_completed",
                quiz_id=quiz["id"],
                score=earned,
                percentage=percentage,
                passed=passed,
            )
            logger.info(
                "quiz.submitted",
                quiz_id=quiz["id"],
                correct=correct,
                percentage=percentage,
            )
            return attempt
        return None
