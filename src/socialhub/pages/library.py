"""Library page: book catalog, reading progress, yearly goal, collections."""

from __future__ import annotations

from datetime import datetime

import structlog

from socialhub.db.client import utc_now
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import matches_search

logger = structlog.get_logger(__name__)

GENRES = [
    "Fiction",
    "Non-Fiction",
    "Mystery",
    "Romance",
    "Science Fiction",
    "Fantasy",
    "Biography",
    "History",
    "Self-Help",
    "Business",
    "Technology",
    "Other",
]

STATUSES = ["to-read", "reading", "completed", "paused"]

STATUS_LABELS = {
    "to-read": "To Read",
    "reading": "Reading",
    "completed": "Completed",
    "paused": "Paused",
}


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, "Unknown")


def progress_percentage(current_page: int | None, total_pages: int | None) -> int:
    """Whole-number percentage read; 0 without a page or a page count."""
    if not current_page or not total_pages:
        return 0
    return round(current_page / total_pages * 100)


class LibraryPage(Page):
    feature = "library"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.books: list[Row] = []
        self.progress: list[Row] = []
        self.goal: Row | None = None
        self.collections: list[Row] = []

    def load(self) -> bool:
        """Fetch the catalog and the user's progress, goal and collections.

        Each part is fetched independently; one failing does not stop
        the others.
        """
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load_books"):
                self.books = (
                    self.client.table("books")
                    .select()
                    .order("created_at", ascending=False)
                    .execute()
                    .data
                )
            with self.remote("load_progress"):
                self.progress = (
                    self.client.table("reading_progress")
                    .select()
                    .eq("user_id", self.user_id)
                    .execute()
                    .data
                )
            with self.remote("load_goal"):
                self.goal = (
                    self.client.table("reading_goals")
                    .select()
                    .eq("user_id", self.user_id)
                    .eq("year", datetime.now().year)
                    .maybe_single()
                )
            with self.remote("load_collections"):
                self.collections = (
                    self.client.table("book_collections")
                    .select()
                    .eq("user_id", self.user_id)
                    .order("created_at", ascending=False)
                    .execute()
                    .data
                )
            return True
        finally:
            self.loading = False

    def progress_for(self, book_id: str) -> Row | None:
        return next((p for p in self.progress if p["book_id"] == book_id), None)

    def visible(self, search: str = "", genre: str = "all", status: str = "all") -> list[Row]:
        """Books matching search (title, author, genre), genre and reading status."""
        rows = [
            book
            for book in self.books
            if matches_search(search, book["title"], book["author"], book["genre"])
            and (genre == "all" or book["genre"] == genre)
        ]
        if status != "all":
            book_ids = {p["book_id"] for p in self.progress if p["status"] == status}
            rows = [book for book in rows if book["id"] in book_ids]
        return rows

    def currently_reading(self) -> list[Row]:
        book_ids = [p["book_id"] for p in self.progress if p["status"] == "reading"]
        return [book for book in self.books if book["id"] in book_ids]

    def stats(self) -> dict[str, int]:
        """Count of the user's books per reading status."""
        counts = {status: 0 for status in STATUSES}
        for entry in self.progress:
            if entry["status"] in counts:
                counts[entry["status"]] += 1
        counts["total"] = len(self.books)
        return counts

    def add_book(
        self,
        title: str,
        author: str,
        genre: str = "",
        description: str = "",
        total_pages: int | str | None = None,
        language: str = "en",
        publisher: str = "",
    ) -> Row | None:
        if not title.strip() or not author.strip() or not self.user_id:
            return None

        try:
            pages = int(total_pages or 0)
        except (TypeError, ValueError):
            pages = 0

        with self.remote("add_book"):
            book = (
                self.client.table("books")
                .insert(
                    {
                        "user_id": self.user_id,
                        "title": title,
                        "author": author,
                        "genre": genre or "Other",
                        "description": description,
                        "total_pages": pages,
                        "language": language or "en",
                        "publisher": publisher,
                    }
                )
                .single()
            )
            self.books = [book] + self.books
            self.log_activity("book_added", book_id=book["id"], title=title, author=author)
            return book
        return None

    def update_progress(
        self,
        book_id: str,
        status: str,
        current_page: int | None = None,
    ) -> Row | None:
        """Record the reading status (and page) of a book.

        Creates the progress row on first use. started_at is stamped the
        first time the book moves to "reading"; completed_at is stamped on
        "completed" and cleared otherwise. Completing a book adds it and
        its pages to the current goal once; re-completing does not count again.
        """
        if status not in STATUSES or not self.user_id:
            return None
        book = self.find(self.books, book_id)
        if book is None:
            return None

        existing = self.progress_for(book_id)
        already_completed = bool(existing) and existing["status"] == "completed"
        now = utc_now()
        started_at = existing.get("started_at") if existing else None
        if status == "reading" and not started_at:
            started_at = now
        completed_at = None
        if status == "completed":
            completed_at = existing["completed_at"] if already_completed else now

        values = {
            "user_id": self.user_id,
            "book_id": book_id,
            "status": status,
            "current_page": current_page or 0,
            "progress_percentage": progress_percentage(current_page, book["total_pages"]),
            "started_at": started_at,
            "completed_at": completed_at,
        }

        with self.remote("update_progress", book_id=book_id):
            if existing:
                entry = (
                    self.client.table("reading_progress")
                    .update(values)
                    .eq("id", existing["id"])
                    .single()
                )
                self.progress = self.replace(self.progress, entry)
            else:
                entry = self.client.table("reading_progress").insert(values).single()
                self.progress = self.progress + [entry]

            if status == "completed" and not already_completed and self.goal:
                self._advance_goal(book["total_pages"])
            return entry
        return None

    def _advance_goal(self, pages: int) -> None:
        goal = self.goal
        with self.remote("advance_goal", goal_id=goal["id"]):
            self.goal = (
                self.client.table("reading_goals")
                .update(
                    {
                        "current_books": goal["current_books"] + 1,
                        "current_pages": goal["current_pages"] + (pages or 0),
                    }
                )
                .eq("id", goal["id"])
                .single()
            )
            logger.info(
                "library.goal_advanced",
                goal_id=goal["id"],
                books=self.goal["current_books"],
                target=self.goal["target_books"],
            )

    def create_goal(self, target_books: int | str, target_pages: int | str | None = None) -> Row | None:
        """Set this year's reading goal."""
        try:
            books = int(target_books)
        except (TypeError, ValueError):
            return None
        if books <= 0 or not self.user_id:
            return None
        try:
            pages = int(target_pages or 0)
        except (TypeError, ValueError):
            pages = 0

        with self.remote("create_goal"):
            self.goal = (
                self.client.table("reading_goals")
                .insert(
                    {
                        "user_id": self.user_id,
                        "year": datetime.now().year,
                        "target_books": books,
                        "target_pages": pages,
                        "current_books": 0,
                        "current_pages": 0,
                    }
                )
                .single()
            )
            return self.goal
        return None

    def goal_progress(self) -> int:
        """Percent of this year's book target reached (capped at 100)."""
        if not self.goal or not self.goal["target_books"]:
            return 0
        return min(100, round(self.goal["current_books"] / self.goal["target_books"] * 100))

    def create_collection(self, name: str, description: str = "", is_public: bool = False) -> Row | None:
        if not name.strip() or not self.user_id:
            return None
        with self.remote("create_collection"):
            collection = (
                self.client.table("book_collections")
                .insert(
                    {
                        "user_id": self.user_id,
                        "name": name,
                        "description": description,
                        "is_public": is_public,
                    }
                )
                .single()
            )
            self.collections = [collection] + self.collections
            return collection
        return None
