"""Common plumbing for feature pages.

A page holds local view state (lists of row dicts), reads the session for
the current user, and issues queries through the shared client. Any failed
remote call inside ``with self.remote("op"):`` is logged and swallowed, so
local state stays as it was before the call.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

import structlog

from socialhub.auth.session import SessionHolder
from socialhub.db.client import DataClient, delete_file, log_user_activity
from socialhub.db.errors import DataClientError

logger = structlog.get_logger(__name__)

Row = dict[str, Any]


class Page:
    """Base class for feature pages."""

    feature = "page"

    def __init__(self, client: DataClient, session: SessionHolder):
        self.client = client
        self.session = session
        self.loading = False

    @property
    def user_id(self) -> str | None:
        return self.session.user_id

    @contextmanager
    def remote(self, operation: str, **context: Any) -> Generator[None, None, None]:
        """Catch and log data-client failures for one page operation."""
        try:
            yield
        except DataClientError as e:
            logger.error(
                f"{self.feature}.{operation}_failed",
                user_id=self.user_id,
                error=str(e),
                **context,
            )

    def log_activity(self, activity_type: str, **data: Any) -> None:
        if self.user_id:
            log_user_activity(self.client, self.user_id, activity_type, data or None)

    def discard_upload(self, bucket: str, path: str) -> None:
        """Remove a stored object whose row was never written."""
        with self.remote("discard_upload", bucket=bucket, path=path):
            delete_file(self.client, bucket, path)

    @staticmethod
    def find(rows: list[Row], row_id: str) -> Row | None:
        return next((row for row in rows if row.get("id") == row_id), None)

    @staticmethod
    def replace(rows: list[Row], row: Row) -> list[Row]:
        """Swap the cached row with the same id for the fresh one."""
        return [row if existing.get("id") == row["id"] else existing for existing in rows]
