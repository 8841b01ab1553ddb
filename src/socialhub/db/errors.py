"""Exceptions raised by the data client and storage buckets."""


class DataClientError(Exception):
    """Base error for any failed call against the record store or buckets."""


class QueryError(DataClientError):
    """Query rejected: unknown collection/column, constraint violation, bad filter."""


class RecordNotFoundError(DataClientError):
    """A single-row query matched zero rows (or more than one)."""

    def __init__(self, table: str, matched: int = 0):
        self.table = table
        self.matched = matched
        super().__init__(f"Expected one row from '{table}', matched {matched}")


class StorageError(DataClientError):
    """Bucket operation failed: unsafe path, existing object, missing object."""
