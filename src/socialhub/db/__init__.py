"""Record store and file buckets.

Provides:
- SQLite schema and connection management (database)
- The shared data client with its query builder (client)
- Local-disk buckets for uploads (storage)
"""

from socialhub.db.client import (
    DataClient,
    Query,
    QueryResult,
    configure_client,
    get_client,
    reset_client,
)
from socialhub.db.database import get_db, init_db
from socialhub.db.errors import (
    DataClientError,
    QueryError,
    RecordNotFoundError,
    StorageError,
)

__all__ = [
    "DataClient",
    "DataClientError",
    "Query",
    "QueryError",
    "QueryResult",
    "RecordNotFoundError",
    "StorageError",
    "configure_client",
    "get_client",
    "get_db",
    "init_db",
    "reset_client",
]
