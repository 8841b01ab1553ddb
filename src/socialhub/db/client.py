"""Shared data-access client.

Every page issues its reads and writes through one ``DataClient``:

    client = get_client()
    notes = (
        client.table("notes")
        .select()
        .eq("user_id", user_id)
        .order("updated_at", ascending=False)
        .execute()
        .data
    )
    row = client.table("notes").insert({"user_id": user_id, "title": "Hi"}).single()
    client.storage.from_("drawings").upload("u1/thumb.png", png_bytes)

Rows come back as plain dicts. JSON columns are decoded, BOOLEAN columns
become bool. Inserts fill ``id`` (uuid4) and ``created_at``/``updated_at``
when the collection has those columns. Each call runs in its own connection
and transaction.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator, Iterable

import structlog

from socialhub.config.app_config import load_app_config
from socialhub.db.database import get_db, init_db, list_tables
from socialhub.db.errors import (
    DataClientError,
    QueryError,
    RecordNotFoundError,
    StorageError,
)
from socialhub.db.storage import StorageClient

logger = structlog.get_logger(__name__)

# Public profile fields embedded under "users" in read queries
PROFILE_FIELDS = ("username", "full_name", "avatar_url")

_OPERATORS = {"eq": "=", "neq": "!=", "gt": ">", "gte": ">=", "lt": "<", "lte": "<="}


def utc_now() -> str:
    """Current UTC time as ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Column:
    """Column metadata read from the schema."""

    name: str
    decl_type: str

    @property
    def is_json(self) -> bool:
        return self.decl_type == "JSON"

    @property
    def is_bool(self) -> bool:
        return self.decl_type == "BOOLEAN"


@dataclass
class QueryResult:
    """Rows returned by a query, plus the exact match count when requested."""

    data: list[dict[str, Any]] = field(default_factory=list)
    count: int | None = None


@dataclass
class _Embed:
    fk: str
    key: str
    fields: tuple[str, ...]


class Query:
    """Builder for one select/insert/update/delete against a collection."""

    def __init__(self, client: DataClient, table: str):
        self._client = client
        self.table = table
        self._columns_meta = client.columns(table)
        self._action = "select"
        self._projection: list[str] | None = None
        self._count = False
        self._filters: list[tuple[str, str, Any]] = []
        self._order: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._offset = 0
        self._payload: Any = None
        self._embeds: list[_Embed] = []

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def select(self, columns: str = "*", count: bool = False) -> Query:
        """Choose returned columns ("*" or comma-separated names).

        After insert/update/delete this only narrows the returned rows.
        """
        if columns.strip() != "*":
            names = [c.strip() for c in columns.split(",") if c.strip()]
            for name in names:
                self._check_column(name)
            self._projection = names
        self._count = count
        return self

    def insert(self, rows: dict[str, Any] | list[dict[str, Any]]) -> Query:
        self._action = "insert"
        self._payload = [rows] if isinstance(rows, dict) else list(rows)
        return self

    def update(self, values: dict[str, Any]) -> Query:
        self._action = "update"
        self._payload = dict(values)
        return self

    def delete(self) -> Query:
        self._action = "delete"
        return self

    # ------------------------------------------------------------------
    # Filters and modifiers
    # ------------------------------------------------------------------

    def _filter(self, column: str, op: str, value: Any) -> Query:
        self._check_column(column)
        self._filters.append((column, op, value))
        return self

    def eq(self, column: str, value: Any) -> Query:
        """Equality filter. A None value matches NULL."""
        if value is None:
            return self.is_null(column)
        return self._filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> Query:
        return self._filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> Query:
        return self._filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> Query:
        return self._filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> Query:
        return self._filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> Query:
        return self._filter(column, "lte", value)

    def is_null(self, column: str) -> Query:
        return self._filter(column, "is_null", None)

    def in_(self, column: str, values: Iterable[Any]) -> Query:
        return self._filter(column, "in", list(values))

    def order(self, column: str, ascending: bool = True) -> Query:
        self._check_column(column)
        self._order.append((column, ascending))
        return self

    def limit(self, count: int) -> Query:
        self._limit = max(0, int(count))
        return self

    def range(self, start: int, end: int) -> Query:
        """Inclusive row window, e.g. range(0, 9) is the first ten rows."""
        self._offset = max(0, int(start))
        self._limit = max(0, int(end) - self._offset + 1)
        return self

    def embed_user(
        self,
        fk: str = "user_id",
        key: str = "users",
        fields: Iterable[str] = PROFILE_FIELDS,
    ) -> Query:
        """Attach the referenced user's public profile to each row under key."""
        self._check_column(fk)
        self._embeds.append(_Embed(fk=fk, key=key, fields=tuple(fields)))
        return self

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self) -> QueryResult:
        if self._action == "insert":
            rows, count = self._run_insert(), None
        elif self._action == "update":
            rows, count = self._run_update(), None
        elif self._action == "delete":
            rows, count = self._run_delete(), None
        else:
            rows, count = self._run_select()

        for embed in self._embeds:
            self._attach_profiles(rows, embed)

        if self._projection is not None:
            keep = set(self._projection) | {e.key for e in self._embeds}
            rows = [{k: v for k, v in row.items() if k in keep} for row in rows]

        return QueryResult(data=rows, count=count)

    def single(self) -> dict[str, Any]:
        """Exactly one row.

        Raises:
            RecordNotFoundError: If zero or several rows matched
        """
        rows = self.execute().data
        if len(rows) != 1:
            raise RecordNotFoundError(self.table, len(rows))
        return rows[0]

    def maybe_single(self) -> dict[str, Any] | None:
        """One row or None; several rows is an error."""
        rows = self.execute().data
        if len(rows) > 1:
            raise RecordNotFoundError(self.table, len(rows))
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_column(self, name: str) -> None:
        if name not in self._columns_meta:
            raise QueryError(f"Unknown column '{name}' in '{self.table}'")

    def _where(self) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []
        for column, op, value in self._filters:
            if op == "is_null":
                clauses.append(f"{column} IS NULL")
            elif op == "in":
                if not value:
                    clauses.append("0")
                    continue
                placeholders = ", ".join("?" for _ in value)
                clauses.append(f"{column} IN ({placeholders})")
                params.extend(self._encode(column, v) for v in value)
            else:
                clauses.append(f"{column} {_OPERATORS[op]} ?")
                params.append(self._encode(column, value))
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    def _order_sql(self) -> str:
        if not self._order:
            return " ORDER BY rowid"
        parts = [f"{col} {'ASC' if asc else 'DESC'}" for col, asc in self._order]
        # rowid keeps ties in insertion order
        parts.append("rowid " + ("ASC" if self._order[-1][1] else "DESC"))
        return " ORDER BY " + ", ".join(parts)

    def _encode(self, column: str, value: Any) -> Any:
        meta = self._columns_meta[column]
        if value is None:
            return None
        if meta.is_json:
            return json.dumps(value)
        if meta.is_bool:
            return int(bool(value))
        return value

    def _decode_row(self, row: sqlite3.Row) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key in row.keys():
            value = row[key]
            meta = self._columns_meta.get(key)
            if meta is not None and value is not None:
                if meta.is_json:
                    value = json.loads(value)
                elif meta.is_bool:
                    value = bool(value)
            result[key] = value
        return result

    def _fetch_by_ids(self, conn: sqlite3.Connection, ids: list[str]) -> list[dict[str, Any]]:
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        rows = conn.execute(
            f"SELECT * FROM {self.table} WHERE id IN ({placeholders})", ids
        ).fetchall()
        by_id = {row["id"]: self._decode_row(row) for row in rows}
        return [by_id[i] for i in ids if i in by_id]

    def _matching_ids(self, conn: sqlite3.Connection) -> list[str]:
        where, params = self._where()
        rows = conn.execute(
            f"SELECT id FROM {self.table}{where}{self._order_sql()}", params
        ).fetchall()
        return [row["id"] for row in rows]

    def _run_select(self) -> tuple[list[dict[str, Any]], int | None]:
        where, params = self._where()
        sql = f"SELECT * FROM {self.table}{where}{self._order_sql()}"
        page_params = list(params)
        if self._limit is not None or self._offset:
            sql += " LIMIT ? OFFSET ?"
            page_params += [self._limit if self._limit is not None else -1, self._offset]

        with self._client.connect() as conn:
            rows = [self._decode_row(r) for r in conn.execute(sql, page_params).fetchall()]
            count = None
            if self._count:
                count = conn.execute(
                    f"SELECT COUNT(*) FROM {self.table}{where}", params
                ).fetchone()[0]
        return rows, count

    def _prepare_insert(self, row: dict[str, Any]) -> dict[str, Any]:
        prepared = dict(row)
        for name in prepared:
            self._check_column(name)
        now = utc_now()
        if "id" in self._columns_meta and not prepared.get("id"):
            prepared["id"] = new_id()
        for stamp in ("created_at", "updated_at"):
            if stamp in self._columns_meta and not prepared.get(stamp):
                prepared[stamp] = now
        return prepared

    def _run_insert(self) -> list[dict[str, Any]]:
        if not self._payload:
            return []
        prepared = [self._prepare_insert(row) for row in self._payload]
        with self._client.connect() as conn:
            for row in prepared:
                columns = list(row)
                placeholders = ", ".join("?" for _ in columns)
                conn.execute(
                    f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({placeholders})",
                    [self._encode(c, row[c]) for c in columns],
                )
            inserted = self._fetch_by_ids(conn, [row["id"] for row in prepared])

        logger.debug("data.inserted", table=self.table, rows=len(inserted))
        return inserted

    def _run_update(self) -> list[dict[str, Any]]:
        if not self._filters:
            raise QueryError(f"Refusing unfiltered update on '{self.table}'")
        values = self._payload or {}
        for name in values:
            self._check_column(name)
        if "id" in values:
            raise QueryError("Record identifiers cannot be changed")

        with self._client.connect() as conn:
            ids = self._matching_ids(conn)
            if ids and values:
                assignments = ", ".join(f"{name} = ?" for name in values)
                placeholders = ", ".join("?" for _ in ids)
                conn.execute(
                    f"UPDATE {self.table} SET {assignments} WHERE id IN ({placeholders})",
                    [self._encode(n, v) for n, v in values.items()] + ids,
                )
            updated = self._fetch_by_ids(conn, ids)

        logger.debug("data.updated", table=self.table, rows=len(updated))
        return updated

    def _run_delete(self) -> list[dict[str, Any]]:
        if not self._filters:
            raise QueryError(f"Refusing unfiltered delete on '{self.table}'")

        with self._client.connect() as conn:
            ids = self._matching_ids(conn)
            deleted = self._fetch_by_ids(conn, ids)
            if ids:
                placeholders = ", ".join("?" for _ in ids)
                conn.execute(f"DELETE FROM {self.table} WHERE id IN ({placeholders})", ids)

        logger.debug("data.deleted", table=self.table, rows=len(deleted))
        return deleted

    def _attach_profiles(self, rows: list[dict[str, Any]], embed: _Embed) -> None:
        user_ids = sorted({row[embed.fk] for row in rows if row.get(embed.fk)})
        profiles: dict[str, dict[str, Any]] = {}
        if user_ids:
            users = self._client.table("users").select().in_("id", user_ids).execute().data
            profiles = {u["id"]: {f: u.get(f) for f in embed.fields} for u in users}
        for row in rows:
            row[embed.key] = profiles.get(row.get(embed.fk))


class DataClient:
    """The single shared client for record collections and buckets."""

    def __init__(self, db_path: Path, storage: StorageClient):
        self.db_path = Path(db_path)
        self.storage = storage
        self._columns: dict[str, dict[str, Column]] = {}

    def init_schema(self) -> None:
        init_db(self.db_path)
        self._columns.clear()

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Database connection with sqlite errors translated to QueryError."""
        try:
            with get_db(self.db_path) as conn:
                yield conn
        except sqlite3.IntegrityError as e:
            raise QueryError(f"Constraint violation: {e}") from e
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def columns(self, table: str) -> dict[str, Column]:
        """Column metadata for a collection.

        Raises:
            QueryError: If the collection doesn't exist
        """
        if table not in self._columns:
            with self.connect() as conn:
                if table not in list_tables(conn):
                    raise QueryError(f"Unknown collection '{table}'")
                info = conn.execute(f"PRAGMA table_info({table})").fetchall()
            self._columns[table] = {
                row["name"]: Column(name=row["name"], decl_type=(row["type"] or "").upper())
                for row in info
            }
        return self._columns[table]

    def table(self, name: str) -> Query:
        return Query(self, name)


# =============================================================================
# SHARED INSTANCE
# =============================================================================

_client: DataClient | None = None


def configure_client(
    db_path: Path,
    storage_root: Path,
    public_url: str = "http://localhost:8000",
    buckets: list[str] | None = None,
) -> DataClient:
    """Build the shared client, create the schema and install it."""
    global _client
    client = DataClient(db_path, StorageClient(storage_root, public_url, buckets))
    client.init_schema()
    _client = client
    return client


def get_client() -> DataClient:
    """Get the shared data client, building it from app config on first use."""
    if _client is None:
        config = load_app_config()
        return configure_client(
            db_path=Path(config.database.path),
            storage_root=Path(config.storage.root),
            public_url=config.storage.public_url,
            buckets=config.storage.buckets,
        )
    return _client


def reset_client() -> None:
    """Forget the shared client (for testing)."""
    global _client
    _client = None


# =============================================================================
# HELPERS
# =============================================================================


def log_user_activity(
    client: DataClient,
    user_id: str,
    activity_type: str,
    activity_data: dict[str, Any] | None = None,
) -> None:
    """Record a user_activity row. Failures are logged, never raised."""
    try:
        client.table("user_activity").insert(
            {
                "user_id": user_id,
                "activity_type": activity_type,
                "activity_data": activity_data,
            }
        ).execute()
    except DataClientError as e:
        logger.error("activity.log_failed", activity_type=activity_type, error=str(e))


def upload_file(client: DataClient, data: bytes, bucket: str, path: str) -> tuple[str, str]:
    """Upload bytes and return (path, public_url).

    Raises:
        StorageError: After logging, if the upload fails
    """
    try:
        target = client.storage.from_(bucket)
        stored = target.upload(path, data)
        return stored, target.get_public_url(stored)
    except StorageError as e:
        logger.error("storage.upload_failed", bucket=bucket, path=path, error=str(e))
        raise


def delete_file(client: DataClient, bucket: str, path: str) -> None:
    """Remove one object.

    Raises:
        StorageError: After logging, if the path is invalid
    """
    try:
        client.storage.from_(bucket).remove([path])
    except StorageError as e:
        logger.error("storage.delete_failed", bucket=bucket, path=path, error=str(e))
        raise


@dataclass
class ConnectionReport:
    """Outcome of a connection check."""

    ok: bool
    db_path: str
    tables: list[str] = field(default_factory=list)
    user_count: int = 0
    error: str | None = None


def check_connection(client: DataClient) -> ConnectionReport:
    """Verify the record store answers and report what it holds."""
    try:
        with client.connect() as conn:
            tables = list_tables(conn)
        result = client.table("users").select("id", count=True).limit(0).execute()
    except DataClientError as e:
        logger.error("connection.check_failed", error=str(e))
        return ConnectionReport(ok=False, db_path=str(client.db_path), error=str(e))

    logger.info("connection.checked", tables=len(tables), users=result.count)
    return ConnectionReport(
        ok=True,
        db_path=str(client.db_path),
        tables=tables,
        user_count=result.count or 0,
    )
