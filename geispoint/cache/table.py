"""Relational table cache backend (PostgreSQL).

One row per cache key in a table with columns ``(key, value, updated_at)``.
The table is created on first use when it does not exist yet. ``exists`` and
``get`` are primary-key lookups, ``set`` is an upsert refreshing
``updated_at``. Values are stored as JSON text.

The connection is opened lazily with ``psycopg`` in autocommit mode, so every
statement is atomic on its own. Tests inject a ``connection_factory``
returning any object with a psycopg compatible ``execute()``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Mapping, Optional

from ..errors import CacheBackendError, CacheMissError, ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "geispoint_cache"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")

_CREATE_SQL = (
    "CREATE TABLE IF NOT EXISTS {table} ("
    "key VARCHAR(255) PRIMARY KEY, "
    "value TEXT NOT NULL, "
    "updated_at TIMESTAMPTZ NOT NULL DEFAULT now())"
)
_EXISTS_SQL = "SELECT 1 FROM {table} WHERE key = %s"
_GET_SQL = "SELECT value FROM {table} WHERE key = %s"
_UPSERT_SQL = (
    "INSERT INTO {table} (key, value, updated_at) VALUES (%s, %s, now()) "
    "ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = now()"
)


class TableCacheBackend:
    """Cache stored row-per-key in a PostgreSQL table.

    Parameters
    ----------
    dsn: str
        libpq connection string or URI.
    user, password: Optional[str]
        Credentials merged into the connection string when given.
    table: str
        Table name; must be a plain SQL identifier.
    connection_factory: Optional[Callable[[], Any]]
        Zero-argument callable returning an open connection. Defaults to
        ``psycopg.connect`` with the given credentials.
    """

    def __init__(
        self,
        dsn: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        table: str = DEFAULT_TABLE,
        *,
        connection_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        if not _IDENTIFIER_RE.match(table):
            raise ConfigurationError(f"Invalid cache table name `{table}`")
        self._dsn = dsn
        self._user = user
        self._password = password
        self._table = table
        self._connection_factory = connection_factory or self._connect
        self._conn: Any = None
        self._table_ready = False

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "TableCacheBackend":
        dsn = options.get("dsn")
        if not dsn or not isinstance(dsn, str):
            raise ConfigurationError("Table cache requires a `dsn` option")
        return cls(
            dsn,
            user=options.get("user"),
            password=options.get("password"),
            table=options.get("table") or DEFAULT_TABLE,
        )

    @property
    def table(self) -> str:
        return self._table

    def _connect(self) -> Any:
        # Imported lazily so the registry loads without a database driver
        import psycopg

        kwargs = {"autocommit": True}
        if self._user is not None:
            kwargs["user"] = self._user
        if self._password is not None:
            kwargs["password"] = self._password
        return psycopg.connect(self._dsn, **kwargs)

    def _execute(self, template: str, params: tuple = ()) -> Any:
        """Run one statement, opening the connection and table as needed."""
        try:
            if self._conn is None:
                self._conn = self._connection_factory()
                logger.info(
                    "geispoint.cache.table.connected", extra={"table": self._table}
                )
            if not self._table_ready:
                self._conn.execute(_CREATE_SQL.format(table=self._table))
                self._table_ready = True
            return self._conn.execute(template.format(table=self._table), params)
        except Exception as exc:
            logger.error(
                "geispoint.cache.table.error",
                extra={"table": self._table, "error": str(exc)},
            )
            raise CacheBackendError(f"Cache table `{self._table}` failed: {exc}") from exc

    def exists(self, key: str) -> bool:
        return self._execute(_EXISTS_SQL, (key,)).fetchone() is not None

    def get(self, key: str) -> Any:
        row = self._execute(_GET_SQL, (key,)).fetchone()
        if row is None:
            raise CacheMissError(f"No cached value for key `{key}`")
        try:
            return json.loads(row[0])
        except ValueError as exc:
            raise CacheBackendError(f"Cached value for `{key}` is corrupt") from exc

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise CacheBackendError(f"Value for `{key}` is not serializable") from exc
        self._execute(_UPSERT_SQL, (key, payload))

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._table_ready = False
