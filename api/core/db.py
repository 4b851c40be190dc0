"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI creates it in the lifespan
(see `api/main.py`), stores it on `app.state.database` and hands it to
repositories through the `get_database` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Driver errors never leave this module raw: unique violations become
`UniqueViolation`, everything else store-related becomes `StoreError`.
"""

from __future__ import annotations

import asyncio
import re
import ssl
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Iterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import settings

_KEY_COLUMNS = re.compile(r"Key \(([^)]*)\)=")


class StoreError(RuntimeError):
    pass


class UniqueViolation(StoreError):
    def __init__(
        self,
        message: str,
        *,
        constraint: str | None = None,
        columns: tuple[str, ...] = (),
    ) -> None:
        super().__init__(message)
        self.constraint = constraint
        self.columns = columns

    def involves(self, column: str) -> bool:
        """
        True when the conflict is on `column`, judged by the parsed key
        columns first and the constraint name second.
        """
        if column in self.columns:
            return True
        return bool(self.constraint) and column in self.constraint


def _key_columns(detail: str | None) -> tuple[str, ...]:
    # asyncpg detail looks like: Key (voter_email)=(a@b.co) already exists.
    match = _KEY_COLUMNS.search(detail or "")
    if match is None:
        return ()
    return tuple(c.strip() for c in match.group(1).split(",") if c.strip())


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        raise UniqueViolation(
            str(exc),
            constraint=getattr(exc, "constraint_name", None),
            columns=_key_columns(getattr(exc, "detail", None)),
        ) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as exc:
        raise StoreError(str(exc)) from exc


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.env_str("DATABASE_URL", "")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def ssl_context() -> ssl.SSLContext | bool:
    """
    Production databases are reached over TLS without certificate
    verification (hosted Postgres with self-signed chains).
    """
    if not settings.is_production():
        return False
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, pool: asyncpg.Pool | asyncpg.Connection | None) -> None:
        self._pool = pool

    def _source(self) -> asyncpg.Pool | asyncpg.Connection:
        if self._pool is None:
            raise StoreError("Database is not initialized.")
        return self._pool

    @classmethod
    async def connect(cls) -> "Database":
        # min_size=0: connections open lazily, startup never blocks on the store.
        pool = await asyncpg.create_pool(
            dsn=database_url(),
            ssl=ssl_context(),
            min_size=0,
            max_size=settings.env_int("DB_POOL_MAX_SIZE", 5),
            command_timeout=settings.env_float("DB_COMMAND_TIMEOUT_S", 30.0),
        )
        return cls(pool)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        with _translate_errors():
            row = await self._source().fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        with _translate_errors():
            rows = await self._source().fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
        """
        with _translate_errors():
            await self._source().execute(sql, *args)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["Database"]:
        """
        Yield a `Database` bound to one connection inside a transaction.
        Leaving the block with an exception rolls everything back.
        """
        with _translate_errors():
            async with self._source().acquire() as conn:
                async with conn.transaction():
                    yield Database(conn)


def get_database(request: Request) -> Database:
    """
    The app-wide `Database`. Before the lifespan has run it is an unbound
    one whose calls raise `StoreError`, so services answer with their own
    failure message.
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        return Database(None)
    return database
