"""
Persistence for processed blogs.

Summaries go to Postgres, the system of record. Full article text goes to a
MongoDB archive keyed by the Postgres id. The archive write is best-effort:
its failure is logged and reported as ``archived=False`` but never fails the
request.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from loguru import logger
from psycopg import sql
from psycopg_pool import AsyncConnectionPool
from pymongo import AsyncMongoClient

from .config import Settings
from .errors import PersistenceFailed


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SummaryRecord:
    blog_url: str
    title: str
    summary: str
    summary_translated: str
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class FullTextRecord:
    blog_url: str
    title: str
    full_text: str
    summary_id: int
    created_at: datetime = field(default_factory=_utcnow)

    def to_document(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class PersistedSummary:
    summary_id: int
    archived: bool


class SummaryStore(Protocol):
    async def insert_summary(self, record: SummaryRecord) -> int:
        """Insert the summary and return the id assigned by the store."""


class FullTextArchive(Protocol):
    async def insert_full_text(self, record: FullTextRecord) -> None:
        """Archive the full article text."""


class PostgresSummaryStore:
    def __init__(self, pool: AsyncConnectionPool, table: str = "summaries") -> None:
        self._pool = pool
        self._table = table

    async def ensure_schema(self) -> None:
        query = sql.SQL(
            """
            CREATE TABLE IF NOT EXISTS {table} (
                id BIGSERIAL PRIMARY KEY,
                blog_url TEXT NOT NULL,
                title TEXT NOT NULL,
                summary TEXT NOT NULL,
                summary_translated TEXT NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT now()
            )
            """
        ).format(table=sql.Identifier(self._table))
        async with self._pool.connection() as conn:
            await conn.execute(query)

    async def insert_summary(self, record: SummaryRecord) -> int:
        query = sql.SQL(
            """
            INSERT INTO {table} (blog_url, title, summary, summary_translated, created_at)
            VALUES (%s, %s, %s, %s, %s)
            RETURNING id
            """
        ).format(table=sql.Identifier(self._table))
        # The pooled connection commits on clean exit and rolls back on error.
        async with self._pool.connection() as conn:
            async with conn.cursor() as cur:
                await cur.execute(
                    query,
                    (
                        record.blog_url,
                        record.title,
                        record.summary,
                        record.summary_translated,
                        record.created_at,
                    ),
                )
                row = await cur.fetchone()
        if row is None:
            raise RuntimeError("failed to create summary")
        return int(row[0])


class MongoFullTextArchive:
    def __init__(
        self,
        client: AsyncMongoClient,
        database: str = "blog_summarizer",
        collection: str = "full_texts",
    ) -> None:
        self._client = client
        self._collection = client[database][collection]

    async def insert_full_text(self, record: FullTextRecord) -> None:
        # The shared client pools sockets; the session scopes this one write.
        async with self._client.start_session() as session:
            await self._collection.insert_one(record.to_document(), session=session)


async def persist(
    record: SummaryRecord,
    full_text: str,
    *,
    summary_store: SummaryStore,
    archive: Optional[FullTextArchive] = None,
) -> PersistedSummary:
    """
    Store the summary, then archive the full text under the new summary id.

    Raises PersistenceFailed when the summary insert fails. Archive failures
    are logged and swallowed.
    """
    try:
        summary_id = await summary_store.insert_summary(record)
    except Exception as exc:
        logger.exception(f"Summary insert failed for {record.blog_url}")
        raise PersistenceFailed() from exc
    logger.info(f"Stored summary {summary_id} for {record.blog_url}")

    if archive is None:
        logger.warning(f"No full-text archive configured; skipped archiving {record.blog_url}")
        return PersistedSummary(summary_id=summary_id, archived=False)

    full_text_record = FullTextRecord(
        blog_url=record.blog_url,
        title=record.title,
        full_text=full_text,
        summary_id=summary_id,
    )
    try:
        await archive.insert_full_text(full_text_record)
    except Exception:
        logger.exception(f"Full-text archive write failed for summary {summary_id}")
        return PersistedSummary(summary_id=summary_id, archived=False)
    logger.info(f"Archived full text for summary {summary_id}")
    return PersistedSummary(summary_id=summary_id, archived=True)


@dataclass
class Stores:
    """Long-lived store handles shared by every request."""

    summary_store: Optional[SummaryStore] = None
    archive: Optional[FullTextArchive] = None
    _pool: Optional[AsyncConnectionPool] = None
    _mongo: Optional[AsyncMongoClient] = None

    @property
    def enabled(self) -> bool:
        return self.summary_store is not None

    async def aclose(self) -> None:
        if self._pool is not None:
            await self._pool.close()
        if self._mongo is not None:
            await self._mongo.close()


async def open_stores(settings: Settings) -> Stores:
    """
    Open the Postgres pool and Mongo client named in settings.

    Missing DATABASE_URL disables persistence entirely; missing MONGODB_URI
    disables only the archive.
    """
    stores = Stores()
    if not settings.database_url:
        logger.warning("DATABASE_URL not set; summaries will not be persisted")
        return stores

    pool = AsyncConnectionPool(settings.database_url, open=False)
    await pool.open()
    summary_store = PostgresSummaryStore(pool, table=settings.summaries_table)
    await summary_store.ensure_schema()
    stores.summary_store = summary_store
    stores._pool = pool

    if settings.mongodb_uri:
        mongo = AsyncMongoClient(settings.mongodb_uri)
        stores.archive = MongoFullTextArchive(
            mongo,
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
        )
        stores._mongo = mongo
    else:
        logger.warning("MONGODB_URI not set; full texts will not be archived")
    return stores
