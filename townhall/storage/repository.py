"""Repositories for minutes, schedule items and workflows.

Two backends share one contract: an in-memory store seeded with sample
data (the default) and Supabase tables.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from functools import lru_cache
from typing import Any, Generic, Protocol, TypeVar, cast

from supabase import Client, create_client

from townhall.config import settings
from townhall.minutes.models import MeetingMinute
from townhall.schedule.models import ScheduleItem
from townhall.storage import rows, seed
from townhall.workflows.models import Workflow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Protocol[T]):
    """Persistence contract for a single entity type."""

    def save(self, entity: T) -> T: ...

    def get(self, entity_id: str) -> T | None: ...

    def list(self) -> list[T]: ...

    def delete(self, entity_id: str) -> bool: ...


class InMemoryRepository(Generic[T]):
    """Dict-backed repository keyed by the entity's ``id`` attribute.

    ``order_key``/``newest_first`` control :meth:`list` ordering; ties keep
    insertion order (reversed when ``newest_first``).
    """

    def __init__(
        self,
        initial: Iterable[T] = (),
        order_key: Callable[[T], Any] | None = None,
        newest_first: bool = False,
    ) -> None:
        self._items: dict[str, T] = {}
        self._order_key = order_key
        self._newest_first = newest_first
        for entity in initial:
            self.save(entity)

    def save(self, entity: T) -> T:
        entity_id = cast(str, entity.id)  # type: ignore[attr-defined]
        self._items[entity_id] = entity
        return entity

    def get(self, entity_id: str) -> T | None:
        return self._items.get(entity_id)

    def list(self) -> list[T]:
        items = list(self._items.values())
        if self._newest_first:
            items.reverse()
        if self._order_key is not None:
            items = sorted(items, key=self._order_key, reverse=self._newest_first)
        return items

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None


class SupabaseRepository(Generic[T]):
    """Repository over a Supabase table with an ``id`` primary key."""

    def __init__(
        self,
        client: Client,
        table: str,
        to_row: Callable[[T], dict[str, Any]],
        from_row: Callable[[dict[str, Any]], T],
        order_column: str,
        newest_first: bool = False,
    ) -> None:
        self.client = client
        self.table = table
        self.to_row = to_row
        self.from_row = from_row
        self.order_column = order_column
        self.newest_first = newest_first

    def save(self, entity: T) -> T:
        self.client.table(self.table).upsert(self.to_row(entity)).execute()
        return entity

    def get(self, entity_id: str) -> T | None:
        result = self.client.table(self.table).select("*").eq("id", entity_id).execute()
        # Supabase .data is typed as JSON (broad union); cast to concrete type.
        data = cast(list[dict[str, Any]], result.data)
        return self.from_row(data[0]) if data else None

    def list(self) -> list[T]:
        result = (
            self.client.table(self.table)
            .select("*")
            .order(self.order_column, desc=self.newest_first)
            .execute()
        )
        return [self.from_row(r) for r in cast(list[dict[str, Any]], result.data)]

    def delete(self, entity_id: str) -> bool:
        result = self.client.table(self.table).delete().eq("id", entity_id).execute()
        return bool(result.data)


def get_supabase_client() -> Client:
    """Create and return a Supabase client from settings."""
    return create_client(settings.supabase_url, settings.supabase_key)


def _use_supabase() -> bool:
    backend = settings.storage_backend
    if backend not in ("memory", "supabase"):
        msg = f"Unknown storage backend: {backend!r}. Supported: ['memory', 'supabase']"
        raise ValueError(msg)
    return backend == "supabase"


@lru_cache(maxsize=1)
def get_minutes_repository() -> Repository[MeetingMinute]:
    """Minutes repository; lists newest first."""
    if _use_supabase():
        return SupabaseRepository(
            get_supabase_client(),
            "minutes",
            rows.minute_to_row,
            rows.minute_from_row,
            order_column="date",
            newest_first=True,
        )
    logger.info("Using in-memory minutes repository")
    return InMemoryRepository(seed.seed_minutes(), order_key=lambda m: m.date, newest_first=True)


@lru_cache(maxsize=1)
def get_schedule_repository() -> Repository[ScheduleItem]:
    """Schedule repository; lists in date order."""
    if _use_supabase():
        return SupabaseRepository(
            get_supabase_client(),
            "schedule_items",
            rows.schedule_to_row,
            rows.schedule_from_row,
            order_column="date",
        )
    logger.info("Using in-memory schedule repository")
    return InMemoryRepository(seed.seed_schedule(), order_key=lambda i: i.date)


@lru_cache(maxsize=1)
def get_workflow_repository() -> Repository[Workflow]:
    """Workflow repository; lists in creation order."""
    if _use_supabase():
        return SupabaseRepository(
            get_supabase_client(),
            "workflows",
            rows.workflow_to_row,
            rows.workflow_from_row,
            order_column="created_at",
        )
    logger.info("Using in-memory workflow repository")
    return InMemoryRepository(seed.seed_workflows())


def reset_repositories() -> None:
    """Drop cached repositories so the next call rebuilds them (fresh seed data)."""
    get_minutes_repository.cache_clear()
    get_schedule_repository.cache_clear()
    get_workflow_repository.cache_clear()
