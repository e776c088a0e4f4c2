"""Cached, revalidating read accessors over the data service.

Reads are keyed by entity kind and scope, e.g. ("venues", owner_id) or
("disabledSlots", venue_id, date). Within a key's dedupe interval the cached
value is served; identical concurrent reads share one in-flight fetch.

Results are stored when they resolve, not in the order they were issued.
A fetch that was superseded by mutate() can still overwrite a newer value
if it resolves later.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import date
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional, Tuple

from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.services.data_service import DataService, data_service

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]


@dataclass
class CachePolicy:
    """How long a key is served from cache and whether focus revalidates it."""

    dedupe_seconds: float
    revalidate_on_focus: bool = False


@dataclass
class HookResult:
    """What a read accessor hands back."""

    data: Any
    error: Optional[Exception] = None
    is_loading: bool = False
    mutate: Optional[Callable[[], None]] = None


@dataclass
class _Entry:
    data: Any
    error: Optional[Exception]
    fetched_at: float
    stale: bool = False


class DataCache:
    """In-process cache with request deduplication."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[CacheKey, _Entry] = {}
        self._inflight: Dict[CacheKey, asyncio.Task] = {}
        self._policies: Dict[CacheKey, CachePolicy] = {}

    async def read(
        self,
        key: Optional[CacheKey],
        fetcher: Callable[[], Awaitable[Any]],
        policy: CachePolicy,
    ) -> HookResult:
        """
        Read a key, fetching it if the cached value is missing, stale or old.

        A None key skips the fetch entirely.
        """
        if key is None:
            return HookResult(data=None)

        self._policies[key] = policy
        entry = self._entries.get(key)
        if entry and not entry.stale and self._clock() - entry.fetched_at < policy.dedupe_seconds:
            logger.debug(f"Cache HIT: {key}")
            return self._result(key)

        task = self._inflight.get(key)
        if task is None:
            logger.debug(f"Cache MISS: {key}")
            task = asyncio.ensure_future(self._revalidate(key, fetcher))
            self._inflight[key] = task
        else:
            logger.debug(f"Joining in-flight fetch: {key}")

        # A cancelled caller must not cancel the shared fetch
        await asyncio.shield(task)
        return self._result(key)

    def peek(self, key: Optional[CacheKey]) -> HookResult:
        """Current state of a key without fetching."""
        if key is None:
            return HookResult(data=None)
        if key not in self._entries:
            return HookResult(data=None, is_loading=key in self._inflight, mutate=partial(self.mutate, key))
        return self._result(key)

    def mutate(self, key: CacheKey):
        """Discard a key so the next read refetches it."""
        self._entries.pop(key, None)
        # Detach the running fetch; it still stores its result when it resolves
        self._inflight.pop(key, None)
        logger.debug(f"Cache MUTATE: {key}")

    def mutate_kind(self, kind: str) -> int:
        """Discard every key of one entity kind. Returns how many were dropped."""
        keys = [key for key in list(self._entries) + list(self._inflight) if key[0] == kind]
        for key in set(keys):
            self.mutate(key)
        return len(set(keys))

    def focus(self) -> List[CacheKey]:
        """Mark keys that revalidate on focus as stale. Returns the marked keys."""
        marked = []
        for key, entry in self._entries.items():
            policy = self._policies.get(key)
            if policy and policy.revalidate_on_focus:
                entry.stale = True
                marked.append(key)
        return marked

    def clear(self):
        self._entries.clear()
        self._inflight.clear()
        self._policies.clear()

    async def _revalidate(self, key: CacheKey, fetcher: Callable[[], Awaitable[Any]]):
        current = asyncio.current_task()
        try:
            data = await fetcher()
            self._entries[key] = _Entry(data=data, error=None, fetched_at=self._clock())
        except Exception as e:
            logger.error(f"Fetch failed for {key}: {e}", exc_info=True)
            previous = self._entries.get(key)
            self._entries[key] = _Entry(
                data=previous.data if previous else None,
                error=e,
                fetched_at=self._clock(),
            )
        finally:
            if self._inflight.get(key) is current:
                del self._inflight[key]

    def _result(self, key: CacheKey) -> HookResult:
        entry = self._entries.get(key)
        return HookResult(
            data=entry.data if entry else None,
            error=entry.error if entry else None,
            is_loading=False,
            mutate=partial(self.mutate, key),
        )


class DataHooks:
    """Read accessors for venues, bookings and disabled slots."""

    def __init__(
        self,
        cache: Optional[DataCache] = None,
        service: DataService = data_service,
        session_factory=AsyncSessionLocal,
    ):
        self.cache = cache or DataCache()
        self.service = service
        self.session_factory = session_factory

        self.venue_policy = CachePolicy(dedupe_seconds=settings.VENUES_DEDUPE_SECONDS)
        self.booking_policy = CachePolicy(
            dedupe_seconds=settings.BOOKINGS_DEDUPE_SECONDS, revalidate_on_focus=True
        )
        self.disabled_slot_policy = CachePolicy(dedupe_seconds=settings.DISABLED_SLOTS_DEDUPE_SECONDS)

    async def _with_session(self, method, *args):
        async with self.session_factory() as db:
            return await method(db, *args)

    @staticmethod
    def _or_empty(result: HookResult) -> HookResult:
        if result.data is None:
            result.data = []
        return result

    async def venues(self) -> HookResult:
        """All active venues."""
        result = await self.cache.read(
            ("venues",),
            partial(self._with_session, self.service.get_venues),
            self.venue_policy,
        )
        return self._or_empty(result)

    async def owner_venues(self, owner_id: Optional[str]) -> HookResult:
        """An owner's venues; no fetch without an owner id."""
        result = await self.cache.read(
            ("venues", owner_id) if owner_id else None,
            partial(self._with_session, self.service.get_owner_venues, owner_id),
            self.venue_policy,
        )
        return self._or_empty(result)

    async def bookings(self) -> HookResult:
        """Every booking visible to the service."""
        result = await self.cache.read(
            ("bookings",),
            partial(self._with_session, self.service.get_bookings),
            self.booking_policy,
        )
        return self._or_empty(result)

    async def owner_bookings(self, owner_id: Optional[str]) -> HookResult:
        """Bookings at an owner's venues."""
        result = await self.cache.read(
            ("bookings", owner_id) if owner_id else None,
            partial(self._with_session, self.service.get_bookings, owner_id),
            self.booking_policy,
        )
        return self._or_empty(result)

    async def player_bookings(self, user_id: Optional[str]) -> HookResult:
        """A player's bookings, derived from the shared bookings read."""
        result = await self.bookings()
        data = [b for b in result.data if b.player_id == user_id] if user_id else []
        return HookResult(data=data, error=result.error, is_loading=result.is_loading, mutate=result.mutate)

    async def disabled_slots(self, venue_id: Optional[str], target_date: Optional[date]) -> HookResult:
        """Blocked slots of a venue on one day."""
        key = ("disabledSlots", venue_id, target_date) if venue_id and target_date else None
        result = await self.cache.read(
            key,
            partial(self._with_session, self.service.get_disabled_slots, venue_id, target_date),
            self.disabled_slot_policy,
        )
        return self._or_empty(result)

    def invalidate_venues(self):
        self.cache.mutate_kind("venues")

    def invalidate_bookings(self):
        self.cache.mutate_kind("bookings")

    def invalidate_disabled_slots(self, venue_id: str, target_date: date):
        self.cache.mutate(("disabledSlots", venue_id, target_date))


# Singleton instance
data_hooks = DataHooks()
