"""Deduplicated, cached and cancellable thumbnail lookups.

A ThumbnailResolver hands out one ThumbnailSubscription per consumer. All
subscriptions for the same page title share one lookup task held in a
KeyedAsyncCache, so a title is fetched at most once for the lifetime of the
cache. Failures are cached like successes and never retried.

Unsubscribing only stops state updates on that subscription; the shared
lookup keeps running and other subscribers still see its result.
"""

import asyncio
import logging
from typing import AsyncIterator, Callable, Iterable, List, Optional

import httpx

from cache import KeyedAsyncCache
from models import ThumbnailState
from wiki_client import WikipediaClient


logger = logging.getLogger(__name__)

StateListener = Callable[[ThumbnailState], None]


class ThumbnailSubscription:
    """Handle for one consumer's view of a thumbnail lookup"""

    def __init__(
        self,
        resolver: "ThumbnailResolver",
        key: Optional[str],
        listener: Optional[StateListener] = None,
    ):
        self.resolver = resolver
        self.key = key
        self.state: Optional[ThumbnailState] = None
        self.active = True
        self._listener = listener
        self._task: Optional[asyncio.Task] = None
        self._queue: "asyncio.Queue[Optional[ThumbnailState]]" = asyncio.Queue()
        self._finished = asyncio.Event()

    def _attach(self, task: "asyncio.Task[Optional[str]]"):
        self._task = task
        # Done callbacks are scheduled on the loop, even for a settled task,
        # so the terminal state always arrives after loading.
        task.add_done_callback(self._on_settled)

    def _on_settled(self, task: "asyncio.Task[Optional[str]]"):
        if task.cancelled():
            src = None
        else:
            src = task.result()
        self._emit(ThumbnailState.loaded(src) if src else ThumbnailState.error())

    def _emit(self, state: ThumbnailState):
        if not self.active:
            return
        if self.state is not None and self.state.is_terminal:
            return
        self.state = state
        self._queue.put_nowait(state)
        if state.status == "idle" or state.is_terminal:
            self._finished.set()
        if self._listener is not None:
            self._listener(state)

    def unsubscribe(self):
        """Stop receiving state updates; the shared lookup is left running"""
        if not self.active:
            return
        self.active = False
        if self._task is not None:
            self._task.remove_done_callback(self._on_settled)
        self._queue.put_nowait(None)
        self._finished.set()

    def resubscribe(self, key: Optional[str]) -> "ThumbnailSubscription":
        """Drop this subscription and subscribe to key with the same listener"""
        self.unsubscribe()
        return self.resolver.subscribe(key, listener=self._listener)

    async def wait(self) -> ThumbnailState:
        """Wait for the terminal state; returns the current state if idle or unsubscribed"""
        await self._finished.wait()
        return self.state

    async def __aiter__(self) -> AsyncIterator[ThumbnailState]:
        while True:
            state = await self._queue.get()
            if state is None:
                return
            yield state
            if state.status == "idle" or state.is_terminal:
                return

    def __enter__(self) -> "ThumbnailSubscription":
        return self

    def __exit__(self, *exc_info):
        self.unsubscribe()


class ThumbnailResolver:
    """Resolves page titles to image URLs through a shared lookup cache"""

    def __init__(
        self,
        client: WikipediaClient,
        cache: Optional[KeyedAsyncCache] = None,
    ):
        self.client = client
        self.cache = cache if cache is not None else KeyedAsyncCache()

    async def _lookup(self, page_title: str) -> Optional[str]:
        """Run one remote lookup, folding every failure into None"""
        try:
            return await self.client.fetch_thumbnail(page_title)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Thumbnail lookup for %r failed with status %s",
                page_title,
                e.response.status_code,
            )
        except httpx.RequestError as e:
            logger.warning("Thumbnail lookup for %r failed: %s", page_title, e)
        except ValueError:
            logger.warning("Thumbnail lookup for %r returned invalid JSON", page_title)
        except Exception:
            logger.exception("Unexpected error looking up thumbnail for %r", page_title)
        return None

    def _start(self, page_title: str) -> "asyncio.Task[Optional[str]]":
        return self.cache.get_or_start(page_title, self._lookup)

    def subscribe(
        self, key: Optional[str], listener: Optional[StateListener] = None
    ) -> ThumbnailSubscription:
        """Subscribe to the thumbnail state for a page title.

        Without a key the subscription is idle and nothing is fetched.
        With a key it is loading on return, and moves to loaded or error
        once the shared lookup settles.
        """
        subscription = ThumbnailSubscription(self, key, listener)
        if not key:
            subscription._emit(ThumbnailState.idle())
            return subscription

        subscription._emit(ThumbnailState.loading())
        subscription._attach(self._start(key))
        return subscription

    def prefetch(self, keys: Iterable[str]) -> List["asyncio.Task[Optional[str]]"]:
        """Start lookups for every key not already cached"""
        return [self._start(key) for key in dict.fromkeys(k for k in keys if k)]

    async def resolve(self, key: Optional[str]) -> ThumbnailState:
        """Subscribe, wait for the terminal state and unsubscribe"""
        with self.subscribe(key) as subscription:
            return await subscription.wait()
