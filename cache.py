import asyncio
from typing import Awaitable, Callable, Dict, Generic, Iterator, Optional, TypeVar


T = TypeVar("T")


class KeyedAsyncCache(Generic[T]):
    """Process-lifetime cache of in-flight or settled lookups, keyed by string.

    Entries are asyncio tasks. They are never evicted, invalidated or
    cancelled, so every caller of a key shares the result of one lookup.
    """

    def __init__(self):
        self._entries: Dict[str, "asyncio.Task[T]"] = {}
        self.started = 0  # Number of lookups actually started

    def get(self, key: str) -> Optional["asyncio.Task[T]"]:
        """Get the cached lookup for a key, if any"""
        return self._entries.get(key)

    def get_or_start(
        self, key: str, factory: Callable[[str], Awaitable[T]]
    ) -> "asyncio.Task[T]":
        """Return the cached lookup for key, starting one if none exists.

        Check and registration happen without yielding to the event loop,
        so concurrent callers racing on a new key share a single task.
        """
        task = self._entries.get(key)
        if task is None:
            task = asyncio.ensure_future(factory(key))
            self._entries[key] = task
            self.started += 1
        return task

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
