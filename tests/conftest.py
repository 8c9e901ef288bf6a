"""
Shared fixtures: a simulated Wikipedia summary API and timeline builders.
"""

import asyncio
from typing import Dict, List, Optional
from urllib.parse import unquote

import httpx
import pytest

from cache import KeyedAsyncCache
from thumbnails import ThumbnailResolver
from wiki_client import WikipediaClient


BASE_URL = "https://wiki.test/api/rest_v1/page/summary/"


class FakeWikipedia:
    """Simulated summary endpoint that counts calls and can hold responses back"""

    def __init__(self):
        self.pages: Dict[str, dict] = {}
        self.statuses: Dict[str, int] = {}
        self.failures: set = set()
        self.calls: List[str] = []
        self.gate: Optional[asyncio.Event] = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        title = unquote(request.url.raw_path.decode("ascii").split("?")[0].rsplit("/", 1)[-1])
        self.calls.append(title)
        if self.gate is not None:
            await self.gate.wait()
        if title in self.failures:
            raise httpx.ConnectError("connection refused", request=request)
        if title in self.statuses:
            return httpx.Response(self.statuses[title], json={"title": title})
        if title not in self.pages:
            return httpx.Response(404, json={"type": "not_found"})
        return httpx.Response(200, json=self.pages[title])

    def hold(self):
        """Block responses until release() is called"""
        self.gate = asyncio.Event()

    def release(self):
        self.gate.set()


@pytest.fixture
def wiki():
    fake = FakeWikipedia()
    fake.pages["Claude Monet"] = {
        "title": "Claude Monet",
        "thumbnail": {"source": "https://upload.test/thumb/monet.jpg"},
        "originalimage": {"source": "https://upload.test/monet.jpg"},
    }
    fake.pages["Mona Lisa"] = {
        "title": "Mona Lisa",
        "originalimage": {"source": "https://upload.test/mona_lisa.jpg"},
    }
    fake.pages["Anonymous"] = {"title": "Anonymous", "extract": "No picture here."}
    return fake


@pytest.fixture
async def wiki_client(wiki):
    client = WikipediaClient(
        base_url=BASE_URL, transport=httpx.MockTransport(wiki.handler)
    )
    yield client
    await client.close()


@pytest.fixture
async def resolver(wiki, wiki_client):
    resolver = ThumbnailResolver(wiki_client, KeyedAsyncCache())
    yield resolver
    # Let lookups left in flight by a test finish before the client closes
    if wiki.gate is not None:
        wiki.release()
    await asyncio.gather(*(resolver.cache.get(key) for key in resolver.cache))

