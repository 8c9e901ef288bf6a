import logging
from typing import Optional, Dict, Any
from urllib.parse import quote

import httpx

import config


logger = logging.getLogger(__name__)


def encode_page_title(page_title: str) -> str:
    """Percent-encode a page title as a single URL path segment"""
    return quote(page_title, safe="!~*'()")


def extract_image_url(data: Any) -> Optional[str]:
    """Pick the thumbnail URL from a page summary, falling back to the original image"""
    if not isinstance(data, dict):
        return None

    for field in ("thumbnail", "originalimage"):
        image = data.get(field)
        if isinstance(image, dict):
            source = image.get("source")
            # An empty source still counts as present and yields no image
            if isinstance(source, str):
                return source or None
    return None


class WikipediaClient:
    """Client for the Wikipedia REST page summary API"""

    def __init__(
        self,
        base_url: str = config.WIKI_SUMMARY_BASE,
        timeout: float = config.WIKI_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
            headers={
                "accept": "application/json",
                "user-agent": config.WIKI_USER_AGENT,
            },
        )

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()

    def summary_url(self, page_title: str) -> str:
        return f"{self.base_url}{encode_page_title(page_title)}"

    async def get_page_summary(self, page_title: str) -> Dict[str, Any]:
        """Fetch the page summary; raises httpx.HTTPError on transport or status failure"""
        response = await self.client.get(self.summary_url(page_title))
        response.raise_for_status()
        return response.json()

    async def fetch_thumbnail(self, page_title: str) -> Optional[str]:
        """Get the image URL for a page, or None when the summary has no image.

        No retries: transport and status errors propagate to the caller.
        """
        data = await self.get_page_summary(page_title)
        image_url = extract_image_url(data)
        if image_url is None:
            logger.debug("No image in summary for %r", page_title)
        return image_url
