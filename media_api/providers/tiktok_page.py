"""Direct TikTok page scraping method."""

import asyncio
import logging
import re
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout
from bs4 import BeautifulSoup

from data.config import api_config
from ..headers import headers_for_url
from ..models import MediaDescriptor
from ..platforms import parse_identifier
from .base import HTML_ACCEPT, BaseProvider

logger = logging.getLogger(__name__)

DATA_MARKER = "webapp.video-detail"
_download_addr_regex = re.compile(r'"downloadAddr":"([^"]+)"')
_play_addr_regex = re.compile(r'"playAddr":"([^"]+)"')


def is_short_link(url: str) -> bool:
    """Check for vm.tiktok.com, vt.tiktok.com and /t/ style links."""
    return "vm.tiktok.com" in url or "vt.tiktok.com" in url or "/t/" in url


def unescape_address(address: str) -> str:
    return address.replace("\\u002F", "/").replace("\\/", "/")


def extract_media_address(markup: str) -> Optional[str]:
    """Find the stream address inside the page's client-side data blob.

    Only scripts carrying the video-detail marker are considered. The
    download address is preferred over the play address.

    Returns:
        Unescaped address, or None when no script carries one.
    """
    soup = BeautifulSoup(markup, "html.parser")
    for script in soup.find_all("script"):
        content = script.string or script.get_text() or ""
        if DATA_MARKER not in content:
            continue
        match = _download_addr_regex.search(content) or _play_addr_regex.search(content)
        if match:
            return unescape_address(match.group(1))
    return None


class TikTokPageProvider(BaseProvider):
    """Fetch the TikTok post page itself and read the stream address from it.

    Args:
        resolve_timeout: Timeout in seconds for following a short link
    """

    name = "tiktok_page"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        resolve_timeout: Optional[float] = None,
    ):
        super().__init__(base_url=base_url, timeout=timeout)
        self.resolve_timeout = (
            resolve_timeout if resolve_timeout is not None else api_config["resolve_timeout"]
        )

    async def resolve_url(self, url: str) -> str:
        """Follow a short link to its canonical page URL.

        Returns the original url when it is not a short link or when
        resolution fails for any reason.
        """
        if not is_short_link(url):
            return url
        try:
            async with aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.resolve_timeout)
            ) as session:
                async with session.head(
                    url,
                    allow_redirects=True,
                    max_redirects=5,
                    headers=headers_for_url(url),
                ) as response:
                    resolved_url = str(response.url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Short link resolution failed for {url}: {e}")
            return url
        logger.debug(f"URL resolved: {url} -> {resolved_url}")
        return resolved_url or url

    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        page_url = await self.resolve_url(url)
        headers = headers_for_url(page_url, accept=HTML_ACCEPT)
        headers["Upgrade-Insecure-Requests"] = "1"

        async with self._session() as session:
            markup = await self._request_text(session, "GET", page_url, headers=headers)

        address = extract_media_address(markup)
        if not address:
            logger.debug(f"No {DATA_MARKER} stream address found on {page_url}")
            return None

        return MediaDescriptor(
            id=parse_identifier(page_url) or parse_identifier(url) or "",
            source_url=url,
            title="TikTok Video (Direct)",
            author="Unknown",
            description="Downloaded via direct scraping",
            primary_media_url=address,
        )
