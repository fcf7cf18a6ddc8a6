"""Snaptik mirror scraping method."""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from ..headers import USER_AGENT
from ..models import MediaDescriptor
from ..platforms import parse_identifier
from .base import HTML_ACCEPT, BaseProvider

logger = logging.getLogger(__name__)

MEDIA_EXTENSION = ".mp4"


def find_media_links(markup: str) -> list[str]:
    """Collect anchor hrefs that point at a direct media file, in page order.

    An anchor counts when its href or its download filename mentions .mp4.
    """
    soup = BeautifulSoup(markup, "html.parser")
    return [
        anchor["href"]
        for anchor in soup.find_all("a", href=True)
        if MEDIA_EXTENSION in anchor["href"] or MEDIA_EXTENSION in (anchor.get("download") or "")
    ]


class SnaptikProvider(BaseProvider):
    """Two-step form submission to the snaptik mirror.

    The first request picks up the mirror's session cookies, the second
    posts the TikTok link and the answer markup is scanned for .mp4 anchors.
    The first link (usually the best quality) is used. Title and author
    are not available from this method.
    """

    name = "snaptik"
    config_key = "snaptik_url"

    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        base_headers = {"User-Agent": USER_AGENT}
        async with self._session(headers=base_headers) as session:
            await self._request_text(
                session, "GET", f"{self.base_url}/", headers={"Accept": HTML_ACCEPT}
            )
            markup = await self._request_text(
                session,
                "POST",
                f"{self.base_url}/abc2.php",
                data={"url": url},
                headers={
                    "Referer": f"{self.base_url}/",
                    "Origin": self.base_url,
                },
            )

        links = find_media_links(markup)
        if not links:
            logger.debug(f"snaptik answer for {url} contained no media links")
            return None

        return MediaDescriptor(
            id=parse_identifier(url) or "",
            source_url=url,
            title="TikTok Video (Snaptik)",
            author="Unknown",
            description="Downloaded via Snaptik",
            primary_media_url=links[0],
        )
