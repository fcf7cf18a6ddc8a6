"""SSSTik mirror JSON method."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..headers import USER_AGENT
from ..models import MediaDescriptor
from ..platforms import parse_identifier
from .base import JSON_ACCEPT, BaseProvider, int_field, str_field

logger = logging.getLogger(__name__)

LOCALE = "en"
TOKEN = "RFBiZ3Bi"


@dataclass(frozen=True)
class SsstikPayload:
    url: str
    title: str
    cover: str
    author: str
    duration: int

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "SsstikPayload":
        return cls(
            url=str_field(payload, "url"),
            title=str_field(payload, "title"),
            cover=str_field(payload, "cover"),
            author=str_field(payload, "author"),
            duration=int_field(payload, "duration"),
        )


class SsstikProvider(BaseProvider):
    """Submit the link to the ssstik endpoint and read its JSON answer."""

    name = "ssstik"
    config_key = "ssstik_url"

    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": JSON_ACCEPT,
            "Origin": self.base_url,
            "Referer": f"{self.base_url}/{LOCALE}",
        }
        async with self._session() as session:
            payload = await self._request_json(
                session,
                "POST",
                f"{self.base_url}/abc",
                json={"id": url, "locale": LOCALE, "tt": TOKEN},
                headers=headers,
            )

        data = SsstikPayload.from_payload(payload)
        if not data.url:
            logger.debug(f"ssstik answer for {url} has no url field")
            return None

        return MediaDescriptor(
            id=parse_identifier(url) or "",
            source_url=url,
            title=data.title or "TikTok Video (SSSTik)",
            author=data.author or "Unknown",
            description=data.title or "Downloaded via SSSTik",
            thumbnail_url=data.cover,
            duration=data.duration,
            primary_media_url=data.url,
        )
