"""Tikwm aggregator API method."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..headers import USER_AGENT
from ..models import ImageItem, MediaDescriptor, synthetic_id
from ..platforms import parse_identifier
from .base import (
    JSON_ACCEPT,
    BaseProvider,
    absolute_url,
    dict_field,
    int_field,
    list_field,
    str_field,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TikwmPayload:
    """The "data" object of a successful tikwm answer, URLs made absolute.

    Attributes:
        stream_url: HD no-watermark, else SD no-watermark, else watermarked
        music_url: Audio-only stream
        images: Slideshow image URLs in post order
    """

    id: str
    title: str
    cover: str
    duration: int
    author: str
    stream_url: str
    music_url: str
    images: tuple = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, data: dict[str, Any], origin: str) -> "TikwmPayload":
        images = tuple(
            absolute_url(image.strip(), origin)
            for image in list_field(data, "images")
            if isinstance(image, str) and image.strip()
        )
        return cls(
            id=str_field(data, "id"),
            title=str_field(data, "title"),
            cover=absolute_url(str_field(data, "cover"), origin),
            duration=int_field(data, "duration"),
            author=str_field(dict_field(data, "author"), "nickname"),
            stream_url=absolute_url(str_field(data, "hdplay", "play", "wmplay"), origin),
            music_url=absolute_url(str_field(data, "music"), origin),
            images=images,
        )


class TikwmProvider(BaseProvider):
    """Query the tikwm API, which also handles photo slideshows.

    tikwm answers stream and image paths relative to its own origin, every
    such path is rooted at base_url before it leaves this method.
    """

    name = "tikwm"
    config_key = "tikwm_url"

    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": JSON_ACCEPT,
            "Origin": self.base_url,
            "Referer": f"{self.base_url}/",
        }
        async with self._session() as session:
            payload = await self._request_json(
                session,
                "POST",
                f"{self.base_url}/api/",
                json={"url": url, "count": 12, "cursor": 0, "web": 1, "hd": 1},
                headers=headers,
            )

        data = payload.get("data")
        if payload.get("code") != 0 or not isinstance(data, dict):
            logger.debug(
                f"tikwm answered code={payload.get('code')} "
                f"msg={payload.get('msg')!r} for {url}"
            )
            return None

        info = TikwmPayload.from_payload(data, self.base_url)
        if not info.stream_url and not info.images:
            logger.debug(f"tikwm answer for {url} has neither stream nor images")
            return None

        content_id = parse_identifier(url) or info.id or synthetic_id(url)
        images = [
            ImageItem(id=f"{content_id}_img_{index}", full_url=image, thumbnail_url=image)
            for index, image in enumerate(info.images)
        ]

        return MediaDescriptor(
            id=content_id,
            source_url=url,
            title=info.title or "TikTok Video (Tikwm)",
            author=info.author or "Unknown",
            description=info.title or "Downloaded via Tikwm",
            thumbnail_url=info.cover,
            duration=info.duration,
            primary_media_url=info.stream_url,
            music_url=info.music_url or None,
            images=images,
            is_photo_carousel=bool(images),
        )
