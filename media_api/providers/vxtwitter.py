"""vxtwitter open mirror API method."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from ..exceptions import MediaExtractionError, MediaInvalidLinkError
from ..headers import USER_AGENT
from ..models import ImageItem, MediaDescriptor
from .base import BaseProvider, list_field, str_field

logger = logging.getLogger(__name__)

_status_regex = re.compile(r"(?:twitter|x)\.com/([^/?#]+)/status/(\d+)")

VIDEO_TYPES = ("video", "gif")
IMAGE_TYPE = "image"
TITLE_LIMIT = 80


def parse_status_url(url: str) -> tuple[str, str]:
    """Split a status link into (username, status id).

    Raises:
        MediaInvalidLinkError: The link is not a /<user>/status/<id> link
    """
    match = _status_regex.search(url)
    if not match:
        raise MediaInvalidLinkError(f"Could not parse Twitter URL: {url}")
    return match.group(1), match.group(2)


@dataclass(frozen=True)
class TweetMedia:
    type: str
    url: str
    thumbnail_url: str

    @classmethod
    def from_payload(cls, item: Any) -> Optional["TweetMedia"]:
        if not isinstance(item, dict):
            return None
        media_url = str_field(item, "url")
        if not media_url:
            return None
        return cls(
            type=str_field(item, "type").lower(),
            url=media_url,
            thumbnail_url=str_field(item, "thumbnail_url"),
        )


class VxTwitterProvider(BaseProvider):
    """Look the status up on the vxtwitter API by username and status id."""

    name = "vxtwitter"
    config_key = "vxtwitter_url"
    timeout_key = "twitter_timeout"

    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        username, status_id = parse_status_url(url)

        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        async with self._session() as session:
            payload = await self._request_json(
                session,
                "GET",
                f"{self.base_url}/{username}/status/{status_id}",
                headers=headers,
            )

        raw_media = list_field(payload, "media_extended") or list_field(payload, "media")
        media = [m for m in map(TweetMedia.from_payload, raw_media) if m is not None]
        video = next((m for m in media if m.type in VIDEO_TYPES), None)
        photos = [m for m in media if m.type == IMAGE_TYPE]

        if video is None and not photos:
            raise MediaExtractionError(f"No downloadable media found in tweet {status_id}")

        images = [
            ImageItem(id=f"tw_img_{index}", full_url=photo.url, thumbnail_url=photo.thumbnail_url)
            for index, photo in enumerate(photos)
        ]
        text = str_field(payload, "text")
        title = " ".join(text[:TITLE_LIMIT].split()) if text else f"Tweet by @{username}"

        thumbnail = video.thumbnail_url if video is not None else ""
        if not thumbnail and photos:
            thumbnail = photos[0].url

        return MediaDescriptor(
            id=status_id,
            source_url=url,
            title=title,
            author=str_field(payload, "user_name") or username,
            description=text,
            thumbnail_url=thumbnail,
            primary_media_url=video.url if video is not None else "",
            images=images,
            is_photo_carousel=bool(images) and video is None,
        )
