"""Cobalt conversion service method, tried across several public instances."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from data.config import api_config
from ..exceptions import MediaError, MediaExtractionError
from ..headers import USER_AGENT
from ..models import ImageItem, MediaDescriptor
from ..platforms import parse_identifier
from .base import BaseProvider, list_field, str_field

logger = logging.getLogger(__name__)

STATUS_TUNNEL = "tunnel"
STATUS_REDIRECT = "redirect"
STATUS_PICKER = "picker"
STATUS_ERROR = "error"

VIDEO_TYPES = ("video", "gif")
PHOTO_TYPE = "photo"

_extension_regex = re.compile(r"\.[^.]+$")


def title_from_filename(filename: str, default: str) -> str:
    """Drop the extension from a filename hint, or use default when empty."""
    title = _extension_regex.sub("", filename) if filename else ""
    return title or default


@dataclass(frozen=True)
class PickerItem:
    type: str
    url: str
    thumb: str

    @classmethod
    def from_payload(cls, item: Any) -> Optional["PickerItem"]:
        if not isinstance(item, dict):
            return None
        item_url = str_field(item, "url")
        if not item_url:
            return None
        return cls(
            type=str_field(item, "type").lower(),
            url=item_url,
            thumb=str_field(item, "thumb"),
        )


@dataclass(frozen=True)
class CobaltPayload:
    """A cobalt answer, discriminated by its status field.

    tunnel/redirect carry url and filename, picker carries items, error
    carries error_code.
    """

    status: str
    url: str = ""
    filename: str = ""
    items: tuple = field(default_factory=tuple)
    error_code: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CobaltPayload":
        status = str_field(payload, "status").lower()
        if status == STATUS_ERROR:
            error = payload.get("error")
            if isinstance(error, dict):
                code = str_field(error, "code") or str(error)
            else:
                code = str(error) if error else "unknown"
            return cls(status=status, error_code=code)
        if status == STATUS_PICKER:
            items = tuple(
                item
                for item in map(PickerItem.from_payload, list_field(payload, "picker"))
                if item is not None
            )
            return cls(status=status, filename=str_field(payload, "filename"), items=items)
        return cls(
            status=status,
            url=str_field(payload, "url"),
            filename=str_field(payload, "filename"),
        )


class CobaltProvider(BaseProvider):
    """Post the link to each configured cobalt instance in turn.

    An error from one instance only moves on to the next instance. The
    method fails once every instance has failed or had nothing usable.

    Args:
        instances: Ordered instance URLs, defaults to the configured list
        timeout: Per-instance timeout in seconds
        quality: Requested video quality hint
    """

    name = "cobalt"
    timeout_key = "twitter_timeout"

    def __init__(
        self,
        instances: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
        quality: str = "max",
    ):
        super().__init__(timeout=timeout)
        if instances is None:
            instances = api_config["cobalt_instances"]
        self.instances = tuple(instances)
        self.quality = quality

    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        errors: list[str] = []
        for instance in self.instances:
            try:
                result = await self.attempt_instance(instance, url)
            except MediaError as e:
                logger.debug(f"cobalt instance {instance} failed: {e}")
                errors.append(f"{instance}: {e}")
                continue
            if result is not None:
                logger.debug(f"cobalt instance {instance} resolved {url}")
                return result
            errors.append(f"{instance}: no usable result")

        logger.warning(f"All cobalt instances failed for {url}: {errors}")
        raise MediaExtractionError(
            f"All {len(self.instances)} cobalt instances failed: " + "; ".join(errors)
        )

    async def attempt_instance(self, instance: str, url: str) -> Optional[MediaDescriptor]:
        """Resolve url through a single instance."""
        headers = {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        async with self._session() as session:
            payload = await self._request_json(
                session,
                "POST",
                instance,
                json={"url": url, "videoQuality": self.quality, "filenameStyle": "basic"},
                headers=headers,
            )

        data = CobaltPayload.from_payload(payload)
        content_id = parse_identifier(url) or ""

        if data.status == STATUS_ERROR:
            raise MediaExtractionError(f"Cobalt error: {data.error_code}")

        if data.status in (STATUS_TUNNEL, STATUS_REDIRECT):
            if not data.url:
                return None
            return MediaDescriptor(
                id=content_id,
                source_url=url,
                title=title_from_filename(data.filename, "Social Media Video"),
                primary_media_url=data.url,
            )

        if data.status == STATUS_PICKER:
            video = next((item for item in data.items if item.type in VIDEO_TYPES), None)
            photos = [item for item in data.items if item.type == PHOTO_TYPE]
            if video is None and not photos:
                return None
            images = [
                ImageItem(id=f"img_{index}", full_url=photo.url, thumbnail_url=photo.thumb)
                for index, photo in enumerate(photos)
            ]
            return MediaDescriptor(
                id=content_id,
                source_url=url,
                title=title_from_filename(data.filename, "Social Media Content"),
                thumbnail_url=data.items[0].thumb,
                primary_media_url=video.url if video is not None else "",
                images=images,
                is_photo_carousel=bool(images) and video is None,
            )

        logger.warning(f"cobalt instance {instance} answered unexpected status {data.status!r}")
        return None
