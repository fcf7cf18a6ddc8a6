"""Data models for resolved social media content."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .exceptions import MediaExtractionError

logger = logging.getLogger(__name__)

ATTEMPT_SUCCESS = "success"
ATTEMPT_MISS = "miss"
ATTEMPT_FAILED = "failed"


def synthetic_id(source_url: str) -> str:
    """Build a stable fallback id for content whose id is unknown."""
    digest = hashlib.sha1(source_url.encode("utf-8")).hexdigest()
    return f"media_{digest[:12]}"


@dataclass(frozen=True)
class ImageItem:
    """A single still image of a photo carousel.

    Attributes:
        id: Identifier unique within its descriptor
        full_url: Direct URL of the full-size image
        thumbnail_url: Preview URL, same as full_url when none is distinct
    """

    id: str
    full_url: str
    thumbnail_url: str = ""

    def __post_init__(self) -> None:
        if not self.thumbnail_url:
            object.__setattr__(self, "thumbnail_url", self.full_url)


@dataclass(frozen=True)
class MediaDescriptor:
    """Normalized result of resolving a social media post.

    A descriptor always carries a primary stream, a set of images, or both.
    Constructing one with neither raises MediaExtractionError.

    Attributes:
        id: Content identifier (provider supplied or derived from the URL)
        source_url: Original post URL supplied by the caller
        title: Human-readable title or caption
        author: Creator display name
        description: Free text, may be empty
        thumbnail_url: Cover image URL, may be empty
        duration: Duration in seconds, 0 when unknown
        primary_media_url: Direct URL of the video/audio stream, empty for
            image-only carousels
        music_url: Dedicated audio-only stream URL when the provider has one
        images: Carousel images in provider order
        is_photo_carousel: True when the post is presented as a photo set
    """

    id: str
    source_url: str
    title: str
    author: str = "Unknown"
    description: str = ""
    thumbnail_url: str = ""
    duration: int = 0
    primary_media_url: str = ""
    music_url: Optional[str] = None
    images: Tuple[ImageItem, ...] = field(default_factory=tuple)
    is_photo_carousel: bool = False

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "images", tuple(self.images))
        if not self.id:
            object.__setattr__(self, "id", synthetic_id(self.source_url))
        if not self.author:
            object.__setattr__(self, "author", "Unknown")
        if self.is_photo_carousel and not self.images:
            raise MediaExtractionError("Photo carousel without images")
        if not self.primary_media_url and not self.images:
            raise MediaExtractionError(
                f"No media reference resolved for {self.source_url}"
            )

    @property
    def has_video(self) -> bool:
        """Check if a primary stream was resolved."""
        return bool(self.primary_media_url)

    @property
    def audio_url(self) -> str:
        """URL to extract audio from: the dedicated stream, else the primary one."""
        return self.music_url or self.primary_media_url


@dataclass(frozen=True)
class AttemptOutcome:
    """Record of one method invocation made while resolving a URL.

    Attributes:
        provider: Name of the method that was tried
        status: "success", "miss" (reachable but nothing usable) or "failed"
        detail: Error text for failures, empty otherwise
    """

    provider: str
    status: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.provider}: {self.status} ({self.detail})"
        return f"{self.provider}: {self.status}"
