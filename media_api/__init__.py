"""Social media link resolution.

This module turns a TikTok or Twitter/X post link into a direct,
watermark-free media URL by trying several independent third-party
extraction services in a fixed order.

Example:
    >>> from media_api import MediaClient, MediaNotFoundError
    >>>
    >>> client = MediaClient()
    >>> try:
    ...     media = await client.resolve("https://www.tiktok.com/@user/video/123")
    ...     print(media.title)
    ...     if media.is_photo_carousel:
    ...         print(f"{len(media.images)} images")
    ... except MediaNotFoundError as e:
    ...     print(e.attempts)
"""

from .client import MediaClient
from .exceptions import (
    MediaError,
    MediaExtractionError,
    MediaInvalidLinkError,
    MediaNetworkError,
    MediaNotFoundError,
    MediaUnsupportedError,
)
from .headers import USER_AGENT, headers_for_url
from .models import AttemptOutcome, ImageItem, MediaDescriptor
from .platforms import Platform, detect_platform, parse_identifier, validate_url

__all__ = [
    # Client
    "MediaClient",
    # Platforms
    "Platform",
    "detect_platform",
    "validate_url",
    "parse_identifier",
    # Headers
    "USER_AGENT",
    "headers_for_url",
    # Models
    "MediaDescriptor",
    "ImageItem",
    "AttemptOutcome",
    # Exceptions
    "MediaError",
    "MediaInvalidLinkError",
    "MediaUnsupportedError",
    "MediaNetworkError",
    "MediaExtractionError",
    "MediaNotFoundError",
]
