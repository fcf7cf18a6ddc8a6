"""URL classification and content identifier extraction."""

import re
from enum import Enum
from typing import Any, Optional


class Platform(str, Enum):
    """Platforms a link can belong to."""

    TIKTOK = "tiktok"
    TWITTER = "twitter"
    UNSUPPORTED = "unsupported"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Platform.TIKTOK: "TikTok",
    Platform.TWITTER: "Twitter/X",
    Platform.UNSUPPORTED: "Unsupported",
}

# Checked in order, first platform with a matching pattern wins
PLATFORM_PATTERNS = (
    (
        Platform.TIKTOK,
        (
            re.compile(r"^(https?://)?(www\.)?tiktok\.com/@[\w.-]+/video/\d+"),
            re.compile(r"^(https?://)?(www\.)?tiktok\.com/@[\w.-]+/photo/\d+"),
            re.compile(r"^(https?://)?(www\.)?tiktok\.com/[\w.-]+/video/\d+"),
            re.compile(r"^(https?://)?vm\.tiktok\.com/\w+"),
            re.compile(r"^(https?://)?vt\.tiktok\.com/\w+"),
            re.compile(r"^(https?://)?m\.tiktok\.com/v/\d+"),
            re.compile(r"^(https?://)?(www\.)?tiktok\.com/t/\w+"),
        ),
    ),
    (
        Platform.TWITTER,
        (
            re.compile(r"^(https?://)?(www\.|mobile\.)?(twitter|x)\.com/\w+/status/\d+"),
            re.compile(r"^(https?://)?t\.co/\w+"),
        ),
    ),
)

# Checked in order, first capture wins
IDENTIFIER_PATTERNS = (
    re.compile(r"/video/(\d+)"),
    re.compile(r"/photo/(\d+)"),
    re.compile(r"/v/(\d+)"),
    re.compile(r"vm\.tiktok\.com/(\w+)"),
    re.compile(r"vt\.tiktok\.com/(\w+)"),
    re.compile(r"/t/(\w+)"),
    re.compile(r"/status/(\d+)"),
    re.compile(r"/p/([\w-]+)"),
    re.compile(r"/reel/([\w-]+)"),
    re.compile(r"/videos/(\d+)"),
    re.compile(r"v=(\d+)"),
)


def detect_platform(url: Any) -> Platform:
    """Classify a link into a supported platform.

    Args:
        url: Raw user input, trimmed before matching

    Returns:
        Matching Platform, or Platform.UNSUPPORTED for anything else
        (including empty and non-string input).
    """
    if not url or not isinstance(url, str):
        return Platform.UNSUPPORTED
    trimmed = url.strip()
    for platform, patterns in PLATFORM_PATTERNS:
        if any(pattern.search(trimmed) for pattern in patterns):
            return platform
    return Platform.UNSUPPORTED


def validate_url(url: Any) -> bool:
    """Check whether a link belongs to a supported platform."""
    return detect_platform(url) is not Platform.UNSUPPORTED


def parse_identifier(url: Any) -> Optional[str]:
    """Extract a content identifier from a link for labels and filenames.

    Returns:
        First captured identifier, or None when no known shape matches.
    """
    if not url or not isinstance(url, str):
        return None
    for pattern in IDENTIFIER_PATTERNS:
        match = pattern.search(url)
        if match and match.group(1):
            return match.group(1)
    return None
