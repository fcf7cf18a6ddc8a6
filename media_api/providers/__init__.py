"""Extraction methods, one module per third-party provider.

Each platform has a fixed chain, tried in order by MediaClient:

- TikTok: snaptik -> ssstik -> tikwm -> direct page
- Twitter/X: vxtwitter -> cobalt instances
"""

from .base import BaseProvider
from .cobalt import CobaltProvider
from .snaptik import SnaptikProvider
from .ssstik import SsstikProvider
from .tikwm import TikwmProvider
from .tiktok_page import TikTokPageProvider
from .vxtwitter import VxTwitterProvider


def tiktok_chain() -> list[BaseProvider]:
    """Build the TikTok chain with configured defaults."""
    return [
        SnaptikProvider(),
        SsstikProvider(),
        TikwmProvider(),
        TikTokPageProvider(),
    ]


def twitter_chain() -> list[BaseProvider]:
    """Build the Twitter/X chain with configured defaults."""
    return [
        VxTwitterProvider(),
        CobaltProvider(),
    ]


__all__ = [
    "BaseProvider",
    "SnaptikProvider",
    "SsstikProvider",
    "TikwmProvider",
    "TikTokPageProvider",
    "VxTwitterProvider",
    "CobaltProvider",
    "tiktok_chain",
    "twitter_chain",
]
