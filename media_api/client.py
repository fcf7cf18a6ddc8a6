"""Fallback orchestration across extraction methods."""

import logging
from typing import Mapping, Optional, Protocol, Sequence

from .exceptions import MediaError, MediaNotFoundError, MediaUnsupportedError
from .models import (
    ATTEMPT_FAILED,
    ATTEMPT_MISS,
    ATTEMPT_SUCCESS,
    AttemptOutcome,
    MediaDescriptor,
)
from .platforms import Platform, detect_platform
from .providers import tiktok_chain, twitter_chain

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Unsupported URL. Please use a TikTok or Twitter/X link."

EXHAUSTED_HINTS = {
    Platform.TIKTOK: "TikTok might be blocking requests or the video is private.",
    Platform.TWITTER: "The post may be private, age-restricted, or unavailable.",
}


class Provider(Protocol):
    name: str

    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        ...


class MediaClient:
    """Resolve TikTok and Twitter/X links into MediaDescriptors.

    Every platform has a fixed, ordered chain of extraction methods. The
    methods are tried one at a time and the first one returning a
    descriptor wins, the remaining ones are never called. A method that
    raises or finds nothing is recorded and the next one is tried.

    Args:
        chains: Optional mapping of Platform to its ordered methods.
            Platforms left out use the default chains.

    Example:
        >>> client = MediaClient()
        >>> media = await client.resolve("https://www.tiktok.com/@user/video/123")
        >>> print(media.primary_media_url)
    """

    def __init__(self, chains: Optional[Mapping[Platform, Sequence[Provider]]] = None):
        chains = dict(chains or {})
        if Platform.TIKTOK not in chains:
            chains[Platform.TIKTOK] = tiktok_chain()
        if Platform.TWITTER not in chains:
            chains[Platform.TWITTER] = twitter_chain()
        self._chains: dict[Platform, tuple] = {
            platform: tuple(providers) for platform, providers in chains.items()
        }

    def chain_for(self, platform: Platform) -> tuple:
        """Get the ordered methods for a platform (empty when unsupported)."""
        return self._chains.get(platform, ())

    async def resolve(self, url: str) -> MediaDescriptor:
        """Resolve a post link through the platform's chain.

        Args:
            url: TikTok or Twitter/X post link

        Returns:
            Descriptor from the first method that succeeded

        Raises:
            MediaUnsupportedError: Link is not a supported platform link
            MediaNotFoundError: Every method failed or found nothing
        """
        platform = detect_platform(url)
        if platform is Platform.UNSUPPORTED:
            raise MediaUnsupportedError(UNSUPPORTED_MESSAGE)

        url = url.strip()
        chain = self.chain_for(platform)
        attempts: list[AttemptOutcome] = []

        for index, provider in enumerate(chain, start=1):
            name = getattr(provider, "name", provider.__class__.__name__)
            logger.debug(f"{platform.display_name} method {index}/{len(chain)}: {name} for {url}")
            try:
                result = await provider.attempt(url)
            except MediaError as e:
                attempts.append(AttemptOutcome(name, ATTEMPT_FAILED, str(e)))
                logger.warning(f"Method {name} failed for {url}: {e}")
                continue
            except Exception as e:
                attempts.append(
                    AttemptOutcome(name, ATTEMPT_FAILED, f"{type(e).__name__}: {e}")
                )
                logger.warning(f"Method {name} crashed for {url}: {e}", exc_info=True)
                continue

            if result is None:
                attempts.append(AttemptOutcome(name, ATTEMPT_MISS))
                logger.info(f"Method {name} found no media for {url}")
                continue

            attempts.append(AttemptOutcome(name, ATTEMPT_SUCCESS))
            logger.info(f"Resolved {url} via {name}")
            return result

        summary = "; ".join(str(attempt) for attempt in attempts) or "no methods configured"
        logger.error(f"All {platform.display_name} methods failed for {url}: {summary}")
        raise MediaNotFoundError(
            f"All download methods failed for {platform.display_name}. "
            f"{EXHAUSTED_HINTS.get(platform, '')}".strip(),
            platform=platform.display_name,
            attempts=attempts,
        )
