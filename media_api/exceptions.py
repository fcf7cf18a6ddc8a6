"""Media API exception classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .models import AttemptOutcome


class MediaError(Exception):
    """Base exception for media resolution errors."""

    pass


class MediaInvalidLinkError(MediaError):
    """Link could not be parsed into the shape a method requires."""

    pass


class MediaUnsupportedError(MediaError):
    """Link does not belong to a supported platform."""

    pass


class MediaNetworkError(MediaError):
    """Network error, timeout or non-success status from a provider."""

    pass


class MediaExtractionError(MediaError):
    """Provider payload was malformed or reported an error."""

    pass


class MediaNotFoundError(MediaError):
    """Every method for the platform failed or found nothing.

    Attributes:
        platform: Display name of the platform whose chain was exhausted
        attempts: One AttemptOutcome per method that was tried
    """

    def __init__(
        self,
        message: str,
        platform: str,
        attempts: Optional[List["AttemptOutcome"]] = None,
    ):
        super().__init__(message)
        self.platform = platform
        self.attempts = list(attempts or [])
