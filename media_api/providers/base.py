"""Base class and payload helpers shared by every extraction method."""

import asyncio
import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional
from urllib.parse import urljoin

import aiohttp
from aiohttp import ClientTimeout

from data.config import api_config
from ..exceptions import MediaExtractionError, MediaNetworkError
from ..models import MediaDescriptor

logger = logging.getLogger(__name__)

JSON_ACCEPT = "application/json, text/plain, */*"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


def str_field(payload: Mapping[str, Any], *keys: str) -> str:
    """Return the first non-empty string value among keys, else ""."""
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def int_field(payload: Mapping[str, Any], key: str) -> int:
    """Return a non-negative integer value for key, else 0.

    Infinite and NaN values count as missing.
    """
    value = payload.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if isinstance(value, (int, float)):
        return max(int(value), 0)
    return 0


def dict_field(payload: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def list_field(payload: Mapping[str, Any], key: str) -> list[Any]:
    value = payload.get(key)
    return value if isinstance(value, list) else []


def absolute_url(value: str, origin: str) -> str:
    """Root a provider-relative URL (leading "/") at the provider's origin."""
    if value and value.startswith("/") and not value.startswith("//"):
        return urljoin(origin.rstrip("/") + "/", value)
    return value


class BaseProvider(ABC):
    """One third-party extraction method.

    attempt() returns a MediaDescriptor on success, None when the provider
    answered but had nothing usable (soft miss), and raises a MediaError
    subclass on hard failure (network error, bad status, malformed payload).

    Args:
        base_url: Provider origin, defaults to the configured one
        timeout: Per-call timeout in seconds
    """

    name: str = "base"
    config_key: Optional[str] = None
    timeout_key: str = "request_timeout"

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        if base_url is None and self.config_key:
            base_url = api_config[self.config_key]
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout if timeout is not None else api_config[self.timeout_key]

    @abstractmethod
    async def attempt(self, url: str) -> Optional[MediaDescriptor]:
        """Resolve url through this method."""

    def _session(self, **kwargs: Any) -> aiohttp.ClientSession:
        """Open a fresh session bounded by this provider's timeout."""
        return aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout), **kwargs)

    async def _request_text(
        self, session: aiohttp.ClientSession, method: str, url: str, **kwargs: Any
    ) -> str:
        """Perform a request and return the body text of a 2xx response.

        Raises:
            MediaNetworkError: Transport failure, timeout or non-2xx status
            MediaExtractionError: Body cannot be decoded as text
        """
        try:
            async with session.request(method, url, **kwargs) as response:
                if response.status >= 400:
                    raise MediaNetworkError(
                        f"{self.name} returned HTTP {response.status} for {url}"
                    )
                try:
                    return await response.text()
                except ValueError as e:
                    raise MediaExtractionError(f"{self.name} returned undecodable text") from e
        except asyncio.TimeoutError as e:
            raise MediaNetworkError(f"{self.name} timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise MediaNetworkError(f"{self.name} request failed: {e}") from e

    async def _request_json(
        self, session: aiohttp.ClientSession, method: str, url: str, **kwargs: Any
    ) -> dict[str, Any]:
        """Perform a request and decode a JSON object from a 2xx response.

        Raises:
            MediaNetworkError: Transport failure, timeout or non-2xx status
            MediaExtractionError: Body is not a JSON object
        """
        try:
            async with session.request(method, url, **kwargs) as response:
                if response.status >= 400:
                    raise MediaNetworkError(
                        f"{self.name} returned HTTP {response.status} for {url}"
                    )
                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    raise MediaExtractionError(f"{self.name} returned invalid JSON") from e
        except asyncio.TimeoutError as e:
            raise MediaNetworkError(f"{self.name} timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise MediaNetworkError(f"{self.name} request failed: {e}") from e

        if not isinstance(payload, dict):
            raise MediaExtractionError(
                f"{self.name} returned {type(payload).__name__} instead of an object"
            )
        return payload

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} base_url={self.base_url!r}>"
