"""Outbound request headers selected from the target URL."""

from typing import Optional
from urllib.parse import urlparse

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

TIKTOK_REFERER = "https://www.tiktok.com/"
TWITTER_REFERER = "https://x.com/"

TIKTOK_DOMAINS = (
    "tiktok.com",
    "tiktokcdn.com",
    "tiktokcdn-us.com",
    "tiktokv.com",
    "byteoversea.com",
    "ibytedtos.com",
    "muscdn.com",
)
TWITTER_DOMAINS = ("twitter.com", "x.com", "twimg.com", "t.co")


def _host_matches(host: str, domains: tuple) -> bool:
    return any(host == domain or host.endswith("." + domain) for domain in domains)


def referer_for_url(url: str) -> Optional[str]:
    """Pick the Referer a CDN expects for the given URL.

    Returns:
        The TikTok site for TikTok-family hosts, the X site for
        Twitter/X-family hosts, None for anything else (tunnel/relay
        instances and mirrors).
    """
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return None
    if _host_matches(host, TIKTOK_DOMAINS):
        return TIKTOK_REFERER
    if _host_matches(host, TWITTER_DOMAINS):
        return TWITTER_REFERER
    return None


def headers_for_url(url: str, accept: Optional[str] = None) -> dict[str, str]:
    """Build the header set for an outbound request to url.

    Args:
        url: Target URL, its host decides the Referer
        accept: Optional Accept header value

    Returns:
        Fresh dict of headers, safe for the caller to extend
    """
    headers = {
        "User-Agent": USER_AGENT,
        "Accept-Language": "en-US,en;q=0.5",
    }
    if accept:
        headers["Accept"] = accept
    referer = referer_for_url(url)
    if referer:
        headers["Referer"] = referer
    return headers
