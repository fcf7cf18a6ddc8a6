"""
Tests for per-host outbound headers.
"""
import pytest

from media_api import USER_AGENT, headers_for_url
from media_api.headers import TIKTOK_REFERER, TWITTER_REFERER, referer_for_url


@pytest.mark.parametrize("url, expected", [
    ("https://www.tiktok.com/@user/video/1", TIKTOK_REFERER),
    ("https://v16-webapp.tiktokcdn.com/abc/video.mp4", TIKTOK_REFERER),
    ("https://p16-sign.tiktokcdn-us.com/img.jpeg", TIKTOK_REFERER),
    ("https://video.twimg.com/ext_tw_video/1/pu/vid/720x1280/a.mp4", TWITTER_REFERER),
    ("https://pbs.twimg.com/media/abc.jpg", TWITTER_REFERER),
    ("https://x.com/user/status/1", TWITTER_REFERER),
    ("https://cobalt.example.net/tunnel?id=1", None),
    ("https://www.tikwm.com/video/media/hdplay/1.mp4", None),
    ("https://nottiktok.com/video.mp4", None),
])
def test_referer_by_host(url, expected):
    assert referer_for_url(url) == expected


def test_headers_for_url():
    headers = headers_for_url("https://v16.tiktokcdn.com/a.mp4", accept="video/*")
    assert headers["User-Agent"] == USER_AGENT
    assert headers["Accept"] == "video/*"
    assert headers["Referer"] == TIKTOK_REFERER


def test_headers_are_fresh():
    first = headers_for_url("https://example.com/a")
    first["Range"] = "bytes=0-1"
    assert "Range" not in headers_for_url("https://example.com/a")
    assert "Referer" not in first
    assert "Accept" not in first
