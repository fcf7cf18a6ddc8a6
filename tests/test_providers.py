"""
Tests for the extraction methods against in-process fake provider servers.
"""
import pytest
from aiohttp import web

from media_api.exceptions import MediaExtractionError, MediaInvalidLinkError, MediaNetworkError
from media_api.providers import (
    CobaltProvider,
    SnaptikProvider,
    SsstikProvider,
    TikTokPageProvider,
    TikwmProvider,
    VxTwitterProvider,
)
from media_api.providers.base import absolute_url, int_field, str_field
from media_api.providers.cobalt import title_from_filename
from media_api.providers.snaptik import find_media_links
from media_api.providers.tiktok_page import extract_media_address, is_short_link

TIKTOK_URL = "https://www.tiktok.com/@user/video/7123"
TWEET_URL = "https://x.com/someone/status/1780"


def json_handler(payload, status=200, seen=None):
    async def handler(request):
        if seen is not None and request.can_read_body:
            seen.append(await request.json())
        return web.json_response(payload, status=status)
    return handler


def test_payload_helpers():
    assert str_field({"a": "  ", "b": " x "}, "a", "b") == "x"
    assert str_field({"a": 1}, "a") == ""
    assert int_field({"d": "12.5"}, "d") == 12
    assert int_field({"d": -3}, "d") == 0
    assert int_field({"d": True}, "d") == 0
    assert int_field({"d": "1e999"}, "d") == 0
    assert int_field({"d": float("inf")}, "d") == 0
    assert int_field({"d": float("nan")}, "d") == 0
    assert int_field({"d": "abc"}, "d") == 0
    assert absolute_url("/video/a.mp4", "https://www.tikwm.com/") == "https://www.tikwm.com/video/a.mp4"
    assert absolute_url("https://cdn/a.mp4", "https://www.tikwm.com") == "https://cdn/a.mp4"
    assert absolute_url("//cdn/a.mp4", "https://www.tikwm.com") == "//cdn/a.mp4"


# tikwm

async def test_tikwm_relative_stream_is_rooted_at_origin(fake_server):
    seen = []
    base = await fake_server(("POST", "/api/", json_handler({
        "code": 0,
        "msg": "success",
        "data": {
            "id": "7123",
            "title": "A dance",
            "cover": "/video/cover/7123.jpeg",
            "duration": 15,
            "hdplay": "/video/media/hdplay/7123.mp4",
            "play": "/video/media/play/7123.mp4",
            "music": "/video/music/7123.mp3",
            "author": {"nickname": "Dancer"},
        },
    }, seen=seen)))

    media = await TikwmProvider(base_url=base).attempt(TIKTOK_URL)

    assert seen[0]["url"] == TIKTOK_URL
    assert seen[0]["hd"] == 1
    assert media.id == "7123"
    assert media.primary_media_url == f"{base}/video/media/hdplay/7123.mp4"
    assert media.music_url == f"{base}/video/music/7123.mp3"
    assert media.thumbnail_url == f"{base}/video/cover/7123.jpeg"
    assert media.title == "A dance"
    assert media.author == "Dancer"
    assert media.duration == 15
    assert not media.is_photo_carousel


async def test_tikwm_slideshow_is_carousel(fake_server):
    base = await fake_server(("POST", "/api/", json_handler({
        "code": 0,
        "data": {
            "title": "Photos",
            "images": ["https://p16.tiktokcdn.com/a.jpeg", "/img/b.jpeg"],
        },
    })))

    media = await TikwmProvider(base_url=base).attempt("https://www.tiktok.com/@user/photo/42")

    assert media.is_photo_carousel
    assert media.primary_media_url == ""
    assert [image.id for image in media.images] == ["42_img_0", "42_img_1"]
    assert media.images[0].full_url == "https://p16.tiktokcdn.com/a.jpeg"
    assert media.images[1].full_url == f"{base}/img/b.jpeg"


async def test_tikwm_error_code_is_a_miss(fake_server):
    base = await fake_server(("POST", "/api/", json_handler({"code": -1, "msg": "Url parsing is failed!"})))
    assert await TikwmProvider(base_url=base).attempt(TIKTOK_URL) is None


async def test_tikwm_http_error_is_a_failure(fake_server):
    base = await fake_server(("POST", "/api/", json_handler({}, status=503)))
    with pytest.raises(MediaNetworkError):
        await TikwmProvider(base_url=base).attempt(TIKTOK_URL)


async def test_unreachable_provider_is_a_failure():
    provider = TikwmProvider(base_url="http://127.0.0.1:9", timeout=2)
    with pytest.raises(MediaNetworkError):
        await provider.attempt(TIKTOK_URL)


async def test_invalid_json_is_a_failure(fake_server):
    async def handler(request):
        return web.Response(text="<html>blocked</html>", content_type="text/html")

    base = await fake_server(("POST", "/api/", handler))
    with pytest.raises(MediaExtractionError):
        await TikwmProvider(base_url=base).attempt(TIKTOK_URL)


async def test_tikwm_overflowing_duration_defaults_to_zero(fake_server):
    base = await fake_server(("POST", "/api/", json_handler({
        "code": 0,
        "data": {"hdplay": "https://cdn.example/v.mp4", "duration": "1e999"},
    })))

    media = await TikwmProvider(base_url=base).attempt(TIKTOK_URL)

    assert media.primary_media_url == "https://cdn.example/v.mp4"
    assert media.duration == 0


# snaptik

def test_find_media_links_in_page_order():
    markup = """
    <div>
      <a href="https://cdn.snaptik/img/cover.jpg">Cover</a>
      <a href="https://cdn.snaptik/dl/hd.mp4?token=1">HD</a>
      <a href="https://cdn.snaptik/dl/sd.mp4">SD</a>
      <a href="https://cdn.snaptik/file?token=2" download="video.mp4">Server 2</a>
    </div>
    """
    assert find_media_links(markup) == [
        "https://cdn.snaptik/dl/hd.mp4?token=1",
        "https://cdn.snaptik/dl/sd.mp4",
        "https://cdn.snaptik/file?token=2",
    ]
    assert find_media_links("<p>nothing</p>") == []


async def test_snaptik_posts_form_and_takes_first_link(fake_server):
    forms = []

    async def home(request):
        return web.Response(text="<html></html>", content_type="text/html")

    async def submit(request):
        forms.append(dict(await request.post()))
        return web.Response(
            text='<a href="https://cdn.snaptik/first.mp4">1</a><a href="https://cdn.snaptik/second.mp4">2</a>',
            content_type="text/html",
        )

    base = await fake_server(("GET", "/", home), ("POST", "/abc2.php", submit))
    media = await SnaptikProvider(base_url=base).attempt(TIKTOK_URL)

    assert forms == [{"url": TIKTOK_URL}]
    assert media.primary_media_url == "https://cdn.snaptik/first.mp4"
    assert media.id == "7123"
    assert media.title == "TikTok Video (Snaptik)"


async def test_snaptik_without_links_is_a_miss(fake_server):
    async def page(request):
        return web.Response(text="<p>Error</p>", content_type="text/html")

    base = await fake_server(("GET", "/", page), ("POST", "/abc2.php", page))
    assert await SnaptikProvider(base_url=base).attempt(TIKTOK_URL) is None


async def test_snaptik_undecodable_page_is_a_failure(fake_server):
    async def page(request):
        return web.Response(body=b"<html>caf\xe9</html>", content_type="text/html")

    base = await fake_server(("GET", "/", page), ("POST", "/abc2.php", page))
    with pytest.raises(MediaExtractionError):
        await SnaptikProvider(base_url=base).attempt(TIKTOK_URL)


# ssstik

async def test_ssstik_reads_json_answer(fake_server):
    seen = []
    base = await fake_server(("POST", "/abc", json_handler({
        "url": "https://cdn.ssstik/v.mp4",
        "title": "Funny",
        "cover": "https://cdn.ssstik/c.jpg",
        "author": "someone",
        "duration": "12",
    }, seen=seen)))

    media = await SsstikProvider(base_url=base).attempt(TIKTOK_URL)

    assert seen[0]["id"] == TIKTOK_URL
    assert media.primary_media_url == "https://cdn.ssstik/v.mp4"
    assert media.title == "Funny"
    assert media.author == "someone"
    assert media.duration == 12


async def test_ssstik_without_url_is_a_miss(fake_server):
    base = await fake_server(("POST", "/abc", json_handler({"error": "no"})))
    assert await SsstikProvider(base_url=base).attempt(TIKTOK_URL) is None


# direct page

PAGE = r"""
<html><body>
<script id="other">{"playAddr":"https://wrong.example/x.mp4"}</script>
<script id="__UNIVERSAL_DATA_FOR_REHYDRATION__">
{"webapp.video-detail":{"video":{"playAddr":"https://v16.tiktokcdn.com/play.mp4",
"downloadAddr":"https://v16.tiktokcdn.com/download.mp4"}}}
</script>
</body></html>
"""


def test_extract_prefers_download_address():
    assert extract_media_address(PAGE) == "https://v16.tiktokcdn.com/download.mp4"


def test_extract_falls_back_to_play_address():
    markup = r'<script>{"webapp.video-detail":{"playAddr":"https:\/\/v16.tiktokcdn.com\/p.mp4"}}</script>'
    assert extract_media_address(markup) == "https://v16.tiktokcdn.com/p.mp4"


def test_extract_ignores_scripts_without_marker():
    markup = r'<script>{"playAddr":"https://a/b.mp4"}</script>'
    assert extract_media_address(markup) is None


def test_short_links():
    assert is_short_link("https://vm.tiktok.com/ZMabc/")
    assert is_short_link("https://www.tiktok.com/t/ZTabc/")
    assert not is_short_link(TIKTOK_URL)


async def test_page_scraper(fake_server):
    async def page(request):
        return web.Response(text=PAGE, content_type="text/html")

    base = await fake_server(("GET", "/@user/video/{id}", page))
    media = await TikTokPageProvider().attempt(f"{base}/@user/video/999")

    assert media.primary_media_url == "https://v16.tiktokcdn.com/download.mp4"
    assert media.id == "999"
    assert media.title == "TikTok Video (Direct)"


def test_extract_unescapes_unicode_slashes():
    escaped_slash = chr(92) + "u002F"
    address = escaped_slash.join(["https:", "", "v16.tiktokcdn.com", "video", "d.mp4"])
    markup = '<script>{"webapp.video-detail":{"downloadAddr":"' + address + '"}}</script>'
    assert extract_media_address(markup) == "https://v16.tiktokcdn.com/video/d.mp4"


async def test_page_scraper_follows_short_link(fake_server):
    requested = []

    async def short_link(request):
        requested.append((request.method, request.path))
        raise web.HTTPFound("/@user/video/321")

    async def page(request):
        requested.append((request.method, request.path))
        return web.Response(text=PAGE, content_type="text/html")

    base = await fake_server(
        ("HEAD", "/t/ZTabc", short_link),
        ("HEAD", "/@user/video/{id}", page),
        ("GET", "/@user/video/{id}", page),
    )
    provider = TikTokPageProvider()
    short_url = f"{base}/t/ZTabc"

    assert await provider.resolve_url(short_url) == f"{base}/@user/video/321"

    media = await provider.attempt(short_url)

    assert ("GET", "/@user/video/321") in requested
    assert media.id == "321"
    assert media.source_url == short_url
    assert media.primary_media_url == "https://v16.tiktokcdn.com/download.mp4"


async def test_unreachable_short_link_keeps_original_url():
    provider = TikTokPageProvider(resolve_timeout=2)
    short_url = "http://127.0.0.1:9/t/ZTabc"
    assert await provider.resolve_url(short_url) == short_url


async def test_canonical_link_is_not_resolved():
    provider = TikTokPageProvider(resolve_timeout=2)
    assert await provider.resolve_url(TIKTOK_URL) == TIKTOK_URL


# vxtwitter

async def test_vxtwitter_video_with_photos(fake_server):
    base = await fake_server(("GET", "/someone/status/1780", json_handler({
        "text": "Look   at\nthis",
        "user_name": "Some One",
        "media_extended": [
            {"type": "image", "url": "https://pbs.twimg.com/media/1.jpg", "thumbnail_url": "https://pbs.twimg.com/media/1_s.jpg"},
            {"type": "video", "url": "https://video.twimg.com/v.mp4", "thumbnail_url": "https://pbs.twimg.com/thumb.jpg"},
            {"type": "image", "url": "https://pbs.twimg.com/media/2.jpg", "thumbnail_url": ""},
        ],
    })))

    media = await VxTwitterProvider(base_url=base).attempt(TWEET_URL)

    assert media.id == "1780"
    assert media.primary_media_url == "https://video.twimg.com/v.mp4"
    assert not media.is_photo_carousel
    assert [image.full_url for image in media.images] == [
        "https://pbs.twimg.com/media/1.jpg",
        "https://pbs.twimg.com/media/2.jpg",
    ]
    assert [image.id for image in media.images] == ["tw_img_0", "tw_img_1"]
    assert media.images[1].thumbnail_url == "https://pbs.twimg.com/media/2.jpg"
    assert media.thumbnail_url == "https://pbs.twimg.com/thumb.jpg"
    assert media.title == "Look at this"
    assert media.author == "Some One"


async def test_vxtwitter_photos_only(fake_server):
    base = await fake_server(("GET", "/someone/status/1780", json_handler({
        "media": [
            {"type": "image", "url": "https://pbs.twimg.com/media/1.jpg"},
            {"type": "image", "url": "https://pbs.twimg.com/media/2.jpg"},
        ],
    })))

    media = await VxTwitterProvider(base_url=base).attempt(TWEET_URL)

    assert media.is_photo_carousel
    assert media.primary_media_url == ""
    assert media.thumbnail_url == "https://pbs.twimg.com/media/1.jpg"
    assert media.title == "Tweet by @someone"
    assert media.author == "someone"


async def test_vxtwitter_without_media_is_a_failure(fake_server):
    base = await fake_server(("GET", "/someone/status/1780", json_handler({"text": "just text"})))
    with pytest.raises(MediaExtractionError):
        await VxTwitterProvider(base_url=base).attempt(TWEET_URL)


async def test_vxtwitter_rejects_non_status_link():
    with pytest.raises(MediaInvalidLinkError):
        await VxTwitterProvider(base_url="http://127.0.0.1:9").attempt("https://t.co/AbCdEf")


# cobalt

def test_title_from_filename():
    assert title_from_filename("twitter_1780.mp4", "x") == "twitter_1780"
    assert title_from_filename("", "Social Media Video") == "Social Media Video"


async def test_cobalt_moves_to_next_instance(fake_server):
    calls = []

    async def broken(request):
        calls.append("a")
        return web.json_response({"status": "error", "error": {"code": "error.api.fetch.fail"}})

    async def working(request):
        calls.append("b")
        body = await request.json()
        assert body["url"] == TWEET_URL
        return web.json_response({
            "status": "tunnel",
            "url": "https://cobalt.example/tunnel?id=1",
            "filename": "twitter_1780.mp4",
        })

    base = await fake_server(("POST", "/a", broken), ("POST", "/b", working))
    provider = CobaltProvider(instances=[f"{base}/a", f"{base}/b"])
    media = await provider.attempt(TWEET_URL)

    assert calls == ["a", "b"]
    assert media.primary_media_url == "https://cobalt.example/tunnel?id=1"
    assert media.title == "twitter_1780"
    assert media.id == "1780"


async def test_cobalt_picker_with_photos_only(fake_server):
    base = await fake_server(("POST", "/", json_handler({
        "status": "picker",
        "picker": [
            {"type": "photo", "url": "https://pbs.twimg.com/1.jpg", "thumb": "https://pbs.twimg.com/1_s.jpg"},
            {"type": "photo", "url": "https://pbs.twimg.com/2.jpg"},
        ],
    })))

    media = await CobaltProvider(instances=[f"{base}/"]).attempt(TWEET_URL)

    assert media.is_photo_carousel
    assert [image.id for image in media.images] == ["img_0", "img_1"]
    assert media.thumbnail_url == "https://pbs.twimg.com/1_s.jpg"
    assert media.title == "Social Media Content"


async def test_cobalt_picker_video_is_primary(fake_server):
    base = await fake_server(("POST", "/", json_handler({
        "status": "picker",
        "picker": [
            {"type": "photo", "url": "https://pbs.twimg.com/1.jpg"},
            {"type": "gif", "url": "https://video.twimg.com/g.mp4"},
        ],
    })))

    media = await CobaltProvider(instances=[f"{base}/"]).attempt(TWEET_URL)

    assert media.primary_media_url == "https://video.twimg.com/g.mp4"
    assert not media.is_photo_carousel
    assert len(media.images) == 1


async def test_cobalt_all_instances_failing(fake_server):
    base = await fake_server(
        ("POST", "/a", json_handler({}, status=500)),
        ("POST", "/b", json_handler({"status": "picker", "picker": []})),
    )
    provider = CobaltProvider(instances=[f"{base}/a", f"{base}/b"])

    with pytest.raises(MediaExtractionError, match="All 2 cobalt instances failed"):
        await provider.attempt(TWEET_URL)
