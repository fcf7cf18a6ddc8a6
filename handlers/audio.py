from aiohttp import web

from misc.media_proxy import stream_media
from misc.utils import timestamp_slug

audio_routes = web.RouteTableDef()

AUDIO_ACCEPT = "audio/*,video/*;q=0.9,*/*;q=0.8"


@audio_routes.get("/api/audio")
async def proxy_audio(request: web.Request) -> web.StreamResponse:
    # Only the content type is relabeled, the container is not remuxed
    return await stream_media(
        request,
        request.query.get("url"),
        accept=AUDIO_ACCEPT,
        content_type="audio/mpeg",
        filename=f"media-audio-{timestamp_slug()}.mp3",
    )
