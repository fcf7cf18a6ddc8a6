from aiohttp import web

from misc.media_proxy import stream_media
from misc.utils import timestamp_slug

video_routes = web.RouteTableDef()

VIDEO_ACCEPT = "video/webm,video/ogg,video/*;q=0.9,application/ogg;q=0.7,audio/*;q=0.6,*/*;q=0.5"


@video_routes.get("/api/video")
async def proxy_video(request: web.Request) -> web.StreamResponse:
    # Upstream CDNs report audio/* or octet-stream for some videos,
    # serving a fixed type keeps players from treating them as audio
    return await stream_media(
        request,
        request.query.get("url"),
        accept=VIDEO_ACCEPT,
        content_type="video/mp4",
        filename=f"media-video-{timestamp_slug()}.mp4",
    )
