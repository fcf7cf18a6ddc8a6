import logging

from aiohttp import web

from data.loader import MEDIA_CLIENT
from media_api import MediaDescriptor, MediaError, MediaUnsupportedError, validate_url
from misc.utils import error_catch, proxy_path

download_routes = web.RouteTableDef()


def descriptor_response(media: MediaDescriptor) -> dict:
    """Shape a resolved descriptor into the JSON body the page expects."""
    return {
        "success": True,
        # Video proxy always wraps the primary stream
        "downloadUrl": proxy_path("/api/video", media.primary_media_url),
        # Audio prefers the dedicated audio stream when there is one
        "audioUrl": proxy_path("/api/audio", media.audio_url),
        "metadata": {
            "id": media.id,
            "sourceUrl": media.source_url,
            "title": media.title,
            "author": media.author,
            "description": media.description,
            "duration": media.duration,
            "thumbnail": media.thumbnail_url,
            "isPhotoCarousel": media.is_photo_carousel,
            "images": [
                {
                    "id": image.id,
                    "url": image.full_url,
                    "thumbnail": image.thumbnail_url,
                    "selected": False,
                }
                for image in media.images
            ],
        },
    }


@download_routes.post("/api/download")
async def download(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return web.json_response({"success": False, "error": "Invalid request body"}, status=400)

    url = body.get("url")
    if not url or not isinstance(url, str):
        return web.json_response({"success": False, "error": "URL is required"}, status=400)
    if not validate_url(url):
        return web.json_response(
            {"success": False, "error": "Unsupported URL. Please use a TikTok or Twitter/X link."},
            status=400,
        )

    logging.info(f"Processing URL: {url} Type: {body.get('type', 'video')}")
    client = request.app[MEDIA_CLIENT]
    try:
        media = await client.resolve(url)
    except MediaUnsupportedError as e:
        return web.json_response({"success": False, "error": str(e)}, status=400)
    except MediaError as e:
        logging.error(f"Resolution failed for {url}: {e}")
        return web.json_response({"success": False, "error": str(e)}, status=500)
    except Exception as e:
        logging.error(error_catch(e))
        return web.json_response(
            {"success": False, "error": "Failed to process video"}, status=500
        )

    kind = "video" if media.has_video else f"{len(media.images)} images"
    logging.info(f"Media Download: {url} -> {media.id} ({kind})")
    return web.json_response(descriptor_response(media))
