import logging

from aiohttp import web

from data.config import config
from misc.bundle import IMAGE_ACCEPT, build_archive, individual_downloads
from misc.media_proxy import stream_media
from misc.utils import is_http_url, timestamp_slug

images_routes = web.RouteTableDef()


@images_routes.get("/api/image")
async def proxy_image(request: web.Request) -> web.StreamResponse:
    return await stream_media(
        request,
        request.query.get("url"),
        accept=IMAGE_ACCEPT,
        default_content_type="image/jpeg",
    )


@images_routes.post("/api/images")
async def download_images(request: web.Request) -> web.Response:
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        return web.json_response({"success": False, "error": "Invalid request body"}, status=400)

    image_urls = body.get("imageUrls")
    if (
        not isinstance(image_urls, list)
        or not image_urls
        or not all(isinstance(url, str) and is_http_url(url) for url in image_urls)
    ):
        return web.json_response(
            {"success": False, "error": "A list of image URLs is required"}, status=400
        )
    max_images = config["images"]["max_images"]
    if len(image_urls) > max_images:
        return web.json_response(
            {"success": False, "error": f"At most {max_images} images can be downloaded at once"},
            status=400,
        )

    if not body.get("asZip"):
        return web.json_response({"success": True, "images": individual_downloads(image_urls)})

    title = body.get("title") if isinstance(body.get("title"), str) else ""
    archive, packed = await build_archive(image_urls, title)
    if not packed:
        logging.error(f"None of {len(image_urls)} images could be fetched for archive")
        return web.json_response(
            {"success": False, "error": "Failed to download images"}, status=502
        )

    return web.Response(
        body=archive,
        content_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="social-images-{timestamp_slug()}.zip"',
            "Cache-Control": "no-cache",
        },
    )
