"""Same-origin streaming proxy for resolved media URLs."""

import asyncio
import logging
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout, web

from data.config import proxy_config
from media_api import headers_for_url
from misc.utils import is_http_url

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET",
    "Access-Control-Allow-Headers": "Content-Type, Range",
}
PASSTHROUGH_HEADERS = ("Content-Length", "Content-Range", "Accept-Ranges")


def error_response(status: int, message: str) -> web.Response:
    return web.json_response(
        {"success": False, "error": message}, status=status, headers=CORS_HEADERS
    )


async def stream_media(
    request: web.Request,
    target_url: Optional[str],
    accept: str,
    content_type: Optional[str] = None,
    default_content_type: str = "application/octet-stream",
    filename: Optional[str] = None,
) -> web.StreamResponse:
    """Fetch target_url and stream its bytes back to the client.

    A client Range header is forwarded upstream and a partial-content
    answer is relayed with its status and Content-Range.

    Args:
        request: Incoming request, its Range header is honored
        target_url: Resolved media URL to fetch
        accept: Accept header sent upstream
        content_type: Fixed Content-Type to serve regardless of upstream
        default_content_type: Content-Type when not fixed and upstream has none
        filename: Attachment filename, inline when None

    Returns:
        Streamed response, or a JSON error response when the target is
        missing/invalid (400), unreachable (502) or answers an error status.
    """
    if not target_url:
        return error_response(400, "Media URL is required")
    if not is_http_url(target_url):
        return error_response(400, "Invalid media URL format")

    headers = headers_for_url(target_url, accept=accept)
    headers["Accept-Encoding"] = "identity"
    range_header = request.headers.get("Range")
    if range_header:
        headers["Range"] = range_header

    logger.info(f"Proxying {range_header or 'full'} from {target_url}")
    timeout = ClientTimeout(total=None, connect=20, sock_read=proxy_config["timeout"])
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(target_url, headers=headers, allow_redirects=True) as origin:
                if origin.status >= 400:
                    logger.error(f"Upstream returned {origin.status} for {target_url}")
                    return error_response(
                        origin.status, f"Failed to fetch media: {origin.status}"
                    )

                resp_headers = dict(CORS_HEADERS)
                for name in PASSTHROUGH_HEADERS:
                    if name in origin.headers:
                        resp_headers[name] = origin.headers[name]
                # aiohttp decodes compressed bodies, the upstream length no longer applies
                if "Content-Encoding" in origin.headers:
                    resp_headers.pop("Content-Length", None)
                resp_headers["Content-Type"] = (
                    content_type
                    or origin.headers.get("Content-Type")
                    or default_content_type
                )
                resp_headers["Cache-Control"] = "no-cache"
                if filename:
                    resp_headers["Content-Disposition"] = f'attachment; filename="{filename}"'

                resp = web.StreamResponse(status=origin.status, headers=resp_headers)
                await resp.prepare(request)
                try:
                    async for chunk in origin.content.iter_chunked(proxy_config["chunk_size"]):
                        if request.transport is None or request.transport.is_closing():
                            logger.debug(f"Client disconnected while streaming {target_url}")
                            return resp
                        await resp.write(chunk)
                    await resp.write_eof()
                except (ConnectionResetError, BrokenPipeError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                    # Headers are already sent, the stream can only be cut short
                    logger.warning(f"Stream interrupted for {target_url}: {e}")
                return resp
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Failed to fetch {target_url}: {e}")
        return error_response(502, f"Failed to fetch media: {e}")
