"""Packaging of carousel images for download."""

import asyncio
import io
import logging
import zipfile
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout

from data.config import api_config
from media_api import headers_for_url
from misc.utils import image_extension, proxy_path, safe_filename

logger = logging.getLogger(__name__)

IMAGE_ACCEPT = "image/avif,image/webp,image/apng,image/*,*/*;q=0.8"


async def fetch_image(session: aiohttp.ClientSession, url: str) -> Optional[bytes]:
    """Download one image, None when it could not be fetched."""
    try:
        async with session.get(url, headers=headers_for_url(url, accept=IMAGE_ACCEPT)) as response:
            if response.status != 200:
                logger.warning(f"Image fetch returned {response.status} for {url}")
                return None
            return await response.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning(f"Image fetch failed for {url}: {e}")
        return None


async def build_archive(image_urls: list[str], title: str = "") -> tuple[bytes, int]:
    """Fetch images one after another and pack them into a ZIP archive.

    Images that fail to download are skipped.

    Returns:
        Tuple of (archive bytes, number of images packed)
    """
    stem = safe_filename(title)
    buffer = io.BytesIO()
    packed = 0
    timeout = ClientTimeout(total=api_config["request_timeout"])
    async with aiohttp.ClientSession(timeout=timeout) as session:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for index, url in enumerate(image_urls, start=1):
                data = await fetch_image(session, url)
                if data is None:
                    continue
                archive.writestr(f"{stem}_{index}.{image_extension(url)}", data)
                packed += 1
    logger.info(f"Packed {packed}/{len(image_urls)} images into archive")
    return buffer.getvalue(), packed


def individual_downloads(image_urls: list[str]) -> list[dict[str, str]]:
    """Per-image proxy URLs and generated filenames, in input order."""
    return [
        {
            "url": proxy_path("/api/image", url),
            "filename": f"image_{index}.{image_extension(url)}",
        }
        for index, url in enumerate(image_urls, start=1)
    ]
