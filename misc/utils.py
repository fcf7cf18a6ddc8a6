import re
from datetime import datetime, timezone
from sys import exc_info
from traceback import format_exception
from urllib.parse import quote, urlparse

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp", "gif", "heic")


def timestamp_slug() -> str:
    """Current UTC time as a filename-safe string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def is_http_url(url: str) -> bool:
    return bool(url) and urlparse(url).scheme in ("http", "https")


def proxy_path(endpoint: str, target_url: str) -> str:
    """Same-origin proxy path wrapping target_url, "" when there is no target."""
    if not target_url:
        return ""
    return f"{endpoint}?url={quote(target_url, safe='')}"


def image_extension(url: str) -> str:
    """Guess an image file extension from a URL path, jpg by default."""
    path = urlparse(url).path.lower()
    match = re.search(r"\.([a-z0-9]+)$", path)
    if match and match.group(1) in IMAGE_EXTENSIONS:
        return "jpg" if match.group(1) == "jpeg" else match.group(1)
    # TikTok CDN paths carry the format before a "~tplv" suffix
    for extension in IMAGE_EXTENSIONS:
        if f".{extension}" in path:
            return "jpg" if extension == "jpeg" else extension
    return "jpg"


def safe_filename(name: str, default: str = "images") -> str:
    """Reduce free text to a short, filesystem-safe filename stem."""
    cleaned = re.sub(r"[^\w\- ]+", "", name or "").strip()
    cleaned = re.sub(r"\s+", "_", cleaned)[:50].strip("_")
    return cleaned or default


def error_catch(e):
    error_type, error_instance, tb = exc_info()
    tb_str = format_exception(error_type, error_instance, tb)
    error_message = "".join(tb_str)
    return error_message
