import os
from json import loads as json_loads

from dotenv import load_dotenv, find_dotenv

load_dotenv(find_dotenv())

DEFAULT_COBALT_INSTANCES = [
    "https://cobalt.api.timelessnesses.me/",
    "https://co.wuk.sh/",
    "https://cobalt.ggtyler.dev/",
    "https://cobalt-api.mrtoxic.dev/",
    "https://cobalt.privacyredirect.com/",
]


config = {
    "server": {
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "8080")),
    },
    "api": {
        "request_timeout": float(os.getenv("REQUEST_TIMEOUT", "30")),
        "resolve_timeout": float(os.getenv("RESOLVE_TIMEOUT", "10")),
        "twitter_timeout": float(os.getenv("TWITTER_TIMEOUT", "20")),
        "snaptik_url": os.getenv("SNAPTIK_URL", "https://snaptik.app"),
        "ssstik_url": os.getenv("SSSTIK_URL", "https://ssstik.io"),
        "tikwm_url": os.getenv("TIKWM_URL", "https://www.tikwm.com"),
        "vxtwitter_url": os.getenv("VXTWITTER_URL", "https://api.vxtwitter.com"),
        "cobalt_instances": json_loads(
            os.getenv("COBALT_INSTANCES", "null")
        ) or DEFAULT_COBALT_INSTANCES,
    },
    "proxy": {
        "timeout": float(os.getenv("PROXY_TIMEOUT", "60")),
        "chunk_size": int(os.getenv("PROXY_CHUNK_SIZE", "65536")),
    },
    "images": {
        "max_images": int(os.getenv("MAX_IMAGES", "35")),
    },
    "logs": {
        "level": os.getenv("LOG_LEVEL", "INFO").upper(),
    },
}

api_config = config["api"]
proxy_config = config["proxy"]
