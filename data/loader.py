import logging

from aiohttp import web

from data.config import config
from media_api import MediaClient

MEDIA_CLIENT = web.AppKey("media_client", MediaClient)


def setup_logging(level: str = config["logs"]["level"]) -> None:
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)-5.5s]  %(message)s",
                        handlers=[
                            # logging.FileHandler("proxy.log"),
                            logging.StreamHandler()
                        ])
    logging.getLogger('aiohttp.access').setLevel(logging.WARNING)
