import logging

from data.app_factory import MediaProxyApplication
from data.config import config
from data.loader import setup_logging


def main() -> None:
    setup_logging()
    logging.info(f'Media proxy listening on {config["server"]["host"]}:{config["server"]["port"]}')
    MediaProxyApplication().start()


if __name__ == "__main__":
    main()
