"""Application factory for creating web applications with shared configuration."""

from typing import List, Optional

from aiohttp import web

from data.config import config
from data.loader import MEDIA_CLIENT
from media_api import MediaClient


class WebApplication:
    """Base web application class with shared functionality."""

    def __init__(self, client: Optional[MediaClient] = None):
        self.client = client or MediaClient()
        self._routes: List[web.RouteTableDef] = []

    def include_routes(self, *routes: web.RouteTableDef):
        """Add route tables to the application."""
        self._routes.extend(routes)

    def setup(self) -> web.Application:
        """Build the aiohttp application with the client and all routes."""
        app = web.Application()
        app[MEDIA_CLIENT] = self.client
        for routes in self._routes:
            app.add_routes(routes)
        return app

    def start(self, host: Optional[str] = None, port: Optional[int] = None):
        """Start serving until interrupted."""
        web.run_app(
            self.setup(),
            host=host or config["server"]["host"],
            port=port or config["server"]["port"],
        )


class MediaProxyApplication(WebApplication):
    """Media proxy with the resolve, stream and image routes."""

    def __init__(self, client: Optional[MediaClient] = None):
        super().__init__(client)
        self._setup_routes()

    def _setup_routes(self):
        """Setup all routes served by the proxy."""
        from handlers.audio import audio_routes
        from handlers.download import download_routes
        from handlers.images import images_routes
        from handlers.video import video_routes

        self.include_routes(
            download_routes,
            video_routes,
            audio_routes,
            images_routes,
        )


def create_app(client: Optional[MediaClient] = None) -> web.Application:
    """Factory function to create the proxy application."""
    return MediaProxyApplication(client).setup()
