import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from data.app_factory import create_app


@pytest.fixture
async def fake_server():
    """Start in-process HTTP servers, returns their base URL."""
    servers = []

    async def start(*routes):
        app = web.Application()
        for method, path, handler in routes:
            app.router.add_route(method, path, handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return f"http://{server.host}:{server.port}"

    yield start
    for server in servers:
        await server.close()


@pytest.fixture
async def api_client():
    """Start the proxy application around a given media client."""
    clients = []

    async def start(media_client):
        client = TestClient(TestServer(create_app(media_client)))
        await client.start_server()
        clients.append(client)
        return client

    yield start
    for client in clients:
        await client.close()
