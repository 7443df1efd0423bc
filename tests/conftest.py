import pytest
import redis.asyncio as redis
from fastapi.testclient import TestClient

from roomassign.config import Config
from roomassign.main import app_factory
from testcontainers.redis import RedisContainer


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session")
def redis_url():
    try:
        container = RedisContainer("redis:7-alpine")
        container.start()
    except Exception as exc:
        pytest.skip(f"redis container unavailable: {exc}")
    try:
        host = container.get_container_host_ip()
        port = container.get_exposed_port(6379)
        yield f"redis://{host}:{port}/0"
    finally:
        container.stop()


@pytest.fixture
async def redis_client(redis_url):
    client = redis.from_url(redis_url, decode_responses=True)
    try:
        await client.flushdb()
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def app(redis_url):
    return app_factory(redis_url, Config())


@pytest.fixture
def client(app):
    with TestClient(app) as tc:
        yield tc
