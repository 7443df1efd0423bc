from fastapi import FastAPI
from roomassign.api.routes.events import events_router
from roomassign.api.routes.rooms import rooms_router
from contextlib import asynccontextmanager
import logging
import redis.asyncio as redis
import os

from roomassign.application.guest_service import GuestService
from roomassign.application.room_service import RoomService
from roomassign.config import Config
from roomassign.env import load_env_file
from roomassign.infrastructure.redis_room_store import RedisRoomStore
from roomassign.logs import configure_logging

logger = logging.getLogger(__name__)


def app_factory(redis_url, config: Config | None = None):
    config = config or Config.load()
    configure_logging(config.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.redis = redis.from_url(
            redis_url,
            decode_responses=True,
            health_check_interval=30,
        )
        app.state.room_store = RedisRoomStore(app.state.redis)
        app.state.room_service = RoomService(app.state.room_store, config)
        app.state.guest_service = GuestService(app.state.room_store)
        logger.info("Room assignment service started")
        try:
            yield
        finally:
            await app.state.redis.aclose()

    app = FastAPI(title="Room Assignment Service", lifespan=lifespan)
    app.include_router(events_router)
    app.include_router(rooms_router)

    return app


load_env_file()

REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")

app = app_factory(REDIS_URL)
