"""Cron trigger app: JSON endpoints only, no dashboard."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from signal_league.delivery.web.routes import router
from signal_league.storage.database import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="SignalLeague Scoring", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    return app
