from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging, shutdown_logging


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    try:
        yield
    finally:
        shutdown_logging()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Temperature Simulator",
        description="Generates simulated sensor temperature readings on demand.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
