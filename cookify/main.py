from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cookify.api.v1.auth import router as auth_router
from cookify.api.v1.pantry import router as pantry_router
from cookify.api.v1.recipes import router as recipes_router
from cookify.api.v1.saved import router as saved_router
from cookify.config import Settings
from cookify.core.models import Health, utcnow
from cookify.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure data dir exists so repos can write
    settings = Settings()
    os.makedirs(settings.data_dir, exist_ok=True)
    yield


def create_app() -> FastAPI:
    settings = Settings()
    setup_logging(settings.log_level)
    app = FastAPI(title="Cookify Store API", version="1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)
    app.include_router(recipes_router)
    app.include_router(saved_router)
    app.include_router(pantry_router)

    @app.get("/health", response_model=Health)
    def health():
        return Health(status="ok", timestamp=utcnow())

    return app


app = create_app()
