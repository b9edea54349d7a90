from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.settings_endpoints import STORE, router as settings_router

    app = FastAPI(title="settings-store")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root_redirect():
        return RedirectResponse(url="/settings", status_code=307)

    app.include_router(settings_router)

    logger.info("settings store ready: %r (persistent=%s)", STORE, STORE.persistent)
    return app


app = create_app()
