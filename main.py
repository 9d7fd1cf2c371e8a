"""
Credential service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.auth import router as auth_router
from api.middleware import register_middleware
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from config.settings import Settings, config
from database.session import init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncio"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or config

    app = FastAPI(
        title="Credential Service",
        version="1.0.0",
        description="Register, login and profile update backed by a shared user store.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router, prefix=settings.api_prefix)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok"}

    @app.on_event("startup")
    async def on_startup():
        # ConfigurationError here aborts startup; nothing else may stop the process.
        app.state.token_issuer = TokenIssuer(settings.jwt_secret, settings.jwt_algorithm)
        app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        logger.info(
            "Token issuer ready (%s), bcrypt work factor %d",
            settings.jwt_algorithm,
            settings.bcrypt_rounds,
        )

        if settings.create_tables:
            logger.info("Ensuring user store schema…")
            await init_models()

        logger.info("Application ready to accept requests.")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
