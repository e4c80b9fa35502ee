"""FastAPI application entry point for Argus."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from argus.api.routes import router
from argus.config.settings import APIConfig, ScannerConfig
from argus.telemetry.errors import configure_logging

VERSION = "1.0.0"


def create_app(api_config: APIConfig | None = None) -> FastAPI:
    """Factory function for creating the FastAPI application."""
    api_config = api_config or APIConfig()
    configure_logging(ScannerConfig().log_level)

    app = FastAPI(
        title="Argus",
        description="Open-source identity investigation engine",
        version=VERSION,
    )

    app.state.api_config = api_config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.allowed_origins,
        allow_credentials=api_config.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "argus", "version": VERSION}

    return app


app = create_app()
