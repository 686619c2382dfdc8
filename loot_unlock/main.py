import logging
from typing import Optional

from fastapi import FastAPI, Request

from loot_unlock.api_errors import install_error_handlers
from loot_unlock.catalog_loader import load_catalog
from loot_unlock.config import Settings, load_settings
from loot_unlock.routes import curves, loot, monsters

VERSION = "1.0.0"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Loot Unlock API",
        description="Monster loot unlock levels: reward curves, loot priority ordering and level-budget allocation.",
        version=VERSION,
    )

    app.state.settings = settings
    app.state.catalog = load_catalog(settings.catalog_path) if settings.catalog_path else None

    install_error_handlers(app, debug_trace=settings.debug_trace)

    # ============================================================
    # HEALTH CHECK
    # ============================================================

    @app.get("/health", tags=["Health"], response_model=dict)
    def health_check():
        return {"status": "ok"}

    # ============================================================
    # METADATA
    # ============================================================

    @app.get(
        "/info",
        tags=["Metadata"],
        summary="API info + configured catalog",
        description="Returns build version, default catalog size and the configured unlock level cap.",
        response_model=dict
    )
    def info(request: Request):
        catalog = request.app.state.catalog
        return {
            "name": "Loot Unlock API",
            "version": VERSION,
            "catalog_items": len(catalog) if catalog is not None else 0,
            "catalog_configured": catalog is not None,
            "max_unlock_level": request.app.state.settings.max_unlock_level,
        }

    app.include_router(curves.router)
    app.include_router(loot.router)
    app.include_router(monsters.router)

    return app


app = create_app()
