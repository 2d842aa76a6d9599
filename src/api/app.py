"""
FastAPI Application Factory.

Usage:
    # Development
    uvicorn api.app:create_app --factory --reload

    # Production
    uvicorn api.app:create_app --factory --host 0.0.0.0 --port 8080

    # Or in code / tests
    from api.app import create_app
    app = create_app(catalog=InMemoryCatalog(candidates))
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.repository import CatalogError, InMemoryCatalog, load_catalog
from config.settings import Settings, get_settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware
from scoring.context_resolver import ContextResolver
from scoring.engine import SuggestionEngine
from scoring.ranker import CandidateRanker
from scoring.scorer import CandidateScorer


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Configures logging on startup and reports the loaded catalog size.
    """
    settings: Settings = app.state.settings

    configure_logging(
        json_logs=settings.use_json_logs,
        log_level="DEBUG" if settings.debug else settings.log_level,
    )

    logger.info(
        "Starting suggestion API",
        environment=settings.environment,
        port=settings.port,
        catalog_size=len(app.state.catalog),
        scoring_workers=settings.scoring_workers,
    )

    yield

    logger.info("Shutting down suggestion API")


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[InMemoryCatalog] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to ``get_settings()``)
        catalog: Catalog to serve; when omitted it is loaded from
                 ``settings.catalog_path`` (empty if unset or unreadable)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Condition-Matching Suggestion API",
        description="""
        Ranks catalog candidates against live environmental conditions
        (water temperature, flow, air temperature, weather, season, time of day)
        and explains every pick.

        ## Main Endpoints

        - `POST /api/suggestions` - Ranked, explained shortlist
        - `POST /api/suggestions/explain` - Per-rule breakdown for one candidate
        - `POST /api/catalog/{id}/outcome` - Record a real-world outcome

        ## Health Checks

        - `/health`, `/ready`, `/live`
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # =========================================================================
    # Shared state (stateless engine pieces + catalog snapshot source)
    # =========================================================================

    scorer = CandidateScorer()
    resolver = ContextResolver()
    app.state.settings = settings
    app.state.catalog = catalog if catalog is not None else _load_configured_catalog(settings)
    app.state.scorer = scorer
    app.state.resolver = resolver
    app.state.engine = SuggestionEngine(
        resolver=resolver,
        ranker=CandidateRanker(scorer=scorer, max_workers=settings.scoring_workers),
        default_top_n=settings.default_top_n,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTracingMiddleware)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router, tags=["Health"])

    from api.routes.suggestions import router as suggestions_router
    app.include_router(suggestions_router)

    return app


def _load_configured_catalog(settings: Settings) -> InMemoryCatalog:
    if settings.catalog_path is None:
        logger.warning("No CATALOG_PATH configured, starting with an empty catalog")
        return InMemoryCatalog()
    try:
        return load_catalog(settings.catalog_path)
    except CatalogError as e:
        logger.warning("Could not load catalog, starting empty", error=str(e))
        return InMemoryCatalog()


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
