"""FastAPI application factory for the keyword enrichment engine."""

from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from seo_engine.api.middleware import request_id_middleware
from seo_engine.api.routes import keyword_jobs, products, system
from seo_engine.core.jobs import JobController
from seo_engine.core.logging import logger

ControllerFactory = Callable[[], JobController]


def create_app(
    controller: Optional[JobController] = None,
    controller_factory: Optional[ControllerFactory] = None,
) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability.

    Args:
        controller: Ready JobController (tests inject one built on fakes)
        controller_factory: Builds the controller at startup when none is given
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.job_controller is None and controller_factory is not None:
            app.state.job_controller = controller_factory()
            logger.info("job_controller_initialized")
        yield
        if app.state.job_controller is not None:
            await app.state.job_controller.shutdown()
            logger.info("job_controller_shutdown")

    app = FastAPI(
        title="seo-keyword-engine",
        description=(
            "Bulk SEO keyword enrichment for the product catalog. Generates "
            "regional search keywords with Gemini and writes them back to Supabase "
            "page by page, with pause/resume and live progress."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.job_controller = controller

    # Add middleware
    app.middleware("http")(request_id_middleware)

    # Register routes
    app.include_router(system.router)
    app.include_router(keyword_jobs.router)
    app.include_router(products.router)

    def custom_openapi():
        """Generate custom OpenAPI schema. Cached after first call."""
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="seo-keyword-engine API",
            version="1.0.0",
            description="Bulk SEO keyword generation jobs for the product catalog",
            routes=app.routes,
        )

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    setattr(app, "openapi", custom_openapi)

    return app
