"""Main entry point for the keyword enrichment engine.

Wires the Supabase product repository and the Gemini keyword client into
one JobController and serves it over FastAPI.

Usage:
    Development: uvicorn seo_engine.main:app --reload --port 8000
    Production: uvicorn seo_engine.main:app --host 0.0.0.0 --port 8000
"""

from seo_engine.api import create_app
from seo_engine.config import config
from seo_engine.core.batch.scheduler import SchedulerConfig
from seo_engine.core.jobs import JobController
from seo_engine.core.logging import logger
from seo_engine.infrastructure.database import ProductRepository
from seo_engine.integrations.gemini import GeminiKeywordClient


def build_controller() -> JobController:
    """Build the process-wide controller from environment configuration."""
    if not config.is_configured():
        logger.warning("configuration_incomplete", missing=config.get_missing_config())

    repository = ProductRepository()
    client = GeminiKeywordClient(lookup=repository.get)
    return JobController(
        source=repository,
        sink=repository,
        client=client,
        scheduler_config=SchedulerConfig.from_env(),
    )


# Controller is built at startup so importing this module needs no credentials.
# A single worker process is required: job state lives in memory.
app = create_app(controller_factory=build_controller)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "seo_engine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
