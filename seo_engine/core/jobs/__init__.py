"""Job control for the keyword enrichment engine."""

from seo_engine.core.jobs.controller import JobController

__all__ = ["JobController"]
