"""Keyword job Pydantic models.

These models handle starting the bulk keyword enrichment job.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from seo_engine.config import Config
from seo_engine.core.batch.models import JobOptions


class KeywordJobStartRequest(BaseModel):
    """Request for POST /jobs/keywords/start endpoint - start bulk keyword generation."""
    batch_size: int = Field(
        default_factory=Config.keyword_batch_size,
        ge=1,
        le=1000,
        description="Products fetched and written per page"
    )
    concurrency_level: int = Field(
        default_factory=Config.keyword_concurrency,
        ge=1,
        le=50,
        description="Maximum simultaneous AI calls"
    )
    prioritized_categories: List[str] = Field(
        default_factory=list,
        description="Categories processed in full before all other products"
    )

    @field_validator("prioritized_categories")
    @classmethod
    def strip_categories(cls, value: List[str]) -> List[str]:
        seen = []
        for category in value:
            category = category.strip()
            if category and category not in seen:
                seen.append(category)
        return seen

    def to_options(self) -> JobOptions:
        return JobOptions(
            batch_size=self.batch_size,
            concurrency_level=self.concurrency_level,
            prioritized_categories=self.prioritized_categories,
        )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "batch_size": 50,
                    "concurrency_level": 5,
                    "prioritized_categories": ["LAV", "NEV"]
                }
            ]
        }
    }
