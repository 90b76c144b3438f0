"""Product keyword Pydantic models."""

from pydantic import BaseModel, Field


class GenerateKeywordsRequest(BaseModel):
    """Request for POST /products/generate-keywords endpoint."""
    sku: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Product SKU"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"sku": "WP-LAV-10KG-INV"}
            ]
        }
    }
