"""Product routes - single product keyword generation."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from seo_engine.api.dependencies import get_job_controller
from seo_engine.core.errors import PermanentRecordError
from seo_engine.core.jobs import JobController
from seo_engine.core.logging import logger
from seo_engine.infrastructure.auth import require_admin
from seo_engine.models import GenerateKeywordsRequest

router = APIRouter(
    prefix="/products", tags=["Products"], dependencies=[Depends(require_admin)]
)


@router.post("/generate-keywords")
async def generate_keywords(
    request: GenerateKeywordsRequest,
    controller: JobController = Depends(get_job_controller),
):
    """Generate SEO keywords for one product without saving them.

    Shares the job's in-flight cache, so a request for a SKU the bulk job is
    currently processing reuses that call.
    """
    try:
        keywords = await controller.generate_for_key(request.sku)
    except PermanentRecordError:
        return JSONResponse(
            status_code=404,
            content={"success": False, "error": f"Product '{request.sku}' not found"},
        )
    except Exception as e:
        logger.error("generate_keywords_failed", sku=request.sku, error=str(e))
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": f"Keyword generation failed: {str(e)}"},
        )

    return JSONResponse(
        content={"success": True, "data": {"sku": request.sku, "keywords": keywords}}
    )
