from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException

from pagesmith.llm import PageGenerator, get_client, load_settings
from pagesmith.models import GenerateRequest, GenerateResult
from pagesmith.logger import get_logger

logger = get_logger(__name__)


router = APIRouter()


@lru_cache(maxsize=1)
def get_page_generator() -> PageGenerator:
    """Resolve configuration and the model client once per process"""
    return get_client(load_settings())


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "Page generation API is running"}


@router.post("/api/generate", response_model=GenerateResult)
async def generate_page(
    request: GenerateRequest,
    generator: PageGenerator = Depends(get_page_generator),
):
    """Generate updated page files, or a variant directive, for an edit request"""
    try:
        logger.info(
            f"Generating page for session: {request.session_id or 'anonymous'} "
            f"({len(request.attachments or [])} attachments)"
        )
        result = await generator.generate_page(request)
        if result.variant_request:
            logger.info(
                f"Session {request.session_id}: model requested "
                f"{result.variant_request.count} variants"
            )
        return result

    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Error generating page for session {request.session_id}: {str(e)}",
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
