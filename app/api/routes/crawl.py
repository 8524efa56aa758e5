import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from app.core.exceptions import CrawlError
from app.schemas.crawl import CrawlRequest, CrawlResponse
from app.services import CrawlService

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["crawl"]
)

@router.post(
    "/crawl",
    response_model=CrawlResponse,
    response_model_exclude_none=True,
    responses={status.HTTP_400_BAD_REQUEST: {"model": CrawlResponse}},
)
async def crawl_website(request: CrawlRequest):
    """
    Crawl a website (homepage plus a few key pages) and return its AI readiness report
    """
    try:
        result = await CrawlService.crawl_website(request.url, request.keywords)
    except CrawlError as e:
        logger.info("Crawl request rejected: %s", e.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": e.message},
        )

    return CrawlResponse(success=True, data=result)
