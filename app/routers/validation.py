import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from app.models.request import ValidateRequest
from app.models.response import ValidateResponse
from app.routers.pages import limiter
from app.services.catalogue import get_default_catalogue
from app.services.validator import (
    format_for_ci,
    generate_quality_report,
    get_ci_exit_code,
    run_pre_publish_checks,
    validate_all_pages,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/validate",
    response_model=ValidateResponse,
    summary="Validate a page catalogue",
    description=(
        "Scores every page, checks the catalogue for duplicate content, keyword "
        "cannibalization and broken internal links, and runs the pre-publish gate.\n\n"
        "Send no body to validate the bundled catalogue."
    ),
)
@limiter.limit("5/minute")
async def validate(request: Request, body: Optional[ValidateRequest] = None) -> ValidateResponse:
    if body is not None and body.pages is not None:
        pages = body.pages
    else:
        pages = list(get_default_catalogue().pages)
    logger.info("Validation request received for %d pages", len(pages))

    # Catalogue-wide checks are quadratic; keep them off the event loop
    result = await run_in_threadpool(validate_all_pages, pages)
    pre_publish = await run_in_threadpool(run_pre_publish_checks, pages)

    return ValidateResponse(
        result=result,
        report=generate_quality_report(result),
        pre_publish=pre_publish,
        exit_code=get_ci_exit_code(result),
        ci_report=format_for_ci(result),
    )
