import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import DEFAULT_HUBS, DEFAULT_SITE
from app.models.metadata import ArticleData, MetadataOptions
from app.models.page import PageCategory, PageDescriptor
from app.models.response import PageListResponse, PageSeoResponse, PageSummary
from app.services.catalogue import get_default_catalogue
from app.services.discovery import build_discovery_tags, to_head_props
from app.services.linking import generate_linking_context
from app.services.races import get_bundled_races, to_race_event_data
from app.services.structured_data import build_metadata_graph

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

# Categories whose pages front an interactive tool
_TOOL_CATEGORIES = {PageCategory.PACE, PageCategory.FUEL, PageCategory.ELEVATION}


def summarize(page: PageDescriptor) -> PageSummary:
    return PageSummary(id=page.id, path=page.path, category=page.category, title=page.title)


@router.get("/pages", response_model=PageListResponse, summary="List catalogue pages")
@limiter.limit("30/minute")
async def list_pages(
    request: Request,
    category: Optional[PageCategory] = Query(default=None, description="Only list pages in this category."),
) -> PageListResponse:
    catalogue = get_default_catalogue()
    pages = catalogue.in_category(category) if category is not None else list(catalogue)
    return PageListResponse(total=len(pages), pages=[summarize(p) for p in pages])


@router.get(
    "/pages/{page_id}/seo",
    response_model=PageSeoResponse,
    summary="Discovery tags, structured data and links for one page",
)
@limiter.limit("30/minute")
async def page_seo(request: Request, page_id: str) -> PageSeoResponse:
    """Everything a renderer needs for the ``<head>`` and navigation of *page_id*."""
    catalogue = get_default_catalogue()
    page = catalogue.get(page_id)
    if page is None:
        raise HTTPException(status_code=404, detail=f"Page '{page_id}' not found.")

    tags = build_discovery_tags(page)
    return PageSeoResponse(
        page_id=page.id,
        discovery=tags,
        head=to_head_props(tags),
        structured_data=build_metadata_graph(page, _metadata_options(page)),
        linking=generate_linking_context(page, catalogue.pages, DEFAULT_HUBS, DEFAULT_SITE),
    )


def _metadata_options(page: PageDescriptor) -> MetadataOptions:
    options = MetadataOptions(include_software_application=page.category in _TOOL_CATEGORIES)

    if page.category == PageCategory.RACE and page.preview_route_key:
        race = get_bundled_races().get(page.preview_route_key)
        if race is not None:
            options.race_data = to_race_event_data(race)
        else:
            logger.warning("No race record for route key %s", page.preview_route_key)

    if page.category == PageCategory.BLOG and page.date_published:
        options.article_data = ArticleData(
            headline=page.h1,
            description=page.description,
            url=page.path,
            date_published=page.date_published,
            date_modified=page.date_modified,
            author_name=DEFAULT_SITE.site_name,
        )
    return options
