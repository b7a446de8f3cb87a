"""Build artifacts for the bundled catalogue: manifest, stats, sitemaps, export."""

import io
import logging
import zipfile

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response, StreamingResponse

from app.config import ChunkConfig
from app.models.build import BuildStats, DataManifest
from app.routers.pages import limiter
from app.services.build import (
    calculate_build_stats,
    chunk_pages,
    export_all_pages,
    export_page_data,
    export_page_markdown,
    generate_data_manifest,
)
from app.services.catalogue import get_default_catalogue
from app.services.sitemap import generate_sitemaps

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/build")


@router.get("/manifest", response_model=DataManifest, summary="Chunk manifest for the catalogue")
@limiter.limit("10/minute")
async def manifest(
    request: Request,
    max_pages_per_chunk: int = Query(default=5000, ge=1),
    chunk_by_category: bool = Query(default=True),
) -> DataManifest:
    config = ChunkConfig(max_pages_per_chunk=max_pages_per_chunk, chunk_by_category=chunk_by_category)
    return generate_data_manifest(chunk_pages(get_default_catalogue().pages, config))


@router.get("/stats", response_model=BuildStats, summary="Catalogue build statistics")
@limiter.limit("10/minute")
async def stats(request: Request) -> BuildStats:
    return calculate_build_stats(get_default_catalogue().pages)


@router.get("/sitemaps/{filename}", summary="One rendered sitemap file")
@limiter.limit("10/minute")
async def sitemap_file(request: Request, filename: str) -> Response:
    sitemaps = generate_sitemaps(get_default_catalogue().pages)
    if filename not in sitemaps:
        raise HTTPException(status_code=404, detail=f"Sitemap '{filename}' not found.")
    return Response(content=sitemaps[filename], media_type="application/xml")


@router.get("/export.zip", summary="Download the catalogue as static files")
@limiter.limit("2/minute")
async def export_zip(request: Request) -> StreamingResponse:
    """Return a ZIP archive of the catalogue for static hosting.

    The archive holds:
    - ``index.json`` – summary listing of all pages.
    - ``data/<category>/<slug>.json`` – one JSON document per page.
    - ``content/<category>/<slug>.md`` – one Markdown file per page.
    """
    pages = get_default_catalogue().pages

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("index.json", export_all_pages(pages))
        for page in pages:
            name = f"{page.category.value}/{page.slug}"
            zf.writestr(f"data/{name}.json", export_page_data(page))
            zf.writestr(f"content/{name}.md", export_page_markdown(page))

    logger.info("Exported %d pages", len(pages))
    buffer.seek(0)
    return StreamingResponse(
        buffer,
        media_type="application/zip",
        headers={"Content-Disposition": 'attachment; filename="trainpace-pages.zip"'},
    )
