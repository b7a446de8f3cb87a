"""Build-time helpers for very large catalogues.

Chunked data files, route batches, cache keys, static exports and the batch
processor all work on slices of the catalogue so a build of 100,000+ pages
never needs more than one chunk in flight at a time.
"""

import asyncio
import inspect
import json
import logging
import time
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Sequence, TypeVar, Union

from markdownify import markdownify

from app.config import (
    DEFAULT_CHUNK_CONFIG,
    DEFAULT_HUBS,
    DEFAULT_PRERENDER_CONFIG,
    DEFAULT_SITE,
    DEFAULT_SITEMAP_CONFIG,
    ChunkConfig,
    PrerenderConfig,
    SiteConfig,
    SitemapConfig,
)
from app.models.build import BuildStats, CacheEntry, DataManifest, ManifestChunk, ManifestTotals
from app.models.hub import HubRegistry
from app.models.page import PageCategory, PageDescriptor
from app.services.normalizer import make_frontmatter
from app.services.sanitizer import sanitize
from app.services.sitemap import generate_sitemaps
from app.services.templates import string_hash

logger = logging.getLogger(__name__)

T = TypeVar("T")

MANIFEST_VERSION = "1.0.0"
DEFAULT_DATA_PATH = "/data/seo"

# Cached build outputs older than this are rebuilt
DEFAULT_CACHE_MAX_AGE = 24 * 60 * 60

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

# Fields written to per-page JSON files
_EXPORT_FIELDS = {
    "id",
    "slug",
    "path",
    "category",
    "title",
    "description",
    "h1",
    "intro",
    "bullets",
    "cta",
    "faq",
    "how_to",
    "initial_inputs",
    "preview_route_key",
}
_SUMMARY_FIELDS = {"id", "slug", "path", "category", "title", "description"}


# ---------------------------------------------------------------------------
# Chunking
# ---------------------------------------------------------------------------

def _slices(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    if size <= 0:
        raise ValueError(f"Batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield items[start:start + size]


def chunk_pages(
    pages: Sequence[PageDescriptor],
    config: ChunkConfig = DEFAULT_CHUNK_CONFIG,
) -> Dict[str, List[PageDescriptor]]:
    """Split *pages* into chunks of at most ``config.max_pages_per_chunk``.

    With ``chunk_by_category`` the chunks are ``<category>-<n>`` and never
    mix categories; otherwise they are ``chunk-<n>`` in catalogue order.
    """
    size = config.max_pages_per_chunk
    chunks: Dict[str, List[PageDescriptor]] = {}

    if not config.chunk_by_category:
        for index, chunk in enumerate(_slices(pages, size)):
            chunks[f"chunk-{index}"] = list(chunk)
        return chunks

    by_category: Dict[PageCategory, List[PageDescriptor]] = {}
    for page in pages:
        by_category.setdefault(page.category, []).append(page)

    for category, category_pages in by_category.items():
        for index, chunk in enumerate(_slices(category_pages, size)):
            chunks[f"{category.value}-{index}"] = list(chunk)
    return chunks


def generate_data_manifest(
    chunks: Dict[str, List[PageDescriptor]],
    base_path: str = DEFAULT_DATA_PATH,
) -> DataManifest:
    """Describe *chunks* for lazy-loading consumers."""
    manifest_chunks: List[ManifestChunk] = []
    totals = ManifestTotals()

    for chunk_id, chunk in chunks.items():
        category = chunk[0].category if chunk else None
        manifest_chunks.append(
            ManifestChunk(
                id=chunk_id,
                path=f"{base_path}/{chunk_id}.json",
                count=len(chunk),
                category=category,
            )
        )
        totals.pages += len(chunk)
        for page in chunk:
            totals.by_category[page.category] += 1

    return DataManifest(
        version=MANIFEST_VERSION,
        generated=datetime.now(timezone.utc).isoformat(),
        chunks=manifest_chunks,
        totals=totals,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def get_all_prerender_routes(pages: Sequence[PageDescriptor]) -> List[str]:
    return [page.path for page in pages]


def generate_routes_batched(
    pages: Sequence[PageDescriptor],
    batch_size: int = 1000,
) -> Iterator[List[str]]:
    """Yield page paths *batch_size* at a time."""
    for batch in _slices(pages, batch_size):
        yield [page.path for page in batch]


def get_optimized_prerender_config(page_count: int) -> PrerenderConfig:
    """Prerender settings tuned to catalogue size."""
    if page_count < 1_000:
        return DEFAULT_PRERENDER_CONFIG.model_copy(update={"concurrency": 20})
    if page_count < 10_000:
        return DEFAULT_PRERENDER_CONFIG.model_copy(update={"concurrency": 10, "batch_delay_ms": 200})
    if page_count < 50_000:
        return DEFAULT_PRERENDER_CONFIG.model_copy(update={"concurrency": 5, "batch_delay_ms": 500})
    return PrerenderConfig(concurrency=3, timeout_ms=60_000, retries=3, batch_delay_ms=1_000)


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def hash_content(content: str) -> str:
    """Short cache key for *content*: base-36 of the absolute 32-bit hash."""
    return _base36(abs(string_hash(content)))


def is_cache_valid(
    entry: Optional[CacheEntry],
    current_hash: str,
    max_age: float = DEFAULT_CACHE_MAX_AGE,
    now: Optional[float] = None,
) -> bool:
    if entry is None or entry.hash != current_hash:
        return False
    now = time.time() if now is None else now
    return now - entry.timestamp <= max_age


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

def export_page_data(page: PageDescriptor) -> str:
    """JSON document for one page, as served to the client at runtime."""
    data = page.model_dump(mode="json", include=_EXPORT_FIELDS)
    return json.dumps(data, ensure_ascii=False, indent=2)


def export_all_pages(pages: Sequence[PageDescriptor]) -> str:
    """Single JSON listing of page summaries, for small catalogues."""
    data = [page.model_dump(mode="json", include=_SUMMARY_FIELDS) for page in pages]
    return json.dumps(data, ensure_ascii=False, indent=2)


def _page_html(page: PageDescriptor) -> str:
    parts = [f"<h1>{escape(page.h1)}</h1>"]
    if page.intro:
        parts.append(f"<p>{page.intro}</p>")
    if page.bullets:
        parts.append("<ul>" + "".join(f"<li>{bullet}</li>" for bullet in page.bullets) + "</ul>")
    if page.cta is not None:
        parts.append(f'<p><a href="{escape(page.cta.href)}">{escape(page.cta.label)}</a></p>')
    if page.how_to is not None and page.how_to.steps:
        parts.append(f"<h2>{escape(page.how_to.name)}</h2>")
        parts.append(
            "<ol>"
            + "".join(
                f"<li><strong>{escape(step.name)}</strong>: {step.text}</li>"
                for step in page.how_to.steps
            )
            + "</ol>"
        )
    if page.faq:
        parts.append("<h2>Frequently Asked Questions</h2>")
        for item in page.faq:
            parts.append(f"<h3>{escape(item.question)}</h3><p>{item.answer}</p>")
    return "".join(parts)


def export_page_markdown(page: PageDescriptor, site: SiteConfig = DEFAULT_SITE) -> str:
    """Markdown document (frontmatter plus body) for static hosting."""
    url = site.with_base_url(page.path)
    frontmatter = make_frontmatter(
        title=page.title,
        description=page.description,
        url=url,
        slug=page.slug,
        canonical=page.canonical_url,
    )
    soup = sanitize(_page_html(page))
    body = markdownify(str(soup.body or soup), heading_style="ATX").strip()
    return f"{frontmatter}\n\n{body}\n"


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

def calculate_build_stats(pages: Sequence[PageDescriptor]) -> BuildStats:
    by_category = {category: 0 for category in PageCategory}
    title_length = description_length = with_faq = with_how_to = 0

    for page in pages:
        by_category[page.category] += 1
        title_length += len(page.title)
        description_length += len(page.description)
        if page.faq:
            with_faq += 1
        if page.how_to is not None:
            with_how_to += 1

    count = len(pages)
    return BuildStats(
        total_pages=count,
        pages_by_category=by_category,
        average_title_length=round(title_length / count) if count else 0,
        average_description_length=round(description_length / count) if count else 0,
        pages_with_faq=with_faq,
        pages_with_how_to=with_how_to,
        # Roughly 100 pages prerendered per minute
        estimated_build_time_minutes=-(-count // 100),
    )


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------

def write_build_artifacts(
    pages: Sequence[PageDescriptor],
    out_dir: Union[str, Path],
    chunk_config: ChunkConfig = DEFAULT_CHUNK_CONFIG,
    sitemap_config: SitemapConfig = DEFAULT_SITEMAP_CONFIG,
    hubs: HubRegistry = DEFAULT_HUBS,
    base_path: str = DEFAULT_DATA_PATH,
) -> DataManifest:
    """Write chunk files, the manifest and the sitemaps under *out_dir*.

    Chunks land at ``<out_dir><base_path>/<chunk id>.json`` next to
    ``manifest.json``; sitemap files are written at the root of *out_dir*.
    """
    out_dir = Path(out_dir)
    data_dir = out_dir / base_path.strip("/")
    data_dir.mkdir(parents=True, exist_ok=True)

    chunks = chunk_pages(pages, chunk_config)
    for chunk_id, chunk in chunks.items():
        payload = [page.model_dump(mode="json", exclude_none=True) for page in chunk]
        (data_dir / f"{chunk_id}.json").write_text(
            json.dumps(payload, ensure_ascii=False), encoding="utf-8"
        )

    manifest = generate_data_manifest(chunks, base_path)
    (data_dir / "manifest.json").write_text(manifest.model_dump_json(indent=2), encoding="utf-8")

    sitemaps = generate_sitemaps(pages, sitemap_config, hubs)
    for filename, xml in sitemaps.items():
        (out_dir / filename).write_text(xml, encoding="utf-8")

    logger.info(
        "Wrote %d pages in %d chunks and %d sitemap files to %s",
        len(pages),
        len(chunks),
        len(sitemaps),
        out_dir,
    )
    return manifest


# ---------------------------------------------------------------------------
# Batch processing
# ---------------------------------------------------------------------------

Processor = Callable[[PageDescriptor, int], Union[T, Awaitable[T]]]
BatchCallback = Callable[[int, List[Any]], None]


async def process_pages_in_batches(
    pages: Sequence[PageDescriptor],
    processor: Processor,
    batch_size: int = 1000,
    on_batch_complete: Optional[BatchCallback] = None,
) -> List[Any]:
    """Run *processor* over every page, one batch at a time.

    *processor* receives the page and its catalogue index and may be a plain
    function or a coroutine function.  Each batch is awaited in full before
    the next one starts; results keep catalogue order.  The callback fires
    with ``(batch_index, batch_results)`` after each batch.

    Raises:
        ValueError: if *batch_size* is not positive.
        Exception: the first error a processor raises.  The rest of that
            batch is cancelled and later batches never start.
    """

    async def run(page: PageDescriptor, index: int) -> Any:
        result = processor(page, index)
        if inspect.isawaitable(result):
            result = await result
        return result

    results: List[Any] = []
    for batch_index, batch in enumerate(_slices(pages, batch_size)):
        offset = batch_index * batch_size
        tasks = [asyncio.ensure_future(run(page, offset + i)) for i, page in enumerate(batch)]
        try:
            batch_results = list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        results.extend(batch_results)

        if on_batch_complete is not None:
            on_batch_complete(batch_index, batch_results)
        logger.info("Processed batch %d (%d pages)", batch_index, len(batch_results))

    return results


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def create_page_lookup(pages: Sequence[PageDescriptor]) -> Dict[str, PageDescriptor]:
    return {page.id: page for page in pages}


def create_routing_lookups(pages: Sequence[PageDescriptor]) -> Dict[str, Dict[str, PageDescriptor]]:
    return {
        "by_slug": {page.slug: page for page in pages},
        "by_path": {page.path: page for page in pages},
    }
