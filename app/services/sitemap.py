"""Sitemap generation, with automatic splitting into a sitemap index."""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from xml.etree import ElementTree
from xml.sax.saxutils import escape

from app.config import DEFAULT_HUBS, DEFAULT_SITEMAP_CONFIG, SitemapConfig
from app.models.build import SitemapUrl
from app.models.hub import HubRegistry
from app.models.page import PageDescriptor
from app.services.linking import calculate_sitemap_priority

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
SITEMAP_FILENAME = "sitemap.xml"

# saxutils.escape covers & < > only
_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: str) -> str:
    return escape(value, _QUOTE_ENTITIES)


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def generate_sitemap_urls(
    pages: Sequence[PageDescriptor],
    config: SitemapConfig = DEFAULT_SITEMAP_CONFIG,
    hubs: HubRegistry = DEFAULT_HUBS,
    build_date: Optional[str] = None,
) -> List[SitemapUrl]:
    """One sitemap entry per page.

    ``lastmod`` falls back from the modified date to the published date to
    *build_date* (today when omitted).
    """
    build_date = build_date or _today()
    return [
        SitemapUrl(
            loc=f"{config.base_url}{page.path}",
            lastmod=page.date_modified or page.date_published or build_date,
            changefreq=page.changefreq or config.default_changefreq,
            priority=calculate_sitemap_priority(page, hubs),
        )
        for page in pages
    ]


def _url_entry(url: SitemapUrl) -> str:
    lines = ["  <url>", f"    <loc>{escape_xml(url.loc)}</loc>"]
    if url.lastmod:
        lines.append(f"    <lastmod>{escape_xml(url.lastmod)}</lastmod>")
    if url.changefreq:
        lines.append(f"    <changefreq>{url.changefreq.value}</changefreq>")
    if url.priority is not None:
        lines.append(f"    <priority>{url.priority:.1f}</priority>")
    lines.append("  </url>")
    return "\n".join(lines)


def generate_sitemap_xml(urls: Sequence[SitemapUrl]) -> str:
    entries = "\n".join(_url_entry(url) for url in urls)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n'
        f"{entries}\n"
        "</urlset>"
    )


def generate_sitemap_index_xml(
    sitemap_paths: Sequence[str],
    base_url: str = DEFAULT_SITEMAP_CONFIG.base_url,
    build_date: Optional[str] = None,
) -> str:
    build_date = build_date or _today()
    entries = "\n".join(
        "  <sitemap>\n"
        f"    <loc>{escape_xml(base_url + path)}</loc>\n"
        f"    <lastmod>{build_date}</lastmod>\n"
        "  </sitemap>"
        for path in sitemap_paths
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<sitemapindex xmlns="{SITEMAP_NAMESPACE}">\n'
        f"{entries}\n"
        "</sitemapindex>"
    )


def generate_sitemaps(
    pages: Sequence[PageDescriptor],
    config: SitemapConfig = DEFAULT_SITEMAP_CONFIG,
    hubs: HubRegistry = DEFAULT_HUBS,
    build_date: Optional[str] = None,
) -> Dict[str, str]:
    """Render every sitemap file for *pages*, keyed by file name.

    Catalogues that fit into ``config.max_urls_per_sitemap`` produce a single
    ``sitemap.xml``.  Larger ones are split into ``sitemap-1.xml``,
    ``sitemap-2.xml``, ... and ``sitemap.xml`` becomes the index.
    """
    urls = generate_sitemap_urls(pages, config, hubs, build_date)
    limit = config.max_urls_per_sitemap

    if len(urls) <= limit:
        return {SITEMAP_FILENAME: generate_sitemap_xml(urls)}

    sitemaps: Dict[str, str] = {}
    paths: List[str] = []
    for number, start in enumerate(range(0, len(urls), limit), start=1):
        filename = f"sitemap-{number}.xml"
        sitemaps[filename] = generate_sitemap_xml(urls[start:start + limit])
        paths.append(f"/{filename}")

    sitemaps[SITEMAP_FILENAME] = generate_sitemap_index_xml(paths, config.base_url, build_date)
    logger.info("Split %d sitemap URLs into %d files", len(urls), len(paths))
    return sitemaps


def parse_sitemap_locs(xml_text: str) -> List[str]:
    """Extract all ``<loc>`` values from a sitemap or sitemap-index XML."""
    urls: List[str] = []
    try:
        root = ElementTree.fromstring(xml_text)
        ns = root.tag.split("}")[0] + "}" if root.tag.startswith("{") else ""
        for elem in root.iter(f"{ns}loc"):
            if elem.text:
                urls.append(elem.text.strip())
    except ElementTree.ParseError as exc:
        logger.warning("Failed to parse sitemap XML: %s", exc)
    return urls
