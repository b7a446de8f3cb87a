"""schema.org JSON-LD blocks for a page descriptor.

Blocks are plain dicts that serialise directly to JSON-LD.  Generation never
raises: optional context that is missing simply leaves its block out.
"""

from typing import Any, Dict, List, Optional

from app.config import DEFAULT_HUBS, DEFAULT_SITE, SiteConfig
from app.models.hub import HubRegistry
from app.models.metadata import ArticleData, MetadataOptions, RaceEventData, SchemaBlock
from app.models.page import BreadcrumbItem, FaqItem, HowTo, PageCategory, PageDescriptor
from app.models.validation import SchemaValidationResult
from app.services.linking import generate_breadcrumbs

SCHEMA_CONTEXT = "https://schema.org"

# Tool named in a HowTo block when the block does not name one itself
HOW_TO_TOOL_NAMES: Dict[PageCategory, str] = {
    PageCategory.PACE: "TrainPace Pace Calculator",
    PageCategory.FUEL: "TrainPace Fuel Planner",
    PageCategory.ELEVATION: "TrainPace Elevation Finder",
    PageCategory.RACE: "TrainPace",
    PageCategory.BLOG: "TrainPace",
}

SOFTWARE_LISTINGS: Dict[PageCategory, Dict[str, str]] = {
    PageCategory.PACE: {
        "name": "TrainPace Running Pace Calculator",
        "description": "Free VDOT running pace calculator. Convert race times to training paces.",
        "path": "/calculator",
    },
    PageCategory.FUEL: {
        "name": "TrainPace Marathon Fuel Planner",
        "description": "Calculate gels needed and build a fueling schedule for marathons.",
        "path": "/fuel",
    },
    PageCategory.ELEVATION: {
        "name": "TrainPace GPX Elevation Analyzer",
        "description": "Upload GPX files to analyze elevation gain, grades, and route difficulty.",
        "path": "/elevationfinder",
    },
    PageCategory.RACE: {
        "name": "TrainPace Race Prep Tools",
        "description": "Plan pacing, fueling, and course strategy for any running race.",
        "path": "/race",
    },
    PageCategory.BLOG: {
        "name": "TrainPace Running Blog",
        "description": "Expert running tips, training guides, and race strategy articles.",
        "path": "/blog",
    },
}


def _absolute(url: str, site: SiteConfig) -> str:
    return url if url.startswith("http") else site.with_base_url(url)


# ---------------------------------------------------------------------------
# Site-wide blocks
# ---------------------------------------------------------------------------

def generate_organization_schema(site: SiteConfig = DEFAULT_SITE) -> SchemaBlock:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": site.site_name,
        "url": site.base_url,
        "logo": site.logo_url,
        "description": site.site_description,
        "sameAs": [],
    }


def generate_website_schema(site: SiteConfig = DEFAULT_SITE) -> SchemaBlock:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebSite",
        "name": site.site_name,
        "url": site.base_url,
        "description": site.site_description,
        "potentialAction": {
            "@type": "SearchAction",
            "target": {
                "@type": "EntryPoint",
                "urlTemplate": f"{site.base_url}/calculator?q={{search_term_string}}",
            },
            "query-input": "required name=search_term_string",
        },
    }


# ---------------------------------------------------------------------------
# Page-level blocks
# ---------------------------------------------------------------------------

def generate_web_page_schema(page: PageDescriptor, site: SiteConfig = DEFAULT_SITE) -> SchemaBlock:
    block: SchemaBlock = {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebPage",
        "name": page.title.replace(site.brand_suffix, ""),
        "description": page.description,
        "url": page.canonical_url or site.with_base_url(page.path),
        "isPartOf": {"@type": "WebSite", "name": site.site_name, "url": site.base_url},
    }
    if page.date_published:
        block["datePublished"] = page.date_published
    if page.date_modified:
        block["dateModified"] = page.date_modified
    return block


def generate_breadcrumb_schema(items: List[BreadcrumbItem], site: SiteConfig = DEFAULT_SITE) -> SchemaBlock:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": position,
                "name": item.name,
                "item": _absolute(item.url, site),
            }
            for position, item in enumerate(items, start=1)
        ],
    }


def generate_faq_schema(faq: List[FaqItem]) -> SchemaBlock:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": item.question,
                "acceptedAnswer": {"@type": "Answer", "text": item.answer},
            }
            for item in faq
        ],
    }


def generate_how_to_schema(how_to: HowTo, tool_name: str = "TrainPace") -> SchemaBlock:
    steps = []
    for position, step in enumerate(how_to.steps, start=1):
        entry: Dict[str, Any] = {
            "@type": "HowToStep",
            "position": position,
            "name": step.name,
            "text": step.text,
        }
        if step.url:
            entry["url"] = step.url
        if step.image:
            entry["image"] = step.image
        steps.append(entry)

    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "HowTo",
        "name": how_to.name,
        "description": how_to.description,
        "totalTime": how_to.total_time or "PT2M",
        "tool": {"@type": "HowToTool", "name": how_to.tool or tool_name},
        "step": steps,
    }


def generate_sports_event_schema(race: RaceEventData) -> SchemaBlock:
    block: SchemaBlock = {
        "@context": SCHEMA_CONTEXT,
        "@type": "SportsEvent",
        "name": race.name,
        "sport": "Running",
        "location": {
            "@type": "Place",
            "name": f"{race.city}, {race.country}",
            "address": {
                "@type": "PostalAddress",
                "addressLocality": race.city,
                "addressCountry": race.country,
            },
        },
        "eventAttendanceMode": "https://schema.org/OfflineEventAttendanceMode",
    }
    if race.description:
        block["description"] = race.description
    if race.website:
        block["url"] = race.website
    if race.race_date:
        block["startDate"] = race.race_date
    if race.organizer:
        block["organizer"] = {"@type": "Organization", "name": race.organizer}
        if race.website:
            block["organizer"]["url"] = race.website
    return block


def generate_article_schema(
    article: ArticleData,
    schema_type: str = "BlogPosting",
    site: SiteConfig = DEFAULT_SITE,
) -> SchemaBlock:
    url = _absolute(article.url, site)
    author: Dict[str, Any] = {"@type": "Person", "name": article.author_name}
    if article.author_url:
        author["url"] = article.author_url

    block: SchemaBlock = {
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type,
        "headline": article.headline,
        "url": url,
        "datePublished": article.date_published,
        "dateModified": article.date_modified or article.date_published,
        "author": author,
        "publisher": {
            "@type": "Organization",
            "name": site.site_name,
            "url": site.base_url,
            "logo": {"@type": "ImageObject", "url": site.logo_url},
        },
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
    }
    if article.description:
        block["description"] = article.description
    if article.image:
        block["image"] = article.image
    return block


def generate_software_application_schema(
    category: PageCategory,
    site: SiteConfig = DEFAULT_SITE,
) -> SchemaBlock:
    listing = SOFTWARE_LISTINGS[category]
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "WebApplication",
        "name": listing["name"],
        "description": listing["description"],
        "url": site.with_base_url(listing["path"]),
        "applicationCategory": "HealthApplication",
        "operatingSystem": "Any",
        "browserRequirements": "Requires JavaScript",
        "offers": {"@type": "Offer", "price": "0", "priceCurrency": "USD"},
    }


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------

def build_metadata_graph(
    page: PageDescriptor,
    options: Optional[MetadataOptions] = None,
    hubs: HubRegistry = DEFAULT_HUBS,
    site: SiteConfig = DEFAULT_SITE,
) -> Dict[str, Any]:
    """Compose every block that applies to *page* into one ``@graph``.

    Breadcrumbs and the page summary are always present.  FAQ and how-to
    blocks follow the descriptor; event, article, organization, website and
    software blocks follow *options*.
    """
    options = options or MetadataOptions()
    blocks: List[SchemaBlock] = []

    if options.include_organization:
        blocks.append(generate_organization_schema(site))
    if options.include_website:
        blocks.append(generate_website_schema(site))

    blocks.append(generate_breadcrumb_schema(generate_breadcrumbs(page, hubs, site), site))
    blocks.append(generate_web_page_schema(page, site))

    if page.faq:
        blocks.append(generate_faq_schema(page.faq))
    if page.how_to is not None:
        blocks.append(generate_how_to_schema(page.how_to, HOW_TO_TOOL_NAMES[page.category]))
    if options.race_data is not None:
        blocks.append(generate_sports_event_schema(options.race_data))
    if options.article_data is not None:
        blocks.append(generate_article_schema(options.article_data, site=site))
    if options.include_software_application:
        blocks.append(generate_software_application_schema(page.category, site))

    return {"@context": SCHEMA_CONTEXT, "@graph": blocks}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _non_empty_list(block: SchemaBlock, key: str) -> bool:
    value = block.get(key)
    return isinstance(value, list) and len(value) > 0


def validate_schema(block: SchemaBlock) -> SchemaValidationResult:
    errors: List[str] = []
    warnings: List[str] = []

    if block.get("@context") != SCHEMA_CONTEXT:
        errors.append("Missing or invalid @context property")

    schema_type = block.get("@type")
    if not schema_type:
        errors.append("Missing @type property")
    elif schema_type == "FAQPage" and not _non_empty_list(block, "mainEntity"):
        errors.append("FAQPage must have at least one FAQ item")
    elif schema_type == "HowTo" and not _non_empty_list(block, "step"):
        errors.append("HowTo must have at least one step")
    elif schema_type == "BreadcrumbList" and not isinstance(block.get("itemListElement"), list):
        errors.append("BreadcrumbList must have itemListElement array")

    return SchemaValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_schema_graph(graph: Dict[str, Any]) -> SchemaValidationResult:
    blocks = graph.get("@graph")
    if not isinstance(blocks, list):
        return SchemaValidationResult(
            is_valid=False,
            errors=["Schema graph must have @graph array"],
            warnings=[],
        )

    errors: List[str] = []
    warnings: List[str] = []
    for block in blocks:
        result = validate_schema(block)
        errors.extend(result.errors)
        warnings.extend(result.warnings)

    return SchemaValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
