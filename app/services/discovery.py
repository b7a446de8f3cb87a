"""Title, description, canonical and social-preview tags for a page."""

from typing import Dict, List, Optional

from app.config import DEFAULT_SITE, SiteConfig
from app.models.metadata import (
    ArticleMeta,
    DiscoveryTags,
    HeadProps,
    LinkEntry,
    MetaEntry,
    MetaValidationResult,
    OgType,
    OpenGraphTags,
    TagElement,
    TwitterTags,
)
from app.models.page import PageCategory, PageDescriptor

MAX_TITLE_LENGTH = 60
MAX_DESCRIPTION_LENGTH = 160

CATEGORY_LANDING_META: Dict[PageCategory, Dict[str, str]] = {
    PageCategory.PACE: {
        "title": "Running Pace Calculator - VDOT Training Zones | TrainPace",
        "description": "Free VDOT running pace calculator. Enter any race time to get Easy, Tempo, "
        "Threshold, and Interval training zones. Includes race predictor and pace charts.",
        "path": "/calculator",
    },
    PageCategory.FUEL: {
        "title": "Marathon Fuel Calculator - Gels & Carbs/Hour | TrainPace",
        "description": "Calculate how many gels you need for your marathon or half marathon. Get "
        "a personalized fueling schedule with carb targets and timing recommendations.",
        "path": "/fuel",
    },
    PageCategory.ELEVATION: {
        "title": "GPX Elevation Profile Viewer - Free Route Analysis | TrainPace",
        "description": "Free GPX elevation profile viewer. Upload any route to see elevation gain, "
        "grade percentages, and climb difficulty on an interactive map.",
        "path": "/elevationfinder",
    },
    PageCategory.RACE: {
        "title": "Race Prep Pages - Pacing, Fueling & Strategy | TrainPace",
        "description": "Race prep pages for popular running events. Plan pacing, fueling, and course "
        "strategy with free calculators and GPX elevation analysis.",
        "path": "/race",
    },
    PageCategory.BLOG: {
        "title": "Running Tips & Training Guides | TrainPace Blog",
        "description": "Expert running tips, training guides, and race strategy articles. Learn about "
        "pace zones, marathon fueling, and elevation analysis.",
        "path": "/blog",
    },
}

HOMEPAGE_TITLE = "TrainPace - Free Running Pace Calculator & Race Day Tools"
HOMEPAGE_DESCRIPTION = (
    "Free running calculator for training paces, race fueling, and GPX elevation analysis. "
    "Get VDOT-based pace zones, plan how many gels to carry, and preview marathon course profiles."
)


def optimize_title(title: str, max_length: int = MAX_TITLE_LENGTH, site: SiteConfig = DEFAULT_SITE) -> str:
    """Fit *title* into *max_length* characters.

    The brand suffix goes first; after that the title is cut at a word
    boundary (if one falls past the 20th character) and ``...`` appended.
    """
    if len(title) <= max_length:
        return title

    if title.endswith(site.brand_suffix):
        title = title[: -len(site.brand_suffix)]
        if len(title) <= max_length:
            return title

    truncated = title[: max_length - 3]
    last_space = truncated.rfind(" ")
    if last_space > 20:
        return truncated[:last_space] + "..."
    return truncated + "..."


def optimize_description(description: str, max_length: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Fit *description* into *max_length* characters.

    Prefer ending on a full sentence past 60% of the limit, then on a word
    boundary past the 50th character with ``...`` appended.
    """
    if len(description) <= max_length:
        return description

    truncated = description[: max_length - 3]
    last_period = truncated.rfind(".")
    if last_period > max_length * 0.6:
        return truncated[: last_period + 1]

    last_space = truncated.rfind(" ")
    if last_space > 50:
        return truncated[:last_space] + "..."
    return truncated + "..."


def _tags(
    full_title: str,
    description: str,
    url: str,
    site: SiteConfig,
    robots: Optional[str] = None,
    image: Optional[str] = None,
    og_type: OgType = "website",
    article_meta: Optional[ArticleMeta] = None,
) -> DiscoveryTags:
    title = optimize_title(full_title, site=site)
    description = optimize_description(description)
    image = image or site.default_og_image

    open_graph = OpenGraphTags(
        title=title,
        description=description,
        url=url,
        type=og_type,
        image=image,
        image_alt=site.default_og_image_alt,
        site_name=site.site_name,
        locale=site.locale,
    )
    if article_meta is not None:
        open_graph = open_graph.model_copy(
            update={
                "published_time": article_meta.published_time,
                "modified_time": article_meta.modified_time,
                "author": article_meta.author,
                "section": article_meta.section,
                "tags": list(article_meta.tags),
            }
        )

    return DiscoveryTags(
        title=full_title,
        description=description,
        canonical=url,
        robots=robots,
        open_graph=open_graph,
        twitter=TwitterTags(
            site=site.twitter_site,
            title=title,
            description=description,
            image=image,
            image_alt=site.default_og_image_alt,
        ),
    )


def build_discovery_tags(
    page: PageDescriptor,
    og_image: Optional[str] = None,
    og_type: OgType = "website",
    article_meta: Optional[ArticleMeta] = None,
    site: SiteConfig = DEFAULT_SITE,
) -> DiscoveryTags:
    """Discovery tags for *page*.

    The ``<title>`` keeps the full title; social previews get the
    optimized one.
    """
    return _tags(
        page.title,
        page.description,
        page.canonical_url or site.with_base_url(page.path),
        site,
        robots="noindex, nofollow" if page.no_index else None,
        image=og_image,
        og_type=og_type,
        article_meta=article_meta,
    )


def build_category_tags(category: PageCategory, site: SiteConfig = DEFAULT_SITE) -> DiscoveryTags:
    meta = CATEGORY_LANDING_META[category]
    return _tags(meta["title"], meta["description"], site.with_base_url(meta["path"]), site)


def build_homepage_tags(site: SiteConfig = DEFAULT_SITE) -> DiscoveryTags:
    return _tags(HOMEPAGE_TITLE, HOMEPAGE_DESCRIPTION, site.base_url, site)


def to_head_props(tags: DiscoveryTags) -> HeadProps:
    og = tags.open_graph
    tw = tags.twitter
    meta = [
        MetaEntry(name="description", content=tags.description),
        MetaEntry(property="og:title", content=og.title),
        MetaEntry(property="og:description", content=og.description),
        MetaEntry(property="og:url", content=og.url),
        MetaEntry(property="og:type", content=og.type),
        MetaEntry(property="og:image", content=og.image),
        MetaEntry(property="og:site_name", content=og.site_name),
        MetaEntry(name="twitter:card", content=tw.card),
        MetaEntry(name="twitter:title", content=tw.title),
        MetaEntry(name="twitter:description", content=tw.description),
        MetaEntry(name="twitter:image", content=tw.image),
    ]

    if tags.robots:
        meta.append(MetaEntry(name="robots", content=tags.robots))
    if og.image_alt:
        meta.append(MetaEntry(property="og:image:alt", content=og.image_alt))
    if og.locale:
        meta.append(MetaEntry(property="og:locale", content=og.locale))
    if tw.site:
        meta.append(MetaEntry(name="twitter:site", content=tw.site))
    if tw.image_alt:
        meta.append(MetaEntry(name="twitter:image:alt", content=tw.image_alt))

    # Article tags
    if og.published_time:
        meta.append(MetaEntry(property="article:published_time", content=og.published_time))
    if og.modified_time:
        meta.append(MetaEntry(property="article:modified_time", content=og.modified_time))
    if og.author:
        meta.append(MetaEntry(property="article:author", content=og.author))
    if og.section:
        meta.append(MetaEntry(property="article:section", content=og.section))
    meta.extend(MetaEntry(property="article:tag", content=tag) for tag in og.tags)

    return HeadProps(
        title=tags.title,
        meta=meta,
        link=[LinkEntry(rel="canonical", href=tags.canonical)],
    )


def to_tag_list(tags: DiscoveryTags) -> List[TagElement]:
    """Flat list of ``<meta>``/``<link>`` elements for static prerendering."""

    def meta(key: str, name: str, content: str) -> TagElement:
        return TagElement(type="meta", props={key: name, "content": content})

    elements = [
        meta("name", "description", tags.description),
        meta("name", "viewport", "width=device-width, initial-scale=1"),
    ]
    if tags.robots:
        elements.append(meta("name", "robots", tags.robots))

    og = tags.open_graph
    elements.extend(
        [
            meta("property", "og:title", og.title),
            meta("property", "og:description", og.description),
            meta("property", "og:url", og.url),
            meta("property", "og:type", og.type),
            meta("property", "og:image", og.image),
            meta("property", "og:site_name", og.site_name),
            meta("name", "twitter:card", tags.twitter.card),
            meta("name", "twitter:title", tags.twitter.title),
            meta("name", "twitter:description", tags.twitter.description),
            meta("name", "twitter:image", tags.twitter.image),
            TagElement(type="link", props={"rel": "canonical", "href": tags.canonical}),
        ]
    )
    return elements


def validate_discovery_tags(tags: DiscoveryTags) -> MetaValidationResult:
    errors: List[str] = []
    warnings: List[str] = []

    if not tags.title:
        errors.append("Title is required")
    elif len(tags.title) > 70:
        warnings.append(f"Title is {len(tags.title)} characters (recommended: <60)")

    if not tags.description:
        errors.append("Description is required")
    elif len(tags.description) > 170:
        warnings.append(f"Description is {len(tags.description)} characters (recommended: <160)")
    elif len(tags.description) < 50:
        warnings.append(f"Description is only {len(tags.description)} characters (recommended: >50)")

    if not tags.canonical:
        errors.append("Canonical URL is required")
    elif not tags.canonical.startswith("https://"):
        warnings.append("Canonical URL should use HTTPS")

    if not tags.open_graph.image:
        warnings.append("OG image is recommended for social sharing")

    return MetaValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
