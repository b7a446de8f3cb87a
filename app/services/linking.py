"""Topic relevance, hub-and-spoke links and breadcrumbs.

Every function here is pure: links are computed from the catalogue passed in
and are never written back onto a descriptor.  Hub configuration is an
explicit :class:`~app.models.hub.HubRegistry` argument.
"""

import logging
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from app.config import DEFAULT_HUBS, DEFAULT_SITE, SiteConfig
from app.models.hub import HubRegistry
from app.models.page import (
    BreadcrumbItem,
    InternalLink,
    LinkingContext,
    PageCategory,
    PageDescriptor,
)
from app.models.validation import LinkValidationResult
from app.services.sanitizer import plain_text

logger = logging.getLogger(__name__)

# Topic label -> substrings that signal it
TOPIC_KEYWORDS: Dict[str, List[str]] = {
    # Distances
    "5k": ["5k", "5-k", "five-k", "5km", "5000"],
    "10k": ["10k", "10-k", "ten-k", "10km", "10000"],
    "half": ["half", "half-marathon", "13.1", "21k", "21.1"],
    "marathon": ["marathon", "26.2", "42k", "42.195"],
    "ultra": ["ultra", "ultramarathon", "50k", "100k", "100-mile"],
    # Training types
    "tempo": ["tempo", "threshold", "lt", "lactate"],
    "easy": ["easy", "recovery", "slow", "conversational"],
    "interval": ["interval", "speed", "vo2", "repeats"],
    "vdot": ["vdot", "daniels", "vo2max"],
    # Fueling
    "gel": ["gel", "gels", "gu", "maurten"],
    "carbs": ["carb", "carbs", "carbohydrate", "glycogen"],
    "fueling": ["fuel", "fueling", "nutrition", "eating"],
    "hydration": ["hydrate", "hydration", "water", "electrolyte"],
    # Elevation
    "elevation": ["elevation", "altitude", "height"],
    "hills": ["hill", "hills", "hilly", "climb", "climbing"],
    "gpx": ["gpx", "gps", "track", "route"],
    "grade": ["grade", "gradient", "slope", "incline"],
    # Platforms
    "strava": ["strava"],
    "garmin": ["garmin"],
    "coros": ["coros"],
    # World Marathon Major cities
    "boston": ["boston"],
    "nyc": ["nyc", "new york", "new-york"],
    "chicago": ["chicago"],
    "berlin": ["berlin"],
    "london": ["london"],
    "tokyo": ["tokyo"],
}

MAJOR_RACES = ("boston", "nyc", "chicago", "berlin", "london", "tokyo")
POPULAR_DISTANCES = ("marathon", "half-marathon", "5k", "10k")


# ---------------------------------------------------------------------------
# Relevance
# ---------------------------------------------------------------------------

def extract_topics(page: PageDescriptor) -> FrozenSet[str]:
    """Return the topic labels whose keywords occur in *page*'s text fields."""
    search_text = " ".join(
        [page.slug, page.title, page.description, page.h1, page.intro, *page.bullets]
    )
    search_text = plain_text(search_text).lower()
    return frozenset(
        topic
        for topic, keywords in TOPIC_KEYWORDS.items()
        if any(keyword in search_text for keyword in keywords)
    )


def _relevance(
    category_a: PageCategory,
    topics_a: FrozenSet[str],
    category_b: PageCategory,
    topics_b: FrozenSet[str],
) -> float:
    score = 0.3 if category_a == category_b else 0.0
    union = topics_a | topics_b
    if union:
        score += 0.7 * len(topics_a & topics_b) / len(union)
    return min(score, 1.0)


def calculate_relevance(a: PageDescriptor, b: PageDescriptor) -> float:
    """Score how related two descriptors are, in ``[0, 1]``.

    Same category contributes 0.3; the Jaccard overlap of their topic sets
    contributes up to 0.7.  The result is symmetric in *a* and *b*.
    """
    return _relevance(a.category, extract_topics(a), b.category, extract_topics(b))


def find_related_pages(
    page: PageDescriptor,
    candidates: Iterable[PageDescriptor],
    limit: int = 5,
    min_relevance: float = 0.2,
    same_category_only: bool = False,
    exclude_ids: Sequence[str] = (),
    topics_by_id: Optional[Mapping[str, FrozenSet[str]]] = None,
) -> List[InternalLink]:
    """Rank *candidates* by relevance to *page*.

    Self and *exclude_ids* are skipped; scores below *min_relevance* are
    dropped.  Ties keep candidate order.  *topics_by_id* supplies topic sets
    already extracted for this pass.
    """
    excluded = set(exclude_ids)
    excluded.add(page.id)
    topics = _topics_of(page, topics_by_id)
    groups = _group_by_topics(candidates, topics_by_id)
    return _rank_groups(page, topics, groups, limit, min_relevance, same_category_only, excluded)


def _topics_of(
    page: PageDescriptor,
    topics_by_id: Optional[Mapping[str, FrozenSet[str]]],
) -> FrozenSet[str]:
    if topics_by_id is not None:
        topics = topics_by_id.get(page.id)
        if topics is not None:
            return topics
    return extract_topics(page)


def _group_by_topics(
    candidates: Iterable[PageDescriptor],
    topics_by_id: Optional[Mapping[str, FrozenSet[str]]] = None,
) -> Dict[Tuple[PageCategory, FrozenSet[str]], List[Tuple[int, PageDescriptor]]]:
    # Relevance depends only on category and topic set
    groups: Dict[Tuple[PageCategory, FrozenSet[str]], List[Tuple[int, PageDescriptor]]] = {}
    for position, candidate in enumerate(candidates):
        key = (candidate.category, _topics_of(candidate, topics_by_id))
        groups.setdefault(key, []).append((position, candidate))
    return groups


def _rank_groups(
    page: PageDescriptor,
    topics: FrozenSet[str],
    groups: Dict[Tuple[PageCategory, FrozenSet[str]], List[Tuple[int, PageDescriptor]]],
    limit: int,
    min_relevance: float,
    same_category_only: bool,
    excluded: AbstractSet[str],
) -> List[InternalLink]:
    if limit <= 0:
        return []

    scored = []
    for (category, candidate_topics), members in groups.items():
        if same_category_only and category != page.category:
            continue
        score = _relevance(page.category, topics, category, candidate_topics)
        if score < min_relevance:
            continue
        taken = 0
        for position, candidate in members:
            if candidate.id in excluded:
                continue
            scored.append((-score, position, candidate))
            taken += 1
            if taken == limit:
                break

    scored.sort(key=lambda item: (item[0], item[1]))
    return [
        InternalLink(page_id=c.id, path=c.path, title=c.h1, relevance_score=-neg_score)
        for neg_score, _, c in scored[:limit]
    ]


# ---------------------------------------------------------------------------
# Hub / spoke navigation
# ---------------------------------------------------------------------------

def get_hub_for_page(page: PageDescriptor, hubs: HubRegistry = DEFAULT_HUBS) -> Optional[InternalLink]:
    """Link to the hub that owns *page*; ``None`` for the hub page itself."""
    hub = hubs.hub_for(page.category)
    if hub is None or page.path == hub.path:
        return None
    return InternalLink(page_id=hub.id, path=hub.path, title=hub.title)


def get_sibling_pages(
    page: PageDescriptor,
    pages: Iterable[PageDescriptor],
    limit: int = 6,
) -> List[InternalLink]:
    return find_related_pages(
        page,
        pages,
        limit=limit,
        min_relevance=0.1,
        same_category_only=True,
    )


def generate_cross_category_links(
    page: PageDescriptor,
    pages: Sequence[PageDescriptor],
) -> Dict[PageCategory, List[InternalLink]]:
    """Top three related pages from every other category."""
    result: Dict[PageCategory, List[InternalLink]] = {category: [] for category in PageCategory}
    for category in PageCategory:
        if category == page.category:
            continue
        in_category = [p for p in pages if p.category == category]
        result[category] = find_related_pages(page, in_category, limit=3, min_relevance=0.15)
    return result


def generate_breadcrumbs(
    page: PageDescriptor,
    hubs: HubRegistry = DEFAULT_HUBS,
    site: SiteConfig = DEFAULT_SITE,
) -> List[BreadcrumbItem]:
    """Home, then the category hub, then ``Guides`` for guide paths, then the page."""
    crumbs = [BreadcrumbItem(name=site.site_name, url=site.with_base_url("/"))]

    hub = hubs.hub_for(page.category)
    if hub is not None:
        crumbs.append(BreadcrumbItem(name=hub.title, url=site.with_base_url(hub.path)))

    parts = [part for part in page.path.split("/") if part]
    if len(parts) > 2 and "guides" in parts:
        crumbs.append(BreadcrumbItem(name="Guides", url=site.with_base_url(f"/{parts[0]}/guides")))

    if hub is None or page.path != hub.path:
        crumbs.append(BreadcrumbItem(name=page.h1, url=site.with_base_url(page.path)))

    return crumbs


def generate_linking_context(
    page: PageDescriptor,
    pages: Sequence[PageDescriptor],
    hubs: HubRegistry = DEFAULT_HUBS,
    site: SiteConfig = DEFAULT_SITE,
) -> LinkingContext:
    return LinkingContext(
        current_page=page,
        breadcrumbs=generate_breadcrumbs(page, hubs, site),
        related_pages=find_related_pages(page, pages, limit=5),
        hub_page=get_hub_for_page(page, hubs),
        sibling_pages=get_sibling_pages(page, pages, limit=4),
    )


def attach_related_page_ids(
    pages: Sequence[PageDescriptor],
    limit: int = 3,
) -> List[PageDescriptor]:
    """Return copies of *pages* whose empty ``related_page_ids`` are filled in.

    Hand-authored related ids are kept as they are.  Comparison is restricted
    to each page's own category, and topics are extracted once per page.
    """
    topics_by_id = {page.id: extract_topics(page) for page in pages}
    by_category: Dict[PageCategory, List[PageDescriptor]] = {}
    for page in pages:
        by_category.setdefault(page.category, []).append(page)
    groups_by_category = {
        category: _group_by_topics(members, topics_by_id)
        for category, members in by_category.items()
    }

    result = []
    for page in pages:
        if page.related_page_ids:
            result.append(page)
            continue
        links = _rank_groups(
            page,
            topics_by_id[page.id],
            groups_by_category[page.category],
            limit,
            min_relevance=0.1,
            same_category_only=True,
            excluded={page.id},
        )
        result.append(page.model_copy(update={"related_page_ids": [link.page_id for link in links]}))
    return result


# ---------------------------------------------------------------------------
# Sitemap priority
# ---------------------------------------------------------------------------

def calculate_sitemap_priority(page: PageDescriptor, hubs: HubRegistry = DEFAULT_HUBS) -> float:
    """Sitemap priority for *page*; a descriptor-level override always wins."""
    if page.priority is not None:
        return page.priority

    hub = hubs.hub_for(page.category)
    if hub is not None and page.path == hub.path:
        return 0.9

    if page.category == PageCategory.RACE and any(r in page.slug for r in MAJOR_RACES):
        return 0.8
    if page.category == PageCategory.PACE and any(d in page.slug for d in POPULAR_DISTANCES):
        return 0.8

    if page.faq:
        return 0.7
    return 0.6


# ---------------------------------------------------------------------------
# Link integrity
# ---------------------------------------------------------------------------

def validate_internal_links(
    pages: Sequence[PageDescriptor],
    hubs: HubRegistry = DEFAULT_HUBS,
) -> LinkValidationResult:
    """Find declared links to unknown ids and pages nothing links to.

    A page is an orphan when no other page names it as related, parent or
    hub and it names no related pages itself.  Hub pages are exempt.
    """
    page_ids = {p.id for p in pages}
    linked_ids = set()
    broken: List[str] = []

    for page in pages:
        for related_id in page.related_page_ids:
            if related_id in page_ids:
                linked_ids.add(related_id)
            else:
                broken.append(f"{page.id} -> {related_id}")

        if page.parent_page_id:
            if page.parent_page_id in page_ids:
                linked_ids.add(page.parent_page_id)
            else:
                broken.append(f"{page.id} -> {page.parent_page_id} (parent)")

        if page.hub_page_id:
            if page.hub_page_id in page_ids:
                linked_ids.add(page.hub_page_id)
            else:
                broken.append(f"{page.id} -> {page.hub_page_id} (hub)")

    orphans = [
        page.id
        for page in pages
        if not hubs.is_hub_path(page.path)
        and page.id not in linked_ids
        and not page.related_page_ids
    ]

    warnings: List[str] = []
    if orphans:
        warnings.append(f"Found {len(orphans)} orphan pages with no incoming links")

    return LinkValidationResult(
        is_valid=not broken,
        broken_links=broken,
        orphan_pages=orphans,
        warnings=warnings,
    )
