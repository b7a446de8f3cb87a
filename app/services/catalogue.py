"""The page descriptor store and the default TrainPace catalogue."""

import logging
from collections import Counter
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from app.config import DEFAULT_HUBS, DEFAULT_SITE, SiteConfig
from app.data.static_pages import FUEL_DISTANCES, PACE_DISTANCES, STATIC_PAGES, TIME_GOALS
from app.models.hub import HubConfig, HubRegistry
from app.models.page import PageCategory, PageDescriptor
from app.services.linking import attach_related_page_ids
from app.services.races import generate_race_page_from_course, get_bundled_races
from app.services.templates import (
    generate_cta,
    generate_distance_page,
    generate_time_goal_page,
)

logger = logging.getLogger(__name__)


class PageCatalogue:
    """Ordered, read-only collection of descriptors with lookup indices.

    In strict mode (the default) a duplicated id or path, or a slug repeated
    within one category, raises ``ValueError``.  With ``strict=False`` the
    first occurrence wins in every index and the catalogue still holds every
    descriptor, so the pre-publish gate can report the collisions.
    """

    def __init__(self, pages: Iterable[PageDescriptor], strict: bool = True) -> None:
        self._pages: Tuple[PageDescriptor, ...] = tuple(pages)

        if strict:
            problems = _collisions(self._pages)
            if problems:
                raise ValueError("Catalogue has duplicate keys: " + "; ".join(problems))

        self._by_id: Dict[str, PageDescriptor] = {}
        self._by_path: Dict[str, PageDescriptor] = {}
        self._by_category_slug: Dict[Tuple[PageCategory, str], PageDescriptor] = {}
        self._by_slug: Dict[str, PageDescriptor] = {}
        self._by_category: Dict[PageCategory, List[PageDescriptor]] = {}

        for page in self._pages:
            self._by_id.setdefault(page.id, page)
            self._by_path.setdefault(page.path, page)
            self._by_category_slug.setdefault((page.category, page.slug), page)
            self._by_slug.setdefault(page.slug, page)
            self._by_category.setdefault(page.category, []).append(page)

    def __iter__(self) -> Iterator[PageDescriptor]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    @property
    def pages(self) -> Tuple[PageDescriptor, ...]:
        return self._pages

    def get(self, page_id: str) -> Optional[PageDescriptor]:
        return self._by_id.get(page_id)

    def by_slug(self, slug: str, category: Optional[PageCategory] = None) -> Optional[PageDescriptor]:
        if category is None:
            return self._by_slug.get(slug)
        return self._by_category_slug.get((PageCategory(category), slug))

    def by_path(self, path: str) -> Optional[PageDescriptor]:
        return self._by_path.get(path)

    def in_category(self, category: PageCategory) -> List[PageDescriptor]:
        return list(self._by_category.get(PageCategory(category), []))

    def categories(self) -> List[PageCategory]:
        return [category for category in PageCategory if category in self._by_category]


def _collisions(pages: Sequence[PageDescriptor]) -> List[str]:
    problems = []
    for label, counts in (
        ("id", Counter(p.id for p in pages)),
        ("path", Counter(p.path for p in pages)),
        ("slug", Counter(f"{p.category.value}/{p.slug}" for p in pages)),
    ):
        duplicates = sorted(value for value, count in counts.items() if count > 1)
        if duplicates:
            problems.append(f"{label}: {', '.join(duplicates)}")
    return problems


def hub_page(hub: HubConfig, site: SiteConfig = DEFAULT_SITE) -> PageDescriptor:
    """Descriptor for a category landing page."""
    return PageDescriptor(
        id=hub.id,
        slug=hub.slug,
        path=hub.path,
        category=hub.category,
        title=f"{hub.h1}{site.brand_suffix}",
        description=f"{hub.description}. {hub.intro}",
        h1=hub.h1,
        intro=hub.intro,
        bullets=[section.description or section.name for section in hub.categories],
        cta=generate_cta(hub.category),
        related_page_ids=list(hub.featured_page_ids),
    )


def build_default_pages(
    hubs: HubRegistry = DEFAULT_HUBS,
    site: SiteConfig = DEFAULT_SITE,
) -> List[PageDescriptor]:
    """Assemble hubs, hand-authored pages and every generated page.

    Spokes without an explicit ``hub_page_id`` point at the hub *hubs*
    registers for their category.
    """
    pages: List[PageDescriptor] = [hub_page(hub, site) for hub in hubs.all()]

    spokes: List[PageDescriptor] = list(STATIC_PAGES)
    spokes.extend(generate_distance_page(d, PageCategory.PACE) for d in PACE_DISTANCES)
    spokes.extend(generate_distance_page(d, PageCategory.FUEL) for d in FUEL_DISTANCES)
    spokes.extend(generate_race_page_from_course(course) for course in get_bundled_races().values())
    spokes.extend(generate_time_goal_page(goal) for goal in TIME_GOALS)

    for page in spokes:
        hub = hubs.hub_for(page.category)
        if hub is not None and page.hub_page_id is None:
            page = page.model_copy(update={"hub_page_id": hub.id})
        pages.append(page)

    return attach_related_page_ids(pages)


def load_default_catalogue(
    hubs: HubRegistry = DEFAULT_HUBS,
    site: SiteConfig = DEFAULT_SITE,
) -> PageCatalogue:
    catalogue = PageCatalogue(build_default_pages(hubs, site))
    logger.info(
        "Built catalogue with %d pages across %d categories",
        len(catalogue),
        len(catalogue.categories()),
    )
    return catalogue


@lru_cache(maxsize=1)
def get_default_catalogue() -> PageCatalogue:
    """Shared default catalogue; descriptors are frozen so one instance serves every request."""
    return load_default_catalogue()
