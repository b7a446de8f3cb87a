"""Tests for app.services.linking."""

import time
from unittest.mock import patch

from app.config import DEFAULT_HUBS
from app.models.page import PageCategory, PageDescriptor
from app.services.linking import (
    attach_related_page_ids,
    calculate_relevance,
    calculate_sitemap_priority,
    extract_topics,
    find_related_pages,
    generate_breadcrumbs,
    generate_cross_category_links,
    generate_linking_context,
    get_hub_for_page,
    get_sibling_pages,
    validate_internal_links,
)


def _page(page_id: str, category: PageCategory = PageCategory.PACE, **fields) -> PageDescriptor:
    slug = page_id.split(":")[-1]
    fields.setdefault("slug", slug)
    fields.setdefault("path", f"/{category.value}/{slug}")
    fields.setdefault("h1", slug)
    return PageDescriptor(id=page_id, category=category, **fields)


_MARATHON_PACE = _page("pace:marathon", title="Marathon Pace Calculator", intro="Tempo and easy paces")
_HALF_PACE = _page("pace:half", title="Half Marathon Pace Calculator", intro="Tempo runs for the half")
_MARATHON_FUEL = _page("fuel:marathon", PageCategory.FUEL, title="Marathon Fueling", intro="Gels and carbs")
_BOSTON = _page("race:boston", PageCategory.RACE, title="Boston Marathon Race Prep", intro="Hills and course")


class TestExtractTopics:
    def test_finds_distance_and_training_topics(self):
        topics = extract_topics(_MARATHON_PACE)
        assert "marathon" in topics
        assert "tempo" in topics
        assert "easy" in topics

    def test_ignores_markup(self):
        page = _page("pace:x", intro="<strong>Strava</strong> export")
        assert "strava" in extract_topics(page)

    def test_no_topics(self):
        page = _page("pace:x", slug="x", h1="x", title="Something else")
        assert extract_topics(page) == frozenset()


class TestCalculateRelevance:
    def test_is_symmetric(self):
        pages = [_MARATHON_PACE, _HALF_PACE, _MARATHON_FUEL, _BOSTON]
        for a in pages:
            for b in pages:
                assert calculate_relevance(a, b) == calculate_relevance(b, a)

    def test_same_category_bonus_without_topics(self):
        a = _page("pace:a", slug="a", h1="a", title="Alpha")
        b = _page("pace:b", slug="b", h1="b", title="Beta")
        assert calculate_relevance(a, b) == 0.3

    def test_different_category_without_topics(self):
        a = _page("pace:a", slug="a", h1="a", title="Alpha")
        b = _page("fuel:b", PageCategory.FUEL, slug="b", h1="b", title="Beta")
        assert calculate_relevance(a, b) == 0.0

    def test_capped_at_one(self):
        assert calculate_relevance(_MARATHON_PACE, _MARATHON_PACE) <= 1.0


class TestFindRelatedPages:
    def test_excludes_self_and_sorts_descending(self):
        links = find_related_pages(_MARATHON_PACE, [_MARATHON_PACE, _MARATHON_FUEL, _HALF_PACE, _BOSTON])
        ids = [link.page_id for link in links]
        assert "pace:marathon" not in ids
        scores = [link.relevance_score for link in links]
        assert scores == sorted(scores, reverse=True)

    def test_same_category_only(self):
        links = find_related_pages(
            _MARATHON_PACE, [_MARATHON_FUEL, _HALF_PACE, _BOSTON], same_category_only=True
        )
        assert [link.page_id for link in links] == ["pace:half"]

    def test_exclude_ids_and_limit(self):
        links = find_related_pages(
            _MARATHON_PACE,
            [_HALF_PACE, _MARATHON_FUEL, _BOSTON],
            limit=1,
            min_relevance=0.0,
            exclude_ids=["pace:half"],
        )
        assert len(links) == 1
        assert links[0].page_id != "pace:half"

    def test_ties_keep_candidate_order(self):
        a = _page("pace:a", slug="a", h1="a", title="Alpha")
        b = _page("pace:b", slug="b", h1="b", title="Beta")
        c = _page("pace:c", slug="c", h1="c", title="Gamma")
        links = find_related_pages(a, [c, b])
        assert [link.page_id for link in links] == ["pace:c", "pace:b"]

    def test_single_page_category_yields_nothing(self):
        assert find_related_pages(_BOSTON, [_BOSTON], same_category_only=True) == []


class TestBreadcrumbs:
    def test_guide_page_trail(self):
        page = _page("pace:x", path="/calculator/guides/x", h1="x")
        crumbs = generate_breadcrumbs(page)
        assert [c.name for c in crumbs] == ["TrainPace", "Pace Calculator", "Guides", "x"]
        assert [c.url for c in crumbs] == [
            "https://trainpace.com/",
            "https://trainpace.com/calculator",
            "https://trainpace.com/calculator/guides",
            "https://trainpace.com/calculator/guides/x",
        ]

    def test_regular_spoke(self):
        page = _page("fuel:m", PageCategory.FUEL, path="/fuel/m", h1="Marathon Fueling")
        assert [c.name for c in generate_breadcrumbs(page)] == ["TrainPace", "Fuel Planner", "Marathon Fueling"]

    def test_hub_page_is_not_repeated(self):
        page = _page("pace:hub", path="/calculator", h1="Running Pace Calculator")
        assert [c.name for c in generate_breadcrumbs(page)] == ["TrainPace", "Pace Calculator"]


class TestHubAndContext:
    def test_hub_link_for_spoke(self):
        link = get_hub_for_page(_MARATHON_PACE)
        assert link is not None
        assert link.path == "/calculator"

    def test_no_hub_link_for_hub(self):
        assert get_hub_for_page(_page("pace:hub", path="/calculator")) is None

    def test_cross_category_links_skip_own_category(self):
        links = generate_cross_category_links(_MARATHON_PACE, [_HALF_PACE, _MARATHON_FUEL, _BOSTON])
        assert links[PageCategory.PACE] == []
        assert set(links) == set(PageCategory)

    def test_linking_context(self):
        context = generate_linking_context(_MARATHON_PACE, [_MARATHON_PACE, _HALF_PACE, _MARATHON_FUEL])
        assert context.current_page == _MARATHON_PACE
        assert context.hub_page is not None
        assert [s.page_id for s in context.sibling_pages] == ["pace:half"]

    def test_attach_related_page_ids_keeps_authored_links(self):
        authored = _HALF_PACE.model_copy(update={"related_page_ids": ["pace:other"]})
        result = attach_related_page_ids([_MARATHON_PACE, authored])
        assert result[0].related_page_ids == ["pace:half"]
        assert result[1].related_page_ids == ["pace:other"]
        # Inputs are never modified
        assert _MARATHON_PACE.related_page_ids == []


class TestAttachRelatedPageIds:
    _TITLES = (
        "Marathon Pace Calculator",
        "Half Marathon Tempo Paces",
        "5K Interval Workouts",
        "10K Easy Run Pace",
        "Hilly Marathon Course Pace",
        "Pace Chart",
    )

    def _catalogue(self, size):
        return [
            _page(f"pace:p{i}", title=self._TITLES[i % len(self._TITLES)])
            for i in range(size)
        ]

    def test_matches_sibling_ranking(self):
        pages = self._catalogue(60) + [_MARATHON_FUEL, _BOSTON]
        result = attach_related_page_ids(pages)
        for page, attached in zip(pages, result):
            expected = get_sibling_pages(page, pages, limit=3)
            assert attached.related_page_ids == [link.page_id for link in expected]

    def test_topics_extracted_once_per_page(self):
        pages = self._catalogue(200)
        with patch("app.services.linking.extract_topics", wraps=extract_topics) as spy:
            attach_related_page_ids(pages)
        assert spy.call_count == len(pages)

    def test_large_category_stays_fast(self):
        pages = self._catalogue(5000)
        started = time.perf_counter()
        result = attach_related_page_ids(pages)
        elapsed = time.perf_counter() - started
        assert len(result) == 5000
        assert all(len(page.related_page_ids) == 3 for page in result)
        assert elapsed < 10.0


class TestSitemapPriority:
    def test_override_wins(self):
        assert calculate_sitemap_priority(_page("pace:x", priority=0.3)) == 0.3

    def test_hub(self):
        assert calculate_sitemap_priority(_page("pace:hub", path="/calculator")) == 0.9

    def test_major_race(self):
        assert calculate_sitemap_priority(_page("race:boston-marathon", PageCategory.RACE)) == 0.8

    def test_popular_pace_distance(self):
        assert calculate_sitemap_priority(_page("pace:10k-pace")) == 0.8

    def test_faq_page(self):
        page = _page("fuel:gels", PageCategory.FUEL, faq=[{"question": "q", "answer": "a"}])
        assert calculate_sitemap_priority(page) == 0.7

    def test_default(self):
        assert calculate_sitemap_priority(_page("fuel:gels", PageCategory.FUEL)) == 0.6


class TestValidateInternalLinks:
    def test_broken_links_are_reported(self):
        page = _page("pace:a", related_page_ids=["pace:missing"], parent_page_id="pace:gone", hub_page_id="pace:nohub")
        result = validate_internal_links([page])
        assert not result.is_valid
        assert result.broken_links == [
            "pace:a -> pace:missing",
            "pace:a -> pace:gone (parent)",
            "pace:a -> pace:nohub (hub)",
        ]

    def test_orphans_exclude_hubs_and_linking_pages(self):
        hub = _page("pace:hub", path="/calculator")
        linked = _page("pace:linked")
        linker = _page("pace:linker", related_page_ids=["pace:linked"])
        orphan = _page("pace:orphan")
        result = validate_internal_links([hub, linked, linker, orphan], DEFAULT_HUBS)
        assert result.is_valid
        assert result.orphan_pages == ["pace:orphan"]
        assert result.warnings == ["Found 1 orphan pages with no incoming links"]

    def test_parent_reference_counts_as_incoming(self):
        parent = _page("pace:parent")
        child = _page("pace:child", parent_page_id="pace:parent", related_page_ids=["pace:parent"])
        result = validate_internal_links([parent, child])
        assert "pace:parent" not in result.orphan_pages
