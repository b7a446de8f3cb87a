"""Tests for app.services.catalogue."""

import pytest

from app.config import DEFAULT_HUBS
from app.models.hub import HubRegistry
from app.models.page import PageCategory, PageDescriptor
from app.services.catalogue import PageCatalogue, build_default_pages, get_default_catalogue, hub_page
from app.services.linking import validate_internal_links
from app.services.validator import run_pre_publish_checks


def _page(page_id: str, path: str, slug: str = "x", category: PageCategory = PageCategory.PACE) -> PageDescriptor:
    return PageDescriptor(id=page_id, slug=slug, path=path, category=category)


class TestPageCatalogue:
    def test_lookups(self):
        a = _page("pace:a", "/calculator/a", slug="a")
        b = _page("fuel:a", "/fuel/a", slug="a", category=PageCategory.FUEL)
        catalogue = PageCatalogue([a, b])
        assert len(catalogue) == 2
        assert list(catalogue) == [a, b]
        assert catalogue.get("fuel:a") is b
        assert catalogue.by_path("/calculator/a") is a
        assert catalogue.by_slug("a") is a
        assert catalogue.by_slug("a", PageCategory.FUEL) is b
        assert catalogue.in_category(PageCategory.FUEL) == [b]
        assert catalogue.categories() == [PageCategory.PACE, PageCategory.FUEL]
        assert catalogue.get("missing") is None

    def test_strict_rejects_duplicate_id(self):
        with pytest.raises(ValueError, match="id: pace:a"):
            PageCatalogue([_page("pace:a", "/a", "a"), _page("pace:a", "/b", "b")])

    def test_strict_rejects_duplicate_path(self):
        with pytest.raises(ValueError, match="path: /a"):
            PageCatalogue([_page("pace:a", "/a", "a"), _page("pace:b", "/a", "b")])

    def test_strict_rejects_duplicate_slug_in_category(self):
        with pytest.raises(ValueError, match="slug: pace/a"):
            PageCatalogue([_page("pace:a", "/a", "a"), _page("pace:b", "/b", "a")])

    def test_same_slug_in_different_categories_is_allowed(self):
        PageCatalogue([_page("pace:a", "/a", "a"), _page("fuel:a", "/b", "a", PageCategory.FUEL)])

    def test_lenient_keeps_first_occurrence(self):
        first = _page("pace:a", "/a", "a")
        second = _page("pace:a", "/b", "b")
        catalogue = PageCatalogue([first, second], strict=False)
        assert len(catalogue) == 2
        assert catalogue.get("pace:a") is first
        assert catalogue.by_path("/b") is second


class TestHubPage:
    def test_hub_descriptor(self):
        hub = DEFAULT_HUBS.hub_for(PageCategory.PACE)
        page = hub_page(hub)
        assert page.id == "pace:hub"
        assert page.path == "/calculator"
        assert page.title == "Running Pace Calculator | TrainPace"
        assert len(page.bullets) == 3
        assert page.cta is not None


class TestDefaultCatalogue:
    def test_custom_registry_drives_hub_ids(self):
        race_hub = DEFAULT_HUBS.hub_for(PageCategory.RACE).model_copy(update={"id": "race:index"})
        registry = HubRegistry(hubs={**DEFAULT_HUBS.hubs, PageCategory.RACE: race_hub})
        pages = build_default_pages(hubs=registry)
        spokes = [p for p in pages if p.category == PageCategory.RACE and p.path != race_hub.path]
        assert spokes
        assert {p.hub_page_id for p in spokes} == {"race:index"}
        result = validate_internal_links(pages, registry)
        assert not [link for link in result.broken_links if link.endswith("(hub)")]

    def test_builds_without_collisions(self):
        catalogue = get_default_catalogue()
        assert len(catalogue) > 0
        assert set(catalogue.categories()) == set(PageCategory)

    def test_is_shared(self):
        assert get_default_catalogue() is get_default_catalogue()

    def test_every_spoke_points_at_its_hub(self):
        for page in get_default_catalogue():
            hub = DEFAULT_HUBS.hub_for(page.category)
            if page.path != hub.path:
                assert page.hub_page_id == hub.id

    def test_passes_structural_pre_publish_checks(self):
        result = run_pre_publish_checks(build_default_pages())
        assert not any("duplicate" in blocker for blocker in result.blockers)
        assert not any("missing required" in blocker for blocker in result.blockers)

    def test_no_unresolved_placeholders(self):
        for page in get_default_catalogue():
            for text in (page.title, page.description, page.h1, page.intro):
                assert "{{" not in text, page.id
