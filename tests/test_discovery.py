"""Tests for app.services.discovery."""

from app.models.metadata import ArticleMeta
from app.models.page import PageCategory, PageDescriptor
from app.services.discovery import (
    HOMEPAGE_TITLE,
    build_category_tags,
    build_discovery_tags,
    build_homepage_tags,
    optimize_description,
    optimize_title,
    to_head_props,
    to_tag_list,
    validate_discovery_tags,
)

_PAGE = PageDescriptor(
    id="fuel:marathon-fueling-plan",
    slug="marathon-fueling-plan",
    path="/fuel/marathon-fueling-plan",
    category=PageCategory.FUEL,
    title="Marathon Fueling Plan - Gels, Carbs per Hour and Timing | TrainPace",
    description="Build a marathon fueling plan with carb targets and gel timing for race day.",
)


class TestOptimizeTitle:
    def test_short_title_unchanged(self):
        assert optimize_title("Pace Calculator | TrainPace") == "Pace Calculator | TrainPace"

    def test_brand_suffix_dropped_first(self):
        assert optimize_title(_PAGE.title) == "Marathon Fueling Plan - Gels, Carbs per Hour and Timing"

    def test_cut_at_word_boundary(self):
        title = "Marathon training paces for every runner who wants to race faster this season"
        result = optimize_title(title)
        assert len(result) <= 60
        assert result.endswith("...")
        assert title[len(result) - 3] == " "
        assert title.startswith(result[:-3])

    def test_cut_without_spaces(self):
        assert optimize_title("x" * 80) == "x" * 57 + "..."


class TestOptimizeDescription:
    def test_short_description_unchanged(self):
        assert optimize_description(_PAGE.description) == _PAGE.description

    def test_prefers_sentence_boundary(self):
        description = "A" * 100 + ". " + "b" * 100
        assert optimize_description(description) == "A" * 100 + "."

    def test_falls_back_to_word_boundary(self):
        description = "word " * 40
        result = optimize_description(description)
        assert result == ("word " * 40)[:154] + "..."
        assert len(result) <= 160


class TestBuildDiscoveryTags:
    def test_full_title_kept_social_title_optimized(self):
        tags = build_discovery_tags(_PAGE)
        assert tags.title == _PAGE.title
        assert tags.open_graph.title == "Marathon Fueling Plan - Gels, Carbs per Hour and Timing"
        assert tags.twitter.title == tags.open_graph.title
        assert tags.canonical == "https://trainpace.com/fuel/marathon-fueling-plan"
        assert tags.open_graph.image == "https://trainpace.com/landing-page-2025.png"
        assert tags.robots is None

    def test_canonical_override_and_noindex(self):
        page = _PAGE.model_copy(update={"canonical_url": "https://trainpace.com/fuel", "no_index": True})
        tags = build_discovery_tags(page)
        assert tags.canonical == "https://trainpace.com/fuel"
        assert tags.robots == "noindex, nofollow"

    def test_article_meta(self):
        meta = ArticleMeta(published_time="2025-01-01", section="Nutrition", tags=["gels", "carbs"])
        tags = build_discovery_tags(_PAGE, og_type="article", article_meta=meta)
        assert tags.open_graph.type == "article"
        assert tags.open_graph.section == "Nutrition"
        assert tags.open_graph.tags == ["gels", "carbs"]

    def test_category_and_homepage(self):
        assert build_category_tags(PageCategory.RACE).canonical == "https://trainpace.com/race"
        assert build_homepage_tags().title == HOMEPAGE_TITLE


class TestRendering:
    def test_head_props(self):
        page = _PAGE.model_copy(update={"no_index": True})
        props = to_head_props(build_discovery_tags(page))
        assert props.title == _PAGE.title
        assert props.link[0].rel == "canonical"
        names = {m.name: m.content for m in props.meta if m.name}
        assert names["robots"] == "noindex, nofollow"
        assert names["twitter:site"] == "@trainpace"

    def test_head_props_article_tags(self):
        meta = ArticleMeta(published_time="2025-01-01", tags=["gels"])
        props = to_head_props(build_discovery_tags(_PAGE, og_type="article", article_meta=meta))
        properties = [(m.property, m.content) for m in props.meta if m.property]
        assert ("article:published_time", "2025-01-01") in properties
        assert ("article:tag", "gels") in properties

    def test_tag_list_ends_with_canonical(self):
        elements = to_tag_list(build_discovery_tags(_PAGE))
        assert elements[0].props == {"name": "description", "content": _PAGE.description}
        assert elements[-1].type == "link"
        assert elements[-1].props["href"] == "https://trainpace.com/fuel/marathon-fueling-plan"


class TestValidateDiscoveryTags:
    def test_valid_tags(self):
        result = validate_discovery_tags(build_discovery_tags(_PAGE))
        assert result.is_valid
        assert result.warnings == []

    def test_missing_title_is_an_error(self):
        tags = build_discovery_tags(_PAGE.model_copy(update={"title": ""}))
        assert validate_discovery_tags(tags).errors == ["Title is required"]

    def test_http_canonical_warns(self):
        tags = build_discovery_tags(_PAGE.model_copy(update={"canonical_url": "http://trainpace.com/fuel"}))
        result = validate_discovery_tags(tags)
        assert result.is_valid
        assert result.warnings == ["Canonical URL should use HTTPS"]
