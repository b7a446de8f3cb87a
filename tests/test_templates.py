"""Tests for app.services.templates."""

import pytest

from app.models.generation import DistanceSpec, RaceData, TimeGoal
from app.models.page import ContentTemplate, ContentVariables, PageCategory
from app.services.templates import (
    BULLET_VARIATIONS,
    CTAS,
    DESCRIPTION_VARIATIONS,
    FAQ_TEMPLATES,
    HOW_TO_TEMPLATES,
    INTRO_VARIATIONS,
    TITLE_VARIATIONS,
    generate_distance_page,
    generate_faqs,
    generate_race_page,
    generate_time_goal_page,
    interpolate,
    interpolate_template,
    select_variation,
    string_hash,
)

_VARS = ContentVariables(
    slug="half-marathon",
    name="Half Marathon",
    display_name="Half Marathon",
    distance_km=21.0975,
    custom={"pacePerMile": "8:00"},
)


class TestInterpolate:
    def test_resolves_camel_case_alias(self):
        assert interpolate("{{displayName}} paces", _VARS) == "Half Marathon paces"

    def test_resolves_snake_case_field(self):
        assert interpolate("{{display_name}}", _VARS) == "Half Marathon"

    def test_resolves_custom_values(self):
        assert interpolate("{{pacePerMile}}/mi", _VARS) == "8:00/mi"

    def test_unknown_placeholder_left_verbatim(self):
        assert interpolate("{{name}} {{unknownThing}}", _VARS) == "Half Marathon {{unknownThing}}"

    def test_unset_optional_field_left_verbatim(self):
        assert interpolate("in {{city}}", _VARS) == "in {{city}}"

    def test_integral_floats_render_without_decimal(self):
        variables = ContentVariables(slug="10k", name="10K", distance_km=10.0)
        assert interpolate("{{distanceKm}}km", variables) == "10km"

    def test_non_integral_floats_keep_decimals(self):
        assert interpolate("{{distanceKm}}", _VARS) == "21.0975"

    def test_text_without_placeholders_unchanged(self):
        assert interpolate("No placeholders here.", _VARS) == "No placeholders here."

    def test_interpolate_template_covers_every_field(self):
        template = ContentTemplate(
            title="{{name}} title",
            description="{{name}} description",
            h1="{{name}}",
            intro="Run the {{name}}",
            bullets=["{{name}} one", "two"],
        )
        result = interpolate_template(template, _VARS)
        assert result.title == "Half Marathon title"
        assert result.description == "Half Marathon description"
        assert result.h1 == "Half Marathon"
        assert result.intro == "Run the Half Marathon"
        assert result.bullets == ["Half Marathon one", "two"]


class TestStringHash:
    def test_empty_string(self):
        assert string_hash("") == 0

    def test_single_character(self):
        assert string_hash("a") == 97

    def test_matches_31_polynomial(self):
        assert string_hash("ab") == 97 * 31 + 98

    def test_wraps_to_signed_32_bit(self):
        assert string_hash("hello") == 99162322
        assert string_hash("polygenelubricants") == -(2 ** 31)

    def test_hashes_utf16_code_units(self):
        # One astral character is two UTF-16 code units
        assert string_hash("\U0001F600") == 0xD83D * 31 + 0xDE00


class TestSelectVariation:
    def test_is_deterministic(self):
        variants = ["a", "b", "c", "d"]
        picks = {select_variation(variants, "marathon-pace-calculator") for _ in range(20)}
        assert len(picks) == 1

    def test_uses_absolute_hash_modulo(self):
        variants = ["a", "b", "c"]
        assert select_variation(variants, "ab") == variants[3105 % 3]

    def test_handles_minimum_int32_hash(self):
        variants = ["a", "b", "c"]
        assert select_variation(variants, "polygenelubricants") == variants[2 ** 31 % 3]

    def test_empty_list_raises(self):
        with pytest.raises(ValueError):
            select_variation([], "anything")

    def test_same_slug_same_title_across_calls(self):
        distance = DistanceSpec(name="15K", slug="15k", km=15.0, display_distance="15K")
        first = generate_distance_page(distance, PageCategory.PACE)
        second = generate_distance_page(distance, PageCategory.PACE)
        assert first.title == second.title
        assert first.description == second.description
        assert first.intro == second.intro


class TestGenerateFaqs:
    def test_short_distance_adds_5k_faq(self):
        variables = ContentVariables(slug="1-mile", name="1 Mile", distance_km=1.6)
        faqs = generate_faqs(PageCategory.PACE, variables)
        assert len(faqs) == 3
        assert faqs[2].question == interpolate(FAQ_TEMPLATES["pace_5k"][0].question, variables)

    def test_marathon_distance_adds_fuel_marathon_faq(self):
        variables = ContentVariables(slug="50k", name="50K", distance_km=50.0)
        faqs = generate_faqs(PageCategory.FUEL, variables)
        assert len(faqs) == 3
        assert faqs[2].question == interpolate(FAQ_TEMPLATES["fuel_marathon"][0].question, variables)

    def test_middle_distance_only_general(self):
        variables = ContentVariables(slug="15k", name="15K", distance_km=15.0)
        assert len(generate_faqs(PageCategory.PACE, variables)) == 2

    def test_category_without_templates_is_empty(self):
        variables = ContentVariables(slug="x", name="X", distance_km=15.0)
        assert generate_faqs(PageCategory.ELEVATION, variables) == []

    def test_respects_max_items(self):
        variables = ContentVariables(slug="1-mile", name="1 Mile", distance_km=1.6)
        assert len(generate_faqs(PageCategory.PACE, variables, max_items=1)) == 1

    def test_placeholders_resolved(self):
        variables = ContentVariables(slug="15k", name="15K", distance_km=15.0)
        for faq in generate_faqs(PageCategory.PACE, variables):
            assert "{{name}}" not in faq.question
            assert "{{name}}" not in faq.answer


class TestCategoryTables:
    @pytest.mark.parametrize(
        "table",
        [TITLE_VARIATIONS, DESCRIPTION_VARIATIONS, INTRO_VARIATIONS, BULLET_VARIATIONS, CTAS, HOW_TO_TEMPLATES],
    )
    def test_every_category_is_covered(self, table):
        assert set(table) == set(PageCategory)


class TestGenerateDistancePage:
    def test_pace_page_shape(self):
        distance = DistanceSpec(name="15K", slug="15k", km=15.0, display_distance="15K")
        page = generate_distance_page(distance, PageCategory.PACE)
        assert page.id == "pace:15k"
        assert page.path == "/calculator/15k-pace-calculator"
        assert page.h1 == "15K Pace Calculator"
        assert page.initial_inputs == {"distance": "15"}
        assert page.cta is not None
        assert page.how_to is not None and page.how_to.steps
        assert page.title in [interpolate(t, page.variables) for t in TITLE_VARIATIONS[PageCategory.PACE]]

    def test_fuel_page_shape(self):
        distance = DistanceSpec(name="30K", slug="30k", km=30.0, display_distance="30K")
        page = generate_distance_page(distance, PageCategory.FUEL)
        assert page.path == "/fuel/30k-fueling-plan"
        assert page.h1 == "30K Fueling Plan"

    def test_other_category_path(self):
        distance = DistanceSpec(name="Hilly 10K", slug="hilly-10k", km=10.0, display_distance="10K")
        page = generate_distance_page(distance, PageCategory.ELEVATION)
        assert page.path == "/elevation/hilly-10k"
        assert page.faq is None

    @pytest.mark.parametrize("category", list(PageCategory))
    def test_title_and_description_match_category(self, category):
        distance = DistanceSpec(name="Hilly 10K", slug="hilly-10k", km=10.0, display_distance="10K")
        page = generate_distance_page(distance, category)
        assert page.title in [interpolate(t, page.variables) for t in TITLE_VARIATIONS[category]]
        assert page.description in [interpolate(d, page.variables) for d in DESCRIPTION_VARIATIONS[category]]

    def test_elevation_description_is_not_a_pace_pitch(self):
        distance = DistanceSpec(name="Hilly 10K", slug="hilly-10k", km=10.0, display_distance="10K")
        page = generate_distance_page(distance, PageCategory.ELEVATION)
        assert "pace calculator" not in page.description.lower()

    def test_no_unresolved_placeholders(self):
        distance = DistanceSpec(name="10 Mile", slug="10-mile", km=16.09, display_distance="10 miles")
        page = generate_distance_page(distance, PageCategory.PACE)
        for text in [page.title, page.description, page.intro, *page.bullets]:
            assert "{{" not in text


class TestGenerateRacePage:
    def test_race_page_shape(self):
        race = RaceData(
            name="Boston Marathon",
            slug="boston-marathon",
            city="Boston",
            country="USA",
            preview_route_key="boston",
        )
        page = generate_race_page(race)
        assert page.id == "race:boston-marathon"
        assert page.path == "/race/boston-marathon"
        assert page.h1 == "Boston Marathon Race Prep"
        assert page.preview_route_key == "boston"
        assert "Boston Marathon" in page.title


class TestGenerateTimeGoalPage:
    def test_time_goal_page_shape(self):
        goal = TimeGoal(
            distance="marathon",
            distance_label="Marathon",
            distance_km=42.195,
            target_time="3:30",
            pace_per_km="4:58",
            pace_per_mile="8:00",
            difficulty="intermediate",
        )
        page = generate_time_goal_page(goal)
        assert page.slug == "sub-3-30-marathon-training-guide"
        assert page.path == "/blog/sub-3-30-marathon-training-guide"
        assert page.category == PageCategory.BLOG
        assert page.title == "Sub-3:30 Marathon Training Plan & Paces | TrainPace"
        assert page.bullets[0] == "Goal pace: 4:58/km (8:00/mile)"
        assert page.initial_inputs == {"distance": "42.195", "time": "3:30"}
        assert "{{" not in page.intro
