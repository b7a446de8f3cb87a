"""Tests for app.services.deduplicator."""

from app.models.page import PageCategory, PageDescriptor
from app.services.deduplicator import (
    MAX_CONFLICTS,
    calculate_similarity,
    detect_cannibalization,
    extract_primary_keywords,
    validate_content_uniqueness,
)


def _page(page_id: str, **fields) -> PageDescriptor:
    return PageDescriptor(id=page_id, category=PageCategory.PACE, **fields)


class TestCalculateSimilarity:
    def test_identical_text(self):
        assert calculate_similarity("easy tempo interval", "easy tempo interval") == 1.0

    def test_disjoint_text(self):
        assert calculate_similarity("easy tempo", "gels carbs") == 0.0

    def test_stop_words_are_ignored(self):
        a = "Plan your marathon pacing with the calculator"
        b = "Plan marathon pacing with a calculator"
        assert calculate_similarity(a, b) == 1.0

    def test_empty_text(self):
        assert calculate_similarity("", "") == 0.0

    def test_markup_is_ignored(self):
        assert calculate_similarity("<p>easy tempo</p>", "easy tempo") == 1.0


class TestValidateContentUniqueness:
    def test_unique_catalogue(self):
        pages = [
            _page("a", title="Alpha", description="First", intro="easy runs build aerobic base"),
            _page("b", title="Beta", description="Second", intro="gels carbs and fueling strategy"),
        ]
        result = validate_content_uniqueness(pages)
        assert result.is_unique
        assert result.duplicates == []
        assert result.similar_content == []

    def test_duplicate_titles_grouped_case_insensitively(self):
        pages = [
            _page("a", title="Marathon Pace | TrainPace", description="one"),
            _page("b", title="MARATHON PACE | TRAINPACE", description="two"),
            _page("c", title="Other", description="three"),
        ]
        result = validate_content_uniqueness(pages)
        assert not result.is_unique
        title_groups = [g for g in result.duplicates if g.field == "title"]
        assert len(title_groups) == 1
        assert title_groups[0].page_ids == ["a", "b"]

    def test_duplicate_descriptions(self):
        pages = [
            _page("a", title="A", description="Same description"),
            _page("b", title="B", description="same description"),
        ]
        result = validate_content_uniqueness(pages)
        assert [g.field for g in result.duplicates] == ["description"]

    def test_empty_values_are_not_duplicates(self):
        pages = [_page("a"), _page("b")]
        assert validate_content_uniqueness(pages).duplicates == []

    def test_intros_differing_by_stop_words_are_similar(self):
        pages = [
            _page("a", title="A", description="a", intro="Plan your marathon pacing with the calculator"),
            _page("b", title="B", description="b", intro="Plan marathon pacing with a calculator"),
        ]
        result = validate_content_uniqueness(pages, threshold=0.7)
        assert len(result.similar_content) == 1
        pair = result.similar_content[0]
        assert (pair.page_id_1, pair.page_id_2) == ("a", "b")
        assert pair.similarity > 0.7

    def test_threshold_is_respected(self):
        pages = [
            _page("a", title="A", description="a", intro="easy tempo interval threshold"),
            _page("b", title="B", description="b", intro="easy tempo gels carbs"),
        ]
        assert validate_content_uniqueness(pages, threshold=0.7).similar_content == []
        assert len(validate_content_uniqueness(pages, threshold=0.3).similar_content) == 1


class TestExtractPrimaryKeywords:
    def test_two_and_three_word_phrases(self):
        page = _page("a", title="Boston Marathon Guide")
        assert extract_primary_keywords(page) == [
            "boston marathon",
            "boston marathon guide",
            "marathon guide",
        ]

    def test_short_words_dropped(self):
        page = _page("a", title="5K to 10K Plan")
        assert extract_primary_keywords(page) == ["10k plan"]


class TestDetectCannibalization:
    def test_shared_phrase_is_a_conflict(self):
        pages = [
            _page("a", title="Boston Marathon Course"),
            _page("b", title="Boston Marathon Fueling"),
        ]
        result = detect_cannibalization(pages)
        assert result.has_issues
        conflict = next(c for c in result.conflicts if c.keyword == "boston marathon")
        assert conflict.page_ids == ["a", "b"]
        assert conflict.suggestion == (
            'Consider differentiating titles/H1s for pages targeting "boston marathon"'
        )

    def test_generic_phrases_are_ignored(self):
        pages = [
            _page("a", title="Pace Calculator"),
            _page("b", title="10K Pace Calculator"),
        ]
        assert not detect_cannibalization(pages).has_issues

    def test_phrase_repeated_within_one_page_is_not_a_conflict(self):
        page = _page("a", title="Marathon Fueling", h1="Marathon Fueling")
        assert not detect_cannibalization([page]).has_issues

    def test_conflicts_are_capped(self):
        title = "alpha bravo charlie delta echo foxtrot golf hotel india juliet kilo lima mike november"
        pages = [_page("a", title=title), _page("b", title=title)]
        result = detect_cannibalization(pages)
        assert len(result.conflicts) == MAX_CONFLICTS
