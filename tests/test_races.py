"""Tests for app.services.races.

Network access is replaced by an httpx MockTransport so the remote-import
path runs without internet access.
"""

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from app.models.page import PageCategory, SchemaType
from app.models.race import LegacyMarathonData, PaceStrategy, RaceFaq
from app.models.validation import Severity
from app.services.races import (
    MAX_CONTENT_SIZE,
    fetch_races,
    find_related_races,
    from_legacy_format,
    generate_race_page_from_course,
    get_bundled_races,
    load_races,
    parse_races,
    races_by_city,
    races_by_distance_type,
    region_from_country,
    validate_course_data,
)

_LEGACY = {
    "id": "hill-city-marathon",
    "name": "Hill City Marathon",
    "city": "Hill City",
    "country": "Canada",
    "distance": 42.195,
    "elevationGain": 320,
    "elevationLoss": 310,
    "startElevation": 200,
    "endElevation": 210,
    "raceDate": "2026-09-12",
    "website": "https://hillcity.example.com",
    "description": "A demanding loop through the river valley with three long climbs.",
}

_RealAsyncClient = httpx.AsyncClient


def _mock_client(handler):
    def factory(**kwargs):
        return _RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs)

    return factory


def _fetch(url, handler):
    with patch("app.services.races.httpx.AsyncClient", _mock_client(handler)):
        return asyncio.run(fetch_races(url))


class TestClassification:
    def test_legacy_conversion(self):
        course = from_legacy_format("hill-city", LegacyMarathonData.model_validate(_LEGACY))
        assert course.slug == "hill-city"
        assert course.route_key == "hill-city"
        assert course.distance_type == "marathon"
        assert course.difficulty == "hard"
        assert course.profile_type == "mountainous"
        assert course.elevation.net_change == -10
        assert course.source == "local"

    @pytest.mark.parametrize(
        "gain,start,end,profile",
        [
            (20, 10, 10, "flat"),
            (100, 10, 10, "rolling"),
            (200, 10, 10, "hilly"),
            (20, 150, 5, "net-downhill"),
            (20, 5, 150, "net-uphill"),
        ],
    )
    def test_profile_type(self, gain, start, end, profile):
        record = dict(_LEGACY, elevationGain=gain, startElevation=start, endElevation=end)
        course = from_legacy_format("x", LegacyMarathonData.model_validate(record))
        assert course.profile_type == profile

    @pytest.mark.parametrize("distance,kind", [(42.195, "marathon"), (21.0975, "half"), (10.0, "10k")])
    def test_distance_type(self, distance, kind):
        record = dict(_LEGACY, distance=distance)
        assert from_legacy_format("x", LegacyMarathonData.model_validate(record)).distance_type == kind

    def test_region_from_country(self):
        assert region_from_country("USA") == "north-america"
        assert region_from_country("Japan") == "asia-pacific"
        assert region_from_country("New Zealand") == "oceania"
        assert region_from_country("Atlantis") == "europe"


class TestLoading:
    def test_bundled_races(self):
        races = load_races()
        assert list(races)[:2] == ["boston", "chicago"]
        assert races["boston"].profile_type == "net-downhill"
        assert races["oslo-half"].distance_type == "half"

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "races.json"
        path.write_text(json.dumps({"hill-city": _LEGACY}), encoding="utf-8")
        assert list(load_races(path)) == ["hill-city"]

    def test_invalid_records_are_skipped(self):
        races = parse_races({"ok": _LEGACY, "broken": {"name": "No id"}})
        assert list(races) == ["ok"]

    def test_bundled_races_are_parsed_once(self):
        first = get_bundled_races()
        with patch("app.services.races.load_races") as mock_load:
            assert get_bundled_races() is first
        mock_load.assert_not_called()
        assert list(first) == list(load_races())

    def test_bundled_races_are_read_only(self):
        with pytest.raises(TypeError):
            get_bundled_races()["extra"] = get_bundled_races()["boston"]


class TestFetchRaces:
    def test_success_marks_remote_source(self):
        def handler(request):
            return httpx.Response(200, json={"hill-city": _LEGACY})

        races = _fetch("https://data.example.com/races.json", handler)
        assert races["hill-city"].source == "remote"

    def test_rejects_non_http_scheme(self):
        with pytest.raises(ValueError, match="Scheme"):
            asyncio.run(fetch_races("ftp://data.example.com/races.json"))

    def test_http_error_propagates(self):
        def handler(request):
            return httpx.Response(404)

        with pytest.raises(httpx.HTTPStatusError):
            _fetch("https://data.example.com/missing.json", handler)

    def test_non_object_body(self):
        def handler(request):
            return httpx.Response(200, json=[1, 2, 3])

        with pytest.raises(ValueError, match="JSON object"):
            _fetch("https://data.example.com/races.json", handler)

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"{not json")

        with pytest.raises(ValueError, match="not valid JSON"):
            _fetch("https://data.example.com/races.json", handler)

    def test_oversized_body(self):
        def handler(request):
            return httpx.Response(200, content=b" " * (MAX_CONTENT_SIZE + 1))

        with pytest.raises(RuntimeError):
            _fetch("https://data.example.com/races.json", handler)


class TestRacePage:
    def test_descriptor_from_course(self):
        page = generate_race_page_from_course(load_races()["boston"])
        assert page.id == "race:boston"
        assert page.path == "/race/boston"
        assert page.category == PageCategory.RACE
        assert page.h1 == "Boston Marathon Race Prep"
        assert page.preview_route_key == "boston"
        assert page.hub_page_id is None
        assert page.priority == 0.8
        assert SchemaType.SPORTS_EVENT in page.schema_types
        assert "challenging 248m elevation gain" in page.description
        assert "controlled downhill approach" in page.intro


class TestLookups:
    def test_related_races_ranking(self):
        related = find_related_races("chicago", load_races(), limit=3)
        assert [r.route_key for r in related] == ["berlin", "boston", "tokyo"]

    def test_related_races_unknown_key(self):
        assert find_related_races("nowhere", load_races()) == []

    def test_by_city_is_case_insensitive(self):
        assert [r.route_key for r in races_by_city("berlin", load_races())] == ["berlin"]

    def test_by_distance_type(self):
        assert [r.route_key for r in races_by_distance_type("half", load_races())] == ["oslo-half"]


class TestValidateCourseData:
    def test_sparse_record_loses_points(self):
        course = from_legacy_format("hill-city", LegacyMarathonData.model_validate(_LEGACY))
        result = validate_course_data(course)
        assert result.is_valid
        fields = [i.field for i in result.warnings]
        assert "description" in fields
        assert "route.thumbnail_points" in fields
        assert "faq" in fields
        assert [i.field for i in result.info] == ["pace_strategy"]
        # three warnings and one info
        assert result.score == 100 - 3 * 5 - 1

    def test_errors_invalidate(self):
        record = dict(_LEGACY, website="hillcity.example.com", distance=-1)
        course = from_legacy_format("x", LegacyMarathonData.model_validate(record))
        result = validate_course_data(course)
        assert not result.is_valid
        assert {i.field for i in result.errors} == {"event.website", "distance"}

    def test_duplicate_faq_question(self):
        faq = [
            RaceFaq(question="Is the course fast for a PR?", answer="x" * 60),
            RaceFaq(question="is the course fast for a pr?", answer="y" * 60),
        ]
        strategy = PaceStrategy(type="even-pace", summary="s" * 60)
        course = from_legacy_format("x", LegacyMarathonData.model_validate(_LEGACY)).model_copy(
            update={"faq": faq, "pace_strategy": strategy}
        )
        result = validate_course_data(course)
        assert [i.field for i in result.errors] == ["faq[1].question"]
        assert all(i.severity == Severity.ERROR for i in result.errors)
