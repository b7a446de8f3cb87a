"""Race course records: loading, classification and race-guide descriptors."""

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from app.models.metadata import RaceEventData
from app.models.page import (
    CallToAction,
    ChangeFrequency,
    ContentVariables,
    FaqItem,
    HowTo,
    HowToStep,
    PageCategory,
    PageDescriptor,
    SchemaType,
)
from app.models.race import (
    CourseDifficulty,
    CourseElevation,
    CoursePoint,
    CourseProfileType,
    CourseRoute,
    CourseValidationResult,
    LegacyMarathonData,
    MarathonCourseData,
    MarathonRegion,
    MarathonSummary,
    PaceStrategy,
    RaceDistanceType,
    RaceEventInfo,
    RaceFaq,
)
from app.models.validation import Severity, ValidationIssue
from app.services.normalizer import generate_page_id

logger = logging.getLogger(__name__)

BUNDLED_RACES = Path(__file__).resolve().parent.parent / "data" / "races.json"

TIMEOUT = 10  # seconds
MAX_CONTENT_SIZE = 5 * 1024 * 1024  # 5 MB
ALLOWED_SCHEMES = {"http", "https"}

_STANDARD_DISTANCES_KM = (5.0, 10.0, 21.0975, 42.195, 50.0, 100.0)

_REGION_KEYWORDS: Dict[str, tuple] = {
    "north-america": ("usa", "united states", "canada", "mexico"),
    "europe": (
        "uk", "england", "germany", "france", "italy", "spain", "netherlands", "norway",
        "sweden", "denmark", "finland", "ireland", "portugal", "greece", "switzerland",
        "austria", "belgium", "czech", "iceland", "turkey",
    ),
    "asia-pacific": ("japan", "china", "korea", "singapore", "hong kong", "taiwan", "india", "thailand"),
    "oceania": ("australia", "new zealand"),
    "middle-east": ("dubai", "uae", "qatar", "israel", "saudi"),
    "south-america": ("brazil", "argentina", "chile", "colombia", "peru"),
    "africa": ("south africa", "kenya", "morocco", "egypt"),
}


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def region_from_country(country: str) -> MarathonRegion:
    """Map a free-text country name onto a region; unknown countries map to Europe."""
    country_lower = country.lower()
    for region, keywords in _REGION_KEYWORDS.items():
        if any(keyword in country_lower for keyword in keywords):
            return region  # type: ignore[return-value]
    return "europe"


def _profile_type(gain: float, start: float, end: float) -> CourseProfileType:
    net_change = start - end
    if net_change > 50:
        return "net-downhill"
    if net_change < -50:
        return "net-uphill"
    if gain < 50:
        return "flat"
    if gain < 150:
        return "rolling"
    if gain < 300:
        return "hilly"
    return "mountainous"


def _difficulty(gain: float) -> CourseDifficulty:
    if gain < 50:
        return "easy"
    if gain < 150:
        return "moderate"
    if gain < 300:
        return "challenging"
    if gain < 500:
        return "hard"
    return "extreme"


def _distance_type(distance_km: float) -> RaceDistanceType:
    if distance_km > 42:
        return "marathon"
    if distance_km > 21:
        return "half"
    return "10k"


def from_legacy_format(key: str, legacy: LegacyMarathonData) -> MarathonCourseData:
    """Convert a flat legacy record into a :class:`MarathonCourseData`.

    The record key doubles as slug and route key.
    """
    return MarathonCourseData(
        id=legacy.id,
        slug=key,
        route_key=key,
        event=RaceEventInfo(
            name=legacy.name,
            city=legacy.city,
            country=legacy.country,
            race_date=legacy.raceDate,
            website=legacy.website,
        ),
        distance=legacy.distance,
        distance_type=_distance_type(legacy.distance),
        elevation=CourseElevation(
            gain=legacy.elevationGain,
            loss=legacy.elevationLoss,
            net_change=legacy.startElevation - legacy.endElevation,
            start_elevation=legacy.startElevation,
            end_elevation=legacy.endElevation,
        ),
        profile_type=_profile_type(legacy.elevationGain, legacy.startElevation, legacy.endElevation),
        difficulty=_difficulty(legacy.elevationGain),
        route=CourseRoute(thumbnail_points=legacy.thumbnailPoints),
        description=legacy.description,
        pace_strategy=legacy.paceStrategy,
        tips=legacy.tips,
        fueling_notes=legacy.fuelingNotes,
        faq=legacy.faq,
        source="local",
    )


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def parse_races(raw: Dict[str, dict], source: str = "local") -> Dict[str, MarathonCourseData]:
    """Parse a ``{route_key: legacy record}`` mapping.

    Records that fail validation are skipped with a warning so that one bad
    entry does not take the whole catalogue down.
    """
    races: Dict[str, MarathonCourseData] = {}
    for key, record in raw.items():
        try:
            legacy = LegacyMarathonData.model_validate(record)
        except ValidationError as exc:
            logger.warning("Skipping race record %s: %s", key, exc.errors()[0].get("msg"))
            continue
        races[key] = from_legacy_format(key, legacy).model_copy(update={"source": source})
    return races


def load_races(path: Union[str, Path] = BUNDLED_RACES) -> Dict[str, MarathonCourseData]:
    """Load race records from a JSON file on disk."""
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)
    races = parse_races(raw)
    logger.info("Loaded %d race records from %s", len(races), path)
    return races


@lru_cache(maxsize=1)
def get_bundled_races() -> Mapping[str, MarathonCourseData]:
    """Bundled race records, parsed once per process and exposed read-only."""
    return MappingProxyType(load_races())


def _validate_url(url: str) -> None:
    """Raise ValueError if *url* is not a plain http(s) URL."""
    parsed = urlparse(url)
    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")
    if not parsed.hostname:
        raise ValueError("URL must have a valid hostname.")


async def fetch_races(url: str) -> Dict[str, MarathonCourseData]:
    """Fetch race records published as JSON at *url*.

    Raises:
        ValueError: if the URL scheme is not allowed or the body is not a JSON object.
        httpx.HTTPError: on network or HTTP errors.
        RuntimeError: if the response body exceeds MAX_CONTENT_SIZE.
    """
    _validate_url(url)

    async with httpx.AsyncClient(follow_redirects=True, timeout=TIMEOUT) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch race data from %s: %s", url, exc)
            raise

    if len(response.content) > MAX_CONTENT_SIZE:
        raise RuntimeError("Response body exceeds the maximum allowed size.")

    try:
        raw = response.json()
    except json.JSONDecodeError as exc:
        raise ValueError(f"Race data at {url} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError("Race data must be a JSON object keyed by route key.")

    return parse_races(raw, source="remote")


# ---------------------------------------------------------------------------
# Descriptor generation
# ---------------------------------------------------------------------------

def _distance_label(data: MarathonCourseData) -> str:
    if data.distance_type == "marathon":
        return "marathon"
    if data.distance_type == "half":
        return "half marathon"
    return f"{data.distance:.1f}km"


def _elevation_note(gain: float) -> str:
    if gain < 100:
        return "flat course perfect for PRs"
    if gain < 200:
        return "rolling terrain"
    return f"challenging {round(gain)}m elevation gain"


def _race_description(data: MarathonCourseData) -> str:
    return (
        f"{data.event.name} race prep: {_distance_label(data)} in {data.event.city}. "
        f"{_elevation_note(data.elevation.gain)}. Get training paces, build a fueling plan, "
        "and analyze the course elevation."
    )


def _race_intro(data: MarathonCourseData) -> str:
    strategy_note = ""
    if data.pace_strategy:
        strategy_note = f" The course favors a {data.pace_strategy.type.replace('-', ' ')} approach."
    return (
        f"Use TrainPace to prepare for {data.event.name}: set training paces from a recent race, "
        f"build a simple fueling plan, and review the course profile.{strategy_note}"
    )


def _race_bullets(data: MarathonCourseData) -> List[str]:
    return [
        "Pace calculator: training zones from your fitness level",
        "Fuel planner: carbs/hour target and gel timing",
        f"Course: {data.distance:.1f} km with {round(data.elevation.gain)}m gain / "
        f"{round(data.elevation.loss)}m loss",
    ]


def _race_how_to(data: MarathonCourseData) -> HowTo:
    name = data.event.name
    return HowTo(
        name=f"How to prepare for {name}",
        description=f"Plan pacing, fueling, and course strategy for {name}.",
        total_time="PT10M",
        tool="TrainPace",
        steps=[
            HowToStep(
                name="Set a realistic goal time",
                text="Use a recent race result or time trial to establish your current fitness level.",
            ),
            HowToStep(
                name="Calculate training paces",
                text="Generate Easy, Tempo, Threshold, and Interval paces from your goal time.",
            ),
            HowToStep(
                name="Build a fueling plan",
                text="Estimate carbs per hour and create a gel timing schedule for race day.",
            ),
            HowToStep(
                name="Review the course",
                text=f"Study the {name} elevation profile to identify key climbs and plan pacing adjustments.",
            ),
            HowToStep(
                name="Practice the plan",
                text="Test your pacing and fueling strategy in long training runs before race day.",
            ),
        ],
    )


def generate_race_page_from_course(data: MarathonCourseData) -> PageDescriptor:
    """Build the race-guide descriptor for one course record."""
    event = data.event
    faqs = [FaqItem(question=f.question, answer=f.answer) for f in data.faq]

    return PageDescriptor(
        id=generate_page_id(PageCategory.RACE, data.slug),
        slug=data.slug,
        path=f"/race/{data.slug}",
        category=PageCategory.RACE,
        title=f"{event.name} Race Prep - Pace, Fueling & Course Strategy | TrainPace",
        description=_race_description(data),
        h1=f"{event.name} Race Prep",
        intro=_race_intro(data),
        bullets=_race_bullets(data),
        cta=CallToAction(href="/calculator", label="Start With Pacing"),
        preview_route_key=data.route_key,
        faq=faqs or None,
        how_to=_race_how_to(data),
        variables=ContentVariables(
            slug=data.slug,
            name=event.name,
            display_name=event.name,
            city=event.city,
            country=event.country,
            region=region_from_country(event.country),
            event_name=event.name,
            event_date=event.race_date,
            elevation_gain=data.elevation.gain,
            elevation_loss=data.elevation.loss,
            distance=f"{data.distance:.1f} km",
            distance_km=data.distance,
            race_type=data.distance_type,
            difficulty=data.difficulty,
            custom={
                "profileType": data.profile_type,
                "paceStrategyType": data.pace_strategy.type if data.pace_strategy else "even-pace",
            },
        ),
        schema_types=[
            SchemaType.SPORTS_EVENT,
            SchemaType.FAQ_PAGE,
            SchemaType.HOW_TO,
            SchemaType.BREADCRUMB_LIST,
        ],
        priority=0.8 if data.distance_type == "marathon" else 0.7,
        changefreq=ChangeFrequency.MONTHLY,
    )


def to_race_event_data(data: MarathonCourseData) -> RaceEventData:
    event = data.event
    return RaceEventData(
        name=event.name,
        description=data.description,
        city=event.city,
        country=event.country,
        race_date=event.race_date or None,
        website=event.website or None,
        organizer=event.organizer,
    )


def to_summary(data: MarathonCourseData) -> MarathonSummary:
    return MarathonSummary(
        id=data.id,
        slug=data.slug,
        route_key=data.route_key,
        name=data.event.name,
        city=data.event.city,
        country=data.event.country,
        distance=data.distance,
        distance_type=data.distance_type,
        elevation_gain=data.elevation.gain,
        profile_type=data.profile_type,
        difficulty=data.difficulty,
        race_date=data.event.race_date,
    )


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def find_related_races(
    route_key: str,
    races: Mapping[str, MarathonCourseData],
    limit: int = 5,
) -> List[MarathonSummary]:
    """Rank the other races by similarity to *route_key*.

    Same distance type scores 3, same region 2, same difficulty 2, elevation
    gain within 50 m 1 and same profile 1. Ties keep the input order.
    """
    current = races.get(route_key)
    if current is None:
        return []

    region = region_from_country(current.event.country)
    scored = []
    for key, other in races.items():
        if key == route_key:
            continue
        summary = to_summary(other)
        score = 0
        if summary.distance_type == current.distance_type:
            score += 3
        if region_from_country(summary.country) == region:
            score += 2
        if summary.difficulty == current.difficulty:
            score += 2
        if abs(summary.elevation_gain - current.elevation.gain) < 50:
            score += 1
        if summary.profile_type == current.profile_type:
            score += 1
        scored.append((score, summary))

    scored.sort(key=lambda item: item[0], reverse=True)
    return [summary for _, summary in scored[:limit]]


def races_by_city(city: str, races: Mapping[str, MarathonCourseData]) -> List[MarathonSummary]:
    city_lower = city.lower()
    return [to_summary(r) for r in races.values() if r.event.city.lower() == city_lower]


def races_by_distance_type(
    distance_type: RaceDistanceType,
    races: Mapping[str, MarathonCourseData],
) -> List[MarathonSummary]:
    return [to_summary(r) for r in races.values() if r.distance_type == distance_type]


# ---------------------------------------------------------------------------
# Course record validation
# ---------------------------------------------------------------------------

def _issue(field: str, message: str, severity: Severity, suggestion: Optional[str] = None) -> ValidationIssue:
    return ValidationIssue(field=field, message=message, severity=severity, suggestion=suggestion)


def _check_points(points: List[CoursePoint], field: str) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    if not points:
        return [
            _issue(
                field,
                f"{field} is empty or missing",
                Severity.WARNING,
                "Add at least 10-15 points for basic course representation",
            )
        ]
    if len(points) < 10:
        issues.append(
            _issue(
                field,
                f"{field} has only {len(points)} points",
                Severity.WARNING,
                "Consider adding more points for better course representation",
            )
        )

    for i, point in enumerate(points):
        if not -90 <= point.lat <= 90:
            issues.append(_issue(f"{field}[{i}].lat", f"Invalid latitude: {point.lat}", Severity.ERROR))
        if not -180 <= point.lng <= 180:
            issues.append(_issue(f"{field}[{i}].lng", f"Invalid longitude: {point.lng}", Severity.ERROR))
        if point.ele is not None and not -500 <= point.ele <= 9000:
            issues.append(
                _issue(f"{field}[{i}].ele", f"Suspicious elevation value: {point.ele}m", Severity.WARNING)
            )
        previous = points[i - 1] if i > 0 else None
        if previous is not None and point.dist is not None and previous.dist is not None:
            if point.dist <= previous.dist:
                issues.append(
                    _issue(
                        f"{field}[{i}].dist",
                        f"Distance not increasing: {point.dist} <= {previous.dist}",
                        Severity.WARNING,
                    )
                )
    return issues


def _check_elevation(elevation: CourseElevation) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    if elevation.gain < 0:
        issues.append(
            _issue("elevation.gain", f"Elevation gain cannot be negative: {elevation.gain}", Severity.ERROR)
        )
    if elevation.loss < 0:
        issues.append(
            _issue("elevation.loss", f"Elevation loss cannot be negative: {elevation.loss}", Severity.ERROR)
        )
    if elevation.gain > 2000:
        issues.append(
            _issue(
                "elevation.gain",
                f"Very high elevation gain: {elevation.gain}m",
                Severity.WARNING,
                "Verify this is correct for a road marathon",
            )
        )
    calculated = elevation.start_elevation - elevation.end_elevation
    if abs(calculated - elevation.net_change) > 1:
        issues.append(
            _issue(
                "elevation.net_change",
                f"Net change inconsistent: stated {elevation.net_change}m vs calculated {calculated}m",
                Severity.WARNING,
            )
        )
    return issues


def _check_event(event: RaceEventInfo) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for field, label in (("name", "Event name"), ("city", "City"), ("country", "Country")):
        if not getattr(event, field):
            issues.append(_issue(f"event.{field}", f"{label} is missing", Severity.ERROR))
    if not event.website:
        issues.append(_issue("event.website", "Official website URL is missing", Severity.WARNING))
    elif not event.website.startswith("http"):
        issues.append(
            _issue("event.website", "Website URL should start with http:// or https://", Severity.ERROR)
        )
    if not event.race_date:
        issues.append(_issue("event.race_date", "Race date is missing", Severity.WARNING))
    return issues


def _check_distance(distance: float) -> List[ValidationIssue]:
    if distance <= 0:
        return [_issue("distance", f"Invalid distance: {distance}", Severity.ERROR)]
    is_standard = any(abs(distance - d) < 0.5 for d in _STANDARD_DISTANCES_KM)
    if not is_standard and distance < 100:
        return [
            _issue(
                "distance",
                f"Non-standard distance: {distance}km",
                Severity.INFO,
                "Verify this is the correct distance",
            )
        ]
    return []


def _check_description(description: str) -> List[ValidationIssue]:
    if not description:
        return [_issue("description", "Description is missing", Severity.ERROR)]
    if len(description) < 100:
        return [
            _issue(
                "description",
                f"Description is too short: {len(description)} characters",
                Severity.WARNING,
                "Expand description to 100-300 characters",
            )
        ]
    if len(description) > 500:
        return [
            _issue(
                "description",
                "Description may be too long for SEO",
                Severity.INFO,
                "Consider trimming to under 300 characters for meta description",
            )
        ]
    return []


def _check_pace_strategy(strategy: Optional[PaceStrategy]) -> List[ValidationIssue]:
    if strategy is None:
        return [
            _issue(
                "pace_strategy",
                "No pace strategy defined",
                Severity.INFO,
                "Adding a pace strategy improves content value",
            )
        ]
    issues: List[ValidationIssue] = []
    if len(strategy.summary) < 50:
        issues.append(
            _issue(
                "pace_strategy.summary",
                "Pace strategy summary is too short",
                Severity.WARNING,
                "Add more detail to the strategy summary (50+ characters)",
            )
        )
    if not strategy.segments:
        issues.append(_issue("pace_strategy.segments", "No pace segments defined", Severity.WARNING))
    elif len(strategy.segments) < 4:
        issues.append(
            _issue(
                "pace_strategy.segments",
                f"Only {len(strategy.segments)} pace segments",
                Severity.INFO,
                "Consider adding more segments for detailed guidance",
            )
        )
    return issues


def _check_faqs(faqs: List[RaceFaq]) -> List[ValidationIssue]:
    if not faqs:
        return [_issue("faq", "No FAQs defined", Severity.WARNING, "Add 3-5 FAQs for SEO and user value")]

    issues: List[ValidationIssue] = []
    if len(faqs) < 3:
        issues.append(
            _issue("faq", f"Only {len(faqs)} FAQs", Severity.INFO, "Consider adding more FAQs (3-5 recommended)")
        )
    seen = set()
    for i, faq in enumerate(faqs):
        if len(faq.question) < 20:
            issues.append(_issue(f"faq[{i}].question", "FAQ question is too short", Severity.WARNING))
        if len(faq.answer) < 50:
            issues.append(
                _issue(
                    f"faq[{i}].answer",
                    "FAQ answer is too short",
                    Severity.WARNING,
                    "Expand answers to 50+ characters for better SEO",
                )
            )
        question = faq.question.lower()
        if question in seen:
            issues.append(_issue(f"faq[{i}].question", "Duplicate FAQ question", Severity.ERROR))
        seen.add(question)
    return issues


def validate_course_data(data: MarathonCourseData) -> CourseValidationResult:
    """Check a course record before it is turned into a page.

    Each error costs 20 points, each warning 5 and each info 1.
    """
    issues: List[ValidationIssue] = []
    for field in ("id", "slug", "route_key"):
        if not getattr(data, field):
            issues.append(_issue(field, f"{field} is missing", Severity.ERROR))

    issues.extend(_check_event(data.event))
    issues.extend(_check_distance(data.distance))
    issues.extend(_check_elevation(data.elevation))
    issues.extend(_check_description(data.description))
    issues.extend(_check_points(data.route.thumbnail_points if data.route else [], "route.thumbnail_points"))
    issues.extend(_check_pace_strategy(data.pace_strategy))
    issues.extend(_check_faqs(data.faq))

    errors = [i for i in issues if i.severity == Severity.ERROR]
    warnings = [i for i in issues if i.severity == Severity.WARNING]
    info = [i for i in issues if i.severity == Severity.INFO]

    score = 100 - len(errors) * 20 - len(warnings) * 5 - len(info)
    return CourseValidationResult(
        is_valid=not errors,
        score=max(0, min(100, score)),
        errors=errors,
        warnings=warnings,
        info=info,
    )
