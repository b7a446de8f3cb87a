"""Race course records consumed by the race-page adapter."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from app.models.validation import ValidationIssue

RaceDistanceType = Literal["5k", "10k", "half", "marathon", "ultra", "other"]
CourseDifficulty = Literal["easy", "moderate", "challenging", "hard", "extreme"]
CourseProfileType = Literal["flat", "rolling", "hilly", "mountainous", "net-downhill", "net-uphill"]
PaceStrategyType = Literal[
    "negative-split",
    "even-pace",
    "even-effort",
    "conservative-start",
    "controlled-downhill",
    "effort-based",
]
MarathonRegion = Literal[
    "north-america",
    "europe",
    "asia-pacific",
    "middle-east",
    "south-america",
    "africa",
    "oceania",
]

RACE_DISTANCES_KM = {
    "5k": 5.0,
    "10k": 10.0,
    "half": 21.0975,
    "marathon": 42.195,
    "ultra": 50.0,
    "other": 0.0,
}


class CoursePoint(BaseModel):
    lat: float
    lng: float
    ele: Optional[float] = None
    dist: Optional[float] = None  # km from start


class CourseElevation(BaseModel):
    gain: float
    loss: float
    net_change: float
    start_elevation: float
    end_elevation: float
    max_elevation: Optional[float] = None
    min_elevation: Optional[float] = None


class PaceSegment(BaseModel):
    miles: str
    terrain: str
    advice: str


class PaceStrategy(BaseModel):
    type: PaceStrategyType
    summary: str
    segments: List[PaceSegment] = Field(default_factory=list)


class RaceEventInfo(BaseModel):
    name: str
    city: str
    country: str
    race_date: str
    website: str
    organizer: Optional[str] = None
    founded_year: Optional[int] = None
    field_size: Optional[int] = None


class RaceFaq(BaseModel):
    question: str
    answer: str


class RaceTips(BaseModel):
    general: List[str] = Field(default_factory=list)
    course: List[str] = Field(default_factory=list)
    weather: List[str] = Field(default_factory=list)
    logistics: List[str] = Field(default_factory=list)


class CourseRoute(BaseModel):
    thumbnail_points: List[CoursePoint] = Field(default_factory=list)
    display_points: List[CoursePoint] = Field(default_factory=list)


class MarathonCourseData(BaseModel):
    id: str
    slug: str
    route_key: str

    event: RaceEventInfo

    distance: float  # km
    distance_type: RaceDistanceType
    elevation: CourseElevation
    profile_type: CourseProfileType
    difficulty: CourseDifficulty

    route: Optional[CourseRoute] = None

    description: str
    pace_strategy: Optional[PaceStrategy] = None
    tips: Union[RaceTips, List[str], None] = None
    fueling_notes: Optional[str] = None
    faq: List[RaceFaq] = Field(default_factory=list)

    source: Literal["local", "remote", "gpx-upload"] = "local"
    last_updated: Optional[str] = None


class MarathonSummary(BaseModel):
    id: str
    slug: str
    route_key: str
    name: str
    city: str
    country: str
    distance: float
    distance_type: RaceDistanceType
    elevation_gain: float
    profile_type: CourseProfileType
    difficulty: CourseDifficulty
    race_date: str


class LegacyMarathonData(BaseModel):
    """Flat record format of the bundled race data file."""

    id: str
    name: str
    city: str
    country: str
    distance: float
    elevationGain: float
    elevationLoss: float
    startElevation: float
    endElevation: float
    slug: Optional[str] = None
    raceDate: str = ""
    website: str = ""
    description: str = ""
    tips: List[str] = Field(default_factory=list)
    paceStrategy: Optional[PaceStrategy] = None
    fuelingNotes: Optional[str] = None
    faq: List[RaceFaq] = Field(default_factory=list)
    thumbnailPoints: List[CoursePoint] = Field(default_factory=list)


class CourseValidationResult(BaseModel):
    is_valid: bool
    score: int = Field(ge=0, le=100)
    errors: List[ValidationIssue]
    warnings: List[ValidationIssue]
    info: List[ValidationIssue] = Field(default_factory=list)
