from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PageCategory(str, Enum):
    """Closed set of page categories; each maps to one hub."""

    PACE = "pace"
    FUEL = "fuel"
    ELEVATION = "elevation"
    RACE = "race"
    BLOG = "blog"


class SchemaType(str, Enum):
    WEB_PAGE = "WebPage"
    FAQ_PAGE = "FAQPage"
    HOW_TO = "HowTo"
    ARTICLE = "Article"
    BLOG_POSTING = "BlogPosting"
    SPORTS_EVENT = "SportsEvent"
    PRODUCT = "Product"
    SOFTWARE_APPLICATION = "SoftwareApplication"
    BREADCRUMB_LIST = "BreadcrumbList"
    ORGANIZATION = "Organization"
    WEB_SITE = "WebSite"


class ChangeFrequency(str, Enum):
    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


Scalar = Union[str, int, float, bool]


class FaqItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    answer: str


class HowToStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    text: str
    url: Optional[str] = None
    image: Optional[str] = None


class HowTo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    total_time: Optional[str] = None  # ISO 8601 duration, e.g. "PT5M"
    tool: Optional[str] = None
    supply: List[str] = Field(default_factory=list)
    steps: List[HowToStep] = Field(default_factory=list)


class CallToAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    href: str
    label: str
    variant: Optional[str] = None


class ExternalLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    label: str
    rel: Optional[str] = None


class ContentVariables(BaseModel):
    """Substitution values used while generating a descriptor.

    Well-known fields are typed; anything else goes into ``custom``.
    Templates use camelCase placeholders (``{{displayName}}``), which
    resolve through the field aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    slug: str
    name: str
    display_name: str = Field(default="", alias="displayName")

    distance: Optional[str] = None
    distance_km: Optional[float] = Field(default=None, alias="distanceKm")
    distance_miles: Optional[float] = Field(default=None, alias="distanceMiles")
    race_type: Optional[str] = Field(default=None, alias="raceType")

    city: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None

    event_name: Optional[str] = Field(default=None, alias="eventName")
    event_date: Optional[str] = Field(default=None, alias="eventDate")
    event_year: Optional[int] = Field(default=None, alias="eventYear")

    elevation_gain: Optional[float] = Field(default=None, alias="elevationGain")
    elevation_loss: Optional[float] = Field(default=None, alias="elevationLoss")
    difficulty: Optional[str] = None

    target_pace: Optional[str] = Field(default=None, alias="targetPace")
    target_time: Optional[str] = Field(default=None, alias="targetTime")
    carbs_per_hour: Optional[float] = Field(default=None, alias="carbsPerHour")

    custom: Dict[str, Scalar] = Field(default_factory=dict)


class ContentTemplate(BaseModel):
    title: str
    description: str
    h1: str
    intro: str
    bullets: List[str] = Field(default_factory=list)


class PageDescriptor(BaseModel):
    """One generated page.

    Descriptors are frozen for the duration of a build. Content fields
    default to empty values so that a malformed record can still be loaded
    and reported by the validator instead of failing at construction.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""
    slug: str = ""
    path: str = ""
    category: PageCategory

    title: str = ""
    description: str = ""
    h1: str = ""
    intro: str = ""
    bullets: List[str] = Field(default_factory=list)

    cta: Optional[CallToAction] = None

    faq: Optional[List[FaqItem]] = None
    how_to: Optional[HowTo] = None

    initial_inputs: Dict[str, Scalar] = Field(default_factory=dict)

    related_page_ids: List[str] = Field(default_factory=list)
    parent_page_id: Optional[str] = None
    hub_page_id: Optional[str] = None

    external_links: List[ExternalLink] = Field(default_factory=list)
    preview_route_key: Optional[str] = None

    variables: Optional[ContentVariables] = None

    canonical_url: Optional[str] = None
    no_index: bool = False
    priority: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    changefreq: Optional[ChangeFrequency] = None

    schema_types: List[SchemaType] = Field(default_factory=list)

    date_published: Optional[str] = None
    date_modified: Optional[str] = None


class InternalLink(BaseModel):
    """Link suggestion computed from the current catalogue; never stored on a descriptor."""

    page_id: str
    path: str
    title: str
    anchor: Optional[str] = None
    relevance_score: Optional[float] = None


class BreadcrumbItem(BaseModel):
    name: str
    url: str


class LinkingContext(BaseModel):
    current_page: PageDescriptor
    breadcrumbs: List[BreadcrumbItem]
    related_pages: List[InternalLink]
    hub_page: Optional[InternalLink] = None
    sibling_pages: List[InternalLink] = Field(default_factory=list)
