"""Immutable build configuration.

Every setting lives on a frozen pydantic model with a module-level default.
Callers that need a different site, threshold set or chunk size construct
their own instance and pass it in explicitly.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.models.hub import HubConfig, HubRegistry, HubSection
from app.models.page import ChangeFrequency, PageCategory


class SiteConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str = "https://trainpace.com"
    site_name: str = "TrainPace"
    site_description: str = "Free running tools for pace calculation, race fueling, and elevation analysis."
    default_og_image_path: str = "/landing-page-2025.png"
    default_og_image_alt: str = "TrainPace - Free Running Tools"
    logo_path: str = "/trainpace-logo.png"
    twitter_site: str = "@trainpace"
    locale: str = "en_US"

    @property
    def brand_suffix(self) -> str:
        return f" | {self.site_name}"

    @property
    def default_og_image(self) -> str:
        return self.with_base_url(self.default_og_image_path)

    @property
    def logo_url(self) -> str:
        return self.with_base_url(self.logo_path)

    def with_base_url(self, path: str) -> str:
        """Join *path* onto the site's base URL."""
        return f"{self.base_url}{path if path.startswith('/') else '/' + path}"


class ValidationThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_title_length: int = 30
    max_title_length: int = 60
    min_description_length: int = 70
    max_description_length: int = 160
    max_h1_length: int = 70
    min_intro_length: int = 50
    min_bullets: int = 2
    max_bullets: int = 6
    min_faq_items: int = 2
    max_faq_items: int = 10
    min_faq_answer_length: int = 30
    max_content_similarity: float = 0.7


class ChunkConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_pages_per_chunk: int = Field(default=5000, ge=1)
    chunk_by_category: bool = True


class SitemapConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_url: str = "https://trainpace.com"
    default_changefreq: ChangeFrequency = ChangeFrequency.WEEKLY
    default_priority: float = 0.6
    # Search engines reject sitemap files with more URLs than this
    max_urls_per_sitemap: int = Field(default=50000, ge=1)


class PrerenderConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    concurrency: int = 10
    timeout_ms: int = 30000
    retries: int = 2
    batch_delay_ms: int = 100


DEFAULT_SITE = SiteConfig()
DEFAULT_THRESHOLDS = ValidationThresholds()
DEFAULT_CHUNK_CONFIG = ChunkConfig()
DEFAULT_SITEMAP_CONFIG = SitemapConfig()
DEFAULT_PRERENDER_CONFIG = PrerenderConfig()


def _sections(*names_and_descriptions: tuple) -> List[HubSection]:
    return [HubSection(name=name, description=desc) for name, desc in names_and_descriptions]


def default_hub_registry() -> HubRegistry:
    """Build the hub-and-spoke structure: one landing page per category."""
    return HubRegistry(
        hubs={
            PageCategory.PACE: HubConfig(
                id="pace:hub",
                slug="calculator",
                path="/calculator",
                category=PageCategory.PACE,
                title="Pace Calculator",
                description="Running pace calculator with VDOT training zones",
                h1="Running Pace Calculator",
                intro="Convert any race time into personalized training paces.",
                categories=_sections(
                    ("By Distance", "Pace calculators for specific race distances"),
                    ("By Goal Time", "Target-based pace calculators"),
                    ("Training Zones", "Specific training pace calculators"),
                ),
            ),
            PageCategory.FUEL: HubConfig(
                id="fuel:hub",
                slug="fuel",
                path="/fuel",
                category=PageCategory.FUEL,
                title="Fuel Planner",
                description="Marathon and half marathon fueling calculator",
                h1="Race Fuel Planner",
                intro="Build a personalized fueling plan for race day.",
                categories=_sections(
                    ("By Distance", "Fueling guides by race distance"),
                    ("Fueling Topics", "Specific fueling strategies and topics"),
                ),
            ),
            PageCategory.ELEVATION: HubConfig(
                id="elevation:hub",
                slug="elevationfinder",
                path="/elevationfinder",
                category=PageCategory.ELEVATION,
                title="Elevation Finder",
                description="GPX elevation profile analyzer",
                h1="Elevation Finder",
                intro="Analyze route elevation and plan your pacing strategy.",
                categories=_sections(
                    ("Analysis Tools", "GPX analysis and elevation tools"),
                    ("Platform Guides", "Guides for specific platforms (Strava, Garmin, etc.)"),
                    ("Strategy Guides", "Pacing and strategy for hilly courses"),
                ),
            ),
            PageCategory.RACE: HubConfig(
                id="race:hub",
                slug="race",
                path="/race",
                category=PageCategory.RACE,
                title="Race Prep",
                description="Race preparation guides and tools",
                h1="Race Prep",
                intro="Prepare for your next race with pacing, fueling, and course strategy.",
                categories=_sections(
                    ("World Marathon Majors", "Prep guides for the six World Marathon Majors"),
                    ("Popular Marathons", "Prep guides for other popular marathons"),
                    ("Half Marathons", "Prep guides for popular half marathons"),
                ),
            ),
            PageCategory.BLOG: HubConfig(
                id="blog:hub",
                slug="blog",
                path="/blog",
                category=PageCategory.BLOG,
                title="Blog",
                description="Running tips, training guides, and race strategy",
                h1="TrainPace Blog",
                intro="Expert running tips and training guides.",
                categories=_sections(
                    ("Training", "Training tips and guides"),
                    ("Nutrition", "Fueling and nutrition guides"),
                    ("Race Strategy", "Race day strategy and tips"),
                ),
            ),
        }
    )


DEFAULT_HUBS = default_hub_registry()
