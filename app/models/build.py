from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from app.models.page import ChangeFrequency, PageCategory

T = TypeVar("T")


class SitemapUrl(BaseModel):
    loc: str
    lastmod: Optional[str] = None
    changefreq: Optional[ChangeFrequency] = None
    priority: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class ManifestChunk(BaseModel):
    id: str
    path: str
    count: int
    category: Optional[PageCategory] = None


class ManifestTotals(BaseModel):
    pages: int = 0
    by_category: Dict[PageCategory, int] = Field(
        default_factory=lambda: {category: 0 for category in PageCategory}
    )


class DataManifest(BaseModel):
    """Index of chunk files used by lazy-loading build tooling."""

    version: str
    generated: str
    chunks: List[ManifestChunk] = Field(default_factory=list)
    totals: ManifestTotals = Field(default_factory=ManifestTotals)


class CacheEntry(BaseModel, Generic[T]):
    data: T
    timestamp: float  # seconds since the epoch
    hash: str


class BuildStats(BaseModel):
    total_pages: int
    pages_by_category: Dict[PageCategory, int]
    average_title_length: int
    average_description_length: int
    pages_with_faq: int
    pages_with_how_to: int
    estimated_build_time_minutes: int
