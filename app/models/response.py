from typing import Any, Dict, List

from pydantic import BaseModel

from app.models.metadata import DiscoveryTags, HeadProps
from app.models.page import LinkingContext, PageCategory
from app.models.race import CourseValidationResult, MarathonSummary
from app.models.validation import BatchValidationResult, PrePublishResult, QualityReport


class PageSummary(BaseModel):
    id: str
    path: str
    category: PageCategory
    title: str


class PageListResponse(BaseModel):
    total: int
    pages: List[PageSummary]


class PageSeoResponse(BaseModel):
    page_id: str
    discovery: DiscoveryTags
    head: HeadProps
    structured_data: Dict[str, Any]
    """JSON-LD document with an ``@graph`` of every applicable block."""
    linking: LinkingContext


class ValidateResponse(BaseModel):
    result: BatchValidationResult
    report: QualityReport
    pre_publish: PrePublishResult
    exit_code: int
    ci_report: str


class RaceDetailResponse(BaseModel):
    race: MarathonSummary
    related: List[MarathonSummary]
    validation: CourseValidationResult


class RaceImportResponse(BaseModel):
    source_url: str
    races: List[MarathonSummary]
    validation: Dict[str, CourseValidationResult]
    pages: List[PageSummary]
