from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    field: str
    message: str
    severity: Severity
    suggestion: Optional[str] = None
    page_id: Optional[str] = None


class PageValidationResult(BaseModel):
    page_id: str
    is_valid: bool
    score: int = Field(ge=0, le=100)
    errors: List[ValidationIssue]
    warnings: List[ValidationIssue]
    info: List[ValidationIssue] = Field(default_factory=list)


class DuplicateGroup(BaseModel):
    field: Literal["title", "description", "h1"]
    page_ids: List[str]


class SimilarPair(BaseModel):
    page_id_1: str
    page_id_2: str
    similarity: float


class UniquenessResult(BaseModel):
    is_unique: bool
    duplicates: List[DuplicateGroup]
    similar_content: List[SimilarPair]


class CannibalizationConflict(BaseModel):
    keyword: str
    page_ids: List[str]
    suggestion: str


class CannibalizationResult(BaseModel):
    has_issues: bool
    conflicts: List[CannibalizationConflict]


class LinkValidationResult(BaseModel):
    is_valid: bool
    broken_links: List[str]
    orphan_pages: List[str]
    warnings: List[str]


class BatchValidationResult(BaseModel):
    total_pages: int
    valid_pages: int
    invalid_pages: int
    average_score: int
    errors_by_field: Dict[str, int]
    warnings_by_field: Dict[str, int]
    page_results: List[PageValidationResult]
    duplicate_issues: UniquenessResult
    cannibalization_issues: CannibalizationResult
    linking_issues: LinkValidationResult


SectionStatus = Literal["pass", "warn", "fail"]
Grade = Literal["A", "B", "C", "D", "F"]


class IssueCounts(BaseModel):
    critical: int
    major: int
    minor: int


class ReportSummary(BaseModel):
    grade: Grade
    score: int
    total_pages: int
    issues: IssueCounts


class ReportSection(BaseModel):
    name: str
    status: SectionStatus
    details: List[str]


class QualityReport(BaseModel):
    summary: ReportSummary
    sections: List[ReportSection]
    recommendations: List[str]


class PrePublishResult(BaseModel):
    can_publish: bool
    blockers: List[str]
    warnings: List[str]


class SchemaValidationResult(BaseModel):
    is_valid: bool
    errors: List[str]
    warnings: List[str]
