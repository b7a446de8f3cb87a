"""Content-quality validation for single pages and whole catalogues.

Validators never raise on bad content: every finding is returned as a
:class:`~app.models.validation.ValidationIssue` so a build always sees the
complete picture.  Only :func:`run_pre_publish_checks` and
:func:`get_ci_exit_code` turn findings into a pass/fail decision.
"""

import logging
import re
from collections import Counter
from typing import Dict, List, Optional, Sequence

from app.config import DEFAULT_HUBS, DEFAULT_SITE, DEFAULT_THRESHOLDS, SiteConfig, ValidationThresholds
from app.models.hub import HubRegistry
from app.models.page import PageDescriptor
from app.models.validation import (
    BatchValidationResult,
    IssueCounts,
    PageValidationResult,
    PrePublishResult,
    QualityReport,
    ReportSection,
    ReportSummary,
    Severity,
    ValidationIssue,
)
from app.services.deduplicator import detect_cannibalization, validate_content_uniqueness
from app.services.discovery import build_discovery_tags, validate_discovery_tags
from app.services.linking import validate_internal_links

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("id", "slug", "path", "title", "description")
_VALID_PATH_RE = re.compile(r"^/[a-z0-9\-/]+$")

# Intro length below which the pre-publish gate treats a page as thin
_THIN_INTRO_LENGTH = 20
# Share of thin pages above which publishing is blocked
_THIN_CONTENT_RATIO = 0.1
# Duplicate groups tolerated before CI fails
_MAX_CI_DUPLICATES = 10


def _issue(
    page: PageDescriptor,
    field: str,
    message: str,
    severity: Severity,
    suggestion: Optional[str] = None,
) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        message=message,
        severity=severity,
        suggestion=suggestion,
        page_id=page.id or None,
    )


def validate_page(
    page: PageDescriptor,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
) -> PageValidationResult:
    """Score *page* out of 100.

    Each violated rule deducts a fixed amount.  Missing required content is an
    error and makes the page invalid; everything else is a warning that only
    lowers the score.  A missing call-to-action costs 10 points but does not
    invalidate the page.
    """
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    info: List[ValidationIssue] = []
    score = 100

    def error(field: str, message: str, points: int) -> None:
        nonlocal score
        errors.append(_issue(page, field, message, Severity.ERROR))
        score -= points

    def warn(field: str, message: str, points: int, suggestion: Optional[str] = None) -> None:
        nonlocal score
        warnings.append(_issue(page, field, message, Severity.WARNING, suggestion))
        score -= points

    # Required fields
    for field, label in (("id", "Page ID"), ("slug", "Slug"), ("path", "Path")):
        if not getattr(page, field):
            error(field, f"{label} is required", 20)

    title = page.title
    if not title:
        error("title", "Title is required", 20)
    else:
        if len(title) < thresholds.min_title_length:
            warn(
                "title",
                f"Title is too short ({len(title)} chars, min {thresholds.min_title_length})",
                5,
                "Add more descriptive keywords to the title",
            )
        if len(title) > thresholds.max_title_length:
            warn(
                "title",
                f"Title may be truncated ({len(title)} chars, max {thresholds.max_title_length})",
                5,
                "Shorten the title to prevent truncation in search results",
            )
        if "|" not in title and "-" not in title:
            info.append(
                _issue(
                    page,
                    "title",
                    "Title lacks brand separator",
                    Severity.INFO,
                    'Consider adding "| TrainPace" to the title',
                )
            )

    description = page.description
    if not description:
        error("description", "Description is required", 20)
    else:
        if len(description) < thresholds.min_description_length:
            warn(
                "description",
                f"Description is too short ({len(description)} chars, "
                f"min {thresholds.min_description_length})",
                5,
                "Add more detail to improve click-through rate",
            )
        if len(description) > thresholds.max_description_length:
            warn(
                "description",
                f"Description may be truncated ({len(description)} chars, "
                f"max {thresholds.max_description_length})",
                3,
                "Shorten to prevent truncation",
            )

    if not page.h1:
        error("h1", "H1 heading is required", 15)
    elif len(page.h1) > thresholds.max_h1_length:
        warn("h1", f"H1 is long ({len(page.h1)} chars)", 2, "Consider a more concise heading")

    if not page.intro:
        error("intro", "Intro paragraph is required", 10)
    elif len(page.intro) < thresholds.min_intro_length:
        warn(
            "intro",
            f"Intro is thin ({len(page.intro)} chars)",
            5,
            "Expand the introduction for better content depth",
        )

    if len(page.bullets) < thresholds.min_bullets:
        warn(
            "bullets",
            f"Few bullet points ({len(page.bullets)})",
            3,
            "Add more benefit-focused bullet points",
        )
    if len(page.bullets) > thresholds.max_bullets:
        warn(
            "bullets",
            f"Many bullet points ({len(page.bullets)})",
            0,
            "Consider condensing into fewer, more impactful points",
        )

    if page.cta is None or not page.cta.href or not page.cta.label:
        warn("cta", "CTA with href and label is required", 10, "Add a call-to-action linking to the tool")

    if page.faq:
        for position, item in enumerate(page.faq, start=1):
            if not item.question.strip() or not item.answer.strip():
                error("faq", f"FAQ item {position} has an empty question or answer", 0)
        if len(page.faq) >= thresholds.min_faq_items:
            short = [f for f in page.faq if len(f.answer) < thresholds.min_faq_answer_length]
            if short:
                warn(
                    "faq",
                    f"{len(short)} FAQ answer(s) are too short",
                    2,
                    "Expand FAQ answers to provide more value",
                )
    else:
        warn("faq", "No FAQ items", 5, "Add FAQs to improve SEO and enable rich snippets")

    if page.how_to is None:
        warn("howTo", "No HowTo schema", 3, "Add HowTo content for featured snippet eligibility")
    elif not page.how_to.steps:
        error("howTo", "HowTo must have at least one step", 0)

    return PageValidationResult(
        page_id=page.id,
        is_valid=not errors,
        score=max(0, score),
        errors=errors,
        warnings=warnings,
        info=info,
    )


def validate_all_pages(
    pages: Sequence[PageDescriptor],
    hubs: HubRegistry = DEFAULT_HUBS,
    thresholds: ValidationThresholds = DEFAULT_THRESHOLDS,
    site: SiteConfig = DEFAULT_SITE,
) -> BatchValidationResult:
    """Validate every page, then run the catalogue-wide checks.

    Per-page results keep catalogue order.  Uniqueness, cannibalization and
    link integrity are computed over the whole of *pages*.
    """
    page_results = [validate_page(page, thresholds) for page in pages]

    errors_by_field: Dict[str, int] = {}
    warnings_by_field: Dict[str, int] = {}
    total_score = 0
    valid_pages = 0
    for result in page_results:
        total_score += result.score
        if result.is_valid:
            valid_pages += 1
        for issue in result.errors:
            errors_by_field[issue.field] = errors_by_field.get(issue.field, 0) + 1
        for issue in result.warnings:
            warnings_by_field[issue.field] = warnings_by_field.get(issue.field, 0) + 1

    average_score = round(total_score / len(page_results)) if page_results else 0

    result = BatchValidationResult(
        total_pages=len(page_results),
        valid_pages=valid_pages,
        invalid_pages=len(page_results) - valid_pages,
        average_score=average_score,
        errors_by_field=errors_by_field,
        warnings_by_field=warnings_by_field,
        page_results=page_results,
        duplicate_issues=validate_content_uniqueness(pages, thresholds.max_content_similarity),
        cannibalization_issues=detect_cannibalization(pages, site),
        linking_issues=validate_internal_links(pages, hubs),
    )

    logger.info(
        "Validated %d pages: %d valid, average score %d, %d duplicate groups, "
        "%d keyword conflicts, %d broken links",
        result.total_pages,
        result.valid_pages,
        result.average_score,
        len(result.duplicate_issues.duplicates),
        len(result.cannibalization_issues.conflicts),
        len(result.linking_issues.broken_links),
    )
    return result


def _grade(score: int) -> str:
    if score >= 90:
        return "A"
    if score >= 80:
        return "B"
    if score >= 70:
        return "C"
    if score >= 60:
        return "D"
    return "F"


def generate_quality_report(result: BatchValidationResult) -> QualityReport:
    duplicates = result.duplicate_issues
    cannibalization = result.cannibalization_issues
    linking = result.linking_issues

    if result.valid_pages == result.total_pages:
        quality_status = "pass"
    elif result.valid_pages > result.total_pages * 0.9:
        quality_status = "warn"
    else:
        quality_status = "fail"

    error_summary = ", ".join(f"{count} {field} errors" for field, count in result.errors_by_field.items())

    sections = [
        ReportSection(
            name="Content Quality",
            status=quality_status,
            details=[
                f"{result.valid_pages}/{result.total_pages} pages pass validation",
                f"Average quality score: {result.average_score}/100",
                error_summary or "No critical errors",
            ],
        ),
        ReportSection(
            name="Content Uniqueness",
            status="pass" if duplicates.is_unique else ("fail" if len(duplicates.duplicates) > 5 else "warn"),
            details=[
                "All content is unique"
                if duplicates.is_unique
                else f"{len(duplicates.duplicates)} duplicate issues found",
                f"{len(duplicates.similar_content)} pairs with high similarity",
            ],
        ),
        ReportSection(
            name="Keyword Targeting",
            status="warn" if cannibalization.has_issues else "pass",
            details=[
                f"{len(cannibalization.conflicts)} potential cannibalization issues"
                if cannibalization.has_issues
                else "No keyword cannibalization detected"
            ],
        ),
        ReportSection(
            name="Internal Linking",
            status="pass" if linking.is_valid else ("fail" if linking.broken_links else "warn"),
            details=[
                "All internal links are valid"
                if linking.is_valid
                else f"{len(linking.broken_links)} broken links",
                f"{len(linking.orphan_pages)} orphan pages (no incoming links)",
            ],
        ),
    ]

    recommendations: List[str] = []
    if result.average_score < 80:
        recommendations.append("Improve content quality by ensuring all pages have FAQs and HowTo schemas")
    if not duplicates.is_unique:
        recommendations.append("Review duplicate content and add more variation to titles and descriptions")
    if cannibalization.has_issues:
        recommendations.append("Differentiate page titles to avoid competing for the same keywords")
    if linking.orphan_pages:
        recommendations.append("Add internal links to orphan pages to improve discoverability")
    if result.errors_by_field.get("title"):
        recommendations.append("Fix missing or malformed titles on affected pages")
    if result.errors_by_field.get("description"):
        recommendations.append("Add meta descriptions to all pages")

    return QualityReport(
        summary=ReportSummary(
            grade=_grade(result.average_score),
            score=result.average_score,
            total_pages=result.total_pages,
            issues=IssueCounts(
                critical=sum(result.errors_by_field.values()),
                major=len(duplicates.duplicates) + len(cannibalization.conflicts),
                minor=sum(result.warnings_by_field.values()),
            ),
        ),
        sections=sections,
        recommendations=recommendations,
    )


def _duplicated(values: Sequence[str]) -> List[str]:
    counts = Counter(value for value in values if value)
    return [value for value, count in counts.items() if count > 1]


def run_pre_publish_checks(
    pages: Sequence[PageDescriptor],
    site: SiteConfig = DEFAULT_SITE,
) -> PrePublishResult:
    """Release gate: block on structural problems, warn on the rest.

    Every check runs over the whole catalogue before the verdict is made.
    """
    blockers: List[str] = []
    warnings: List[str] = []

    missing = [p for p in pages if any(not getattr(p, field) for field in _REQUIRED_FIELDS)]
    if missing:
        blockers.append(f"{len(missing)} pages missing required fields")

    duplicate_ids = _duplicated([p.id for p in pages])
    if duplicate_ids:
        blockers.append(f"{len(duplicate_ids)} duplicate ids detected")

    duplicate_paths = _duplicated([p.path for p in pages])
    if duplicate_paths:
        blockers.append(f"{len(duplicate_paths)} duplicate paths detected")

    thin = [
        p for p in pages
        if not p.intro or len(p.intro) < _THIN_INTRO_LENGTH or not p.bullets
    ]
    if thin:
        if len(thin) > len(pages) * _THIN_CONTENT_RATIO:
            blockers.append(f"{len(thin)} pages have thin/empty content")
        else:
            warnings.append(f"{len(thin)} pages have thin content")

    invalid_paths = [p for p in pages if not _VALID_PATH_RE.match(p.path)]
    if invalid_paths:
        warnings.append(f"{len(invalid_paths)} pages have potentially invalid URL paths")

    meta_issues = [
        p for p in pages
        if not validate_discovery_tags(build_discovery_tags(p, site=site)).is_valid
    ]
    if meta_issues:
        warnings.append(f"{len(meta_issues)} pages have meta tag issues")

    if blockers:
        logger.warning("Pre-publish checks failed: %s", "; ".join(blockers))

    return PrePublishResult(can_publish=not blockers, blockers=blockers, warnings=warnings)


def format_for_ci(result: BatchValidationResult) -> str:
    """Plain-text report for build logs."""
    rule = "=" * 60
    lines = [
        rule,
        "SEO VALIDATION REPORT",
        rule,
        "",
        f"Total Pages: {result.total_pages}",
        f"Valid Pages: {result.valid_pages}",
        f"Average Score: {result.average_score}/100",
        "",
    ]

    for heading, by_field in (("ERRORS:", result.errors_by_field), ("WARNINGS:", result.warnings_by_field)):
        if by_field:
            lines.append(heading)
            lines.extend(f"  - {field}: {count} issues" for field, count in by_field.items())
            lines.append("")

    if not result.duplicate_issues.is_unique:
        lines.append("DUPLICATE CONTENT:")
        lines.append(f"  - {len(result.duplicate_issues.duplicates)} duplicate issues")
        lines.append("")

    if result.cannibalization_issues.has_issues:
        lines.append("KEYWORD CANNIBALIZATION:")
        lines.append(f"  - {len(result.cannibalization_issues.conflicts)} conflicts")
        lines.append("")

    if not result.linking_issues.is_valid:
        lines.append("LINKING ISSUES:")
        lines.append(f"  - {len(result.linking_issues.broken_links)} broken links")
        lines.append(f"  - {len(result.linking_issues.orphan_pages)} orphan pages")
        lines.append("")

    lines.append(rule)
    return "\n".join(lines)


def get_ci_exit_code(result: BatchValidationResult) -> int:
    if result.invalid_pages > 0:
        return 1
    if len(result.duplicate_issues.duplicates) > _MAX_CI_DUPLICATES:
        return 1
    if result.linking_issues.broken_links:
        return 1
    return 0
