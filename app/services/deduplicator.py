"""Catalogue-wide duplicate and keyword-overlap detection.

Templated catalogues drift towards repetition: two generated pages can end up
with the same title, near-identical intro paragraphs, or headings that target
the same search phrase.  This module finds those cases across the whole
catalogue so the batch validator can report them.  Both checks are pure and
quadratic at worst; callers validating very large catalogues partition by
category first.
"""

import re
from typing import Dict, FrozenSet, List, Sequence

from app.config import DEFAULT_SITE, DEFAULT_THRESHOLDS, SiteConfig
from app.models.page import PageDescriptor
from app.models.validation import (
    CannibalizationConflict,
    CannibalizationResult,
    DuplicateGroup,
    SimilarPair,
    UniquenessResult,
)
from app.services.sanitizer import plain_text

# Words ignored when comparing intro paragraphs.
_STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "in",
        "into", "is", "it", "its", "of", "on", "or", "so", "that", "the",
        "this", "to", "with", "your", "you",
    }
)

# Generic phrases every tool page shares; overlap on these is expected.
_GENERIC_PHRASES = ("pace calculator", "training paces")

# Keyword conflicts reported at most
MAX_CONFLICTS = 20

_WORD_SPLIT_RE = re.compile(r"[^a-z0-9]+")


def _intro_words(text: str) -> FrozenSet[str]:
    words = plain_text(text).lower().split()
    return frozenset(w for w in words if w not in _STOP_WORDS)


def _jaccard(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def calculate_similarity(text_a: str, text_b: str) -> float:
    """Word-set Jaccard similarity of two texts, ignoring stop words."""
    return _jaccard(_intro_words(text_a), _intro_words(text_b))


def _duplicate_groups(pages: Sequence[PageDescriptor], field: str) -> List[DuplicateGroup]:
    groups: Dict[str, List[str]] = {}
    for page in pages:
        value = getattr(page, field).strip().lower()
        if not value:
            continue
        groups.setdefault(value, []).append(page.id)
    return [
        DuplicateGroup(field=field, page_ids=page_ids)
        for page_ids in groups.values()
        if len(page_ids) > 1
    ]


def validate_content_uniqueness(
    pages: Sequence[PageDescriptor],
    threshold: float = DEFAULT_THRESHOLDS.max_content_similarity,
) -> UniquenessResult:
    """Group exact duplicate titles and descriptions, and pair near-duplicate intros.

    Args:
        pages:      Descriptors to compare.
        threshold:  Minimum intro similarity for a pair to be reported.

    Returns:
        A :class:`UniquenessResult`; ``is_unique`` is true only when nothing
        was found.
    """
    duplicates = _duplicate_groups(pages, "title") + _duplicate_groups(pages, "description")

    word_sets = [_intro_words(page.intro) for page in pages]
    similar: List[SimilarPair] = []
    for i in range(len(pages)):
        for j in range(i + 1, len(pages)):
            similarity = _jaccard(word_sets[i], word_sets[j])
            if similarity >= threshold:
                similar.append(
                    SimilarPair(
                        page_id_1=pages[i].id,
                        page_id_2=pages[j].id,
                        similarity=round(similarity, 4),
                    )
                )

    return UniquenessResult(
        is_unique=not duplicates and not similar,
        duplicates=duplicates,
        similar_content=similar,
    )


def extract_primary_keywords(page: PageDescriptor) -> List[str]:
    """Two- and three-word phrases from the page's title and heading."""
    combined = f"{page.title} {page.h1}".lower()
    words = [w for w in _WORD_SPLIT_RE.split(combined) if len(w) > 2]

    phrases: List[str] = []
    for i in range(len(words) - 1):
        phrases.append(f"{words[i]} {words[i + 1]}")
        if i < len(words) - 2:
            phrases.append(f"{words[i]} {words[i + 1]} {words[i + 2]}")
    return phrases


def detect_cannibalization(
    pages: Sequence[PageDescriptor],
    site: SiteConfig = DEFAULT_SITE,
) -> CannibalizationResult:
    """Report phrases that more than one page targets in its title or heading."""
    ignored = set(_GENERIC_PHRASES)
    ignored.add(site.site_name.lower())

    keyword_pages: Dict[str, List[str]] = {}
    for page in pages:
        # A phrase repeated inside one page still counts once for that page
        for phrase in dict.fromkeys(extract_primary_keywords(page)):
            keyword_pages.setdefault(phrase, []).append(page.id)

    conflicts = [
        CannibalizationConflict(
            keyword=keyword,
            page_ids=page_ids,
            suggestion=f'Consider differentiating titles/H1s for pages targeting "{keyword}"',
        )
        for keyword, page_ids in keyword_pages.items()
        if keyword not in ignored and len(page_ids) > 1
    ]

    return CannibalizationResult(has_issues=bool(conflicts), conflicts=conflicts[:MAX_CONFLICTS])
