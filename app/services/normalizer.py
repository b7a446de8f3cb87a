"""Identifier normalisation: slugs, page ids, frontmatter."""

import re
import unicodedata
from typing import Optional

from app.models.page import PageCategory


def normalize_slug(value: str) -> str:
    """Return a URL-safe slug for *value*.

    The slug is lowercased, ASCII-only, and uses hyphens as separators.
    """
    # Normalise unicode, keep only ASCII
    slug = unicodedata.normalize("NFKD", value)
    slug = slug.encode("ascii", "ignore").decode("ascii")

    # Lowercase and replace runs of non-alphanumeric chars with a single hyphen
    slug = re.sub(r"[^a-z0-9]+", "-", slug.lower().strip())
    return slug.strip("-")


def generate_page_id(category: PageCategory, slug: str) -> str:
    """Stable descriptor id: ``"<category>:<slug>"``."""
    return f"{PageCategory(category).value}:{slug}"


def make_frontmatter(
    title: str,
    description: str,
    url: str,
    slug: str,
    canonical: Optional[str] = None,
) -> str:
    """Return a YAML frontmatter block for use in Markdown files."""
    lines = [
        "---",
        f'title: "{_escape_yaml(title)}"',
        f'description: "{_escape_yaml(description)}"',
        f'url: "{url}"',
        f'slug: "{slug}"',
    ]
    if canonical and canonical != url:
        lines.append(f'canonical: "{canonical}"')
    lines.append("---")
    return "\n".join(lines)


def _escape_yaml(value: str) -> str:
    """Escape characters that would break inline double-quoted YAML strings."""
    return value.replace("\\", "\\\\").replace('"', '\\"')
