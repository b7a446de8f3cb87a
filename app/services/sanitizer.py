import re

from bs4 import BeautifulSoup, Comment

# Tags whose entire subtree should be removed before reading text
_REMOVE_TAGS = {
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "svg",
    "canvas",
    "template",
}

_WHITESPACE_RE = re.compile(r"\s+")

# Hand-authored copy is plain text in the common case
_MARKUP_HINT_RE = re.compile(r"<[a-zA-Z!/]|&[a-zA-Z#]")


def sanitize(html: str) -> BeautifulSoup:
    """Parse *html* and drop scripting, embedded objects and comments."""
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    return soup


def plain_text(value: str) -> str:
    """Return *value* with any inline markup removed and whitespace collapsed.

    Descriptor copy sometimes carries inline tags (``<strong>``, ``<a>``)
    or entities; topic matching and word-similarity must see the words only.
    """
    if not value:
        return ""
    if _MARKUP_HINT_RE.search(value):
        value = sanitize(value).get_text(" ")
    return _WHITESPACE_RE.sub(" ", value).strip()
