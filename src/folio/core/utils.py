"""Utility functions shared across Folio."""

import re
from unicodedata import normalize

_SEPARATORS = re.compile(r"[ _]")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """Convert text to a URL-friendly slug.

    Spaces and underscores become hyphens, every other character outside
    ``[a-z0-9-]`` is dropped rather than replaced.

    Args:
        text: Input text to slugify

    Returns:
        Lowercase, hyphen-separated ASCII slug. May be empty.

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("snake_case_title")
        'snake-case-title'
        >>> slugify("Café  --  Crème")
        'cafe-creme'
        >>> slugify("don't panic")
        'dont-panic'

    """
    if not text:
        return ""

    # Normalize unicode (NFKD) and convert to ASCII
    normalized = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")

    slug = _SEPARATORS.sub("-", normalized.lower())
    slug = _DISALLOWED.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)

    return slug.strip("-")


def normalize_root(root: str | None) -> str:
    """Return the root prefix as ``""`` or ``"/segment[/segment...]"``.

    >>> normalize_root("/")
    ''
    >>> normalize_root("blog/")
    '/blog'
    """
    trimmed = (root or "").strip().strip("/")
    if not trimmed:
        return ""
    return f"/{trimmed}"


def site_link(root: str | None, path: str = "") -> str:
    """Join a root prefix with a page path into a root-relative link.

    >>> site_link("/", "posts/hello-world")
    '/posts/hello-world'
    >>> site_link("/blog/", "tags")
    '/blog/tags'
    >>> site_link("/blog", "")
    '/blog/'
    """
    return f"{normalize_root(root)}/{path.lstrip('/')}"


def topic_key(topic: str) -> str:
    """Return the canonical key of a topic: topics compare case-insensitively.

    >>> topic_key("Web")
    'web'
    """
    return topic.strip().casefold()
