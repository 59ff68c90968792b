"""Formatting utilities for common data types."""

import math
import re


SLUG_MAX_LENGTH = 60

MENTION_PATTERN = re.compile(r'@([a-z0-9_]+)', re.IGNORECASE)


def slugify(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """
    Convert a job title to a URL-safe slug.

    Args:
        text: Text to convert
        max_length: Maximum slug length

    Returns:
        URL-safe slug
    """
    # Convert to lowercase
    text = text.lower()

    # Drop anything that is not alphanumeric, whitespace or a hyphen
    text = re.sub(r'[^a-z0-9\s-]', '', text)

    # Collapse whitespace runs into single hyphens
    text = re.sub(r'\s+', '-', text.strip())

    return text[:max_length]


def suffix_slug(slug: str, attempt: int) -> str:
    """Return the ``attempt``-th collision variant of a slug (``title-2``, ``title-3``...)."""
    suffix = f"-{attempt + 1}"
    return f"{slug[:SLUG_MAX_LENGTH - len(suffix)]}{suffix}"


def extract_mentions(text: str) -> list[str]:
    """
    Extract ``@handle`` mentions from note text, in order of appearance.

    Args:
        text: Note text

    Returns:
        List of handles without the leading ``@``
    """
    return MENTION_PATTERN.findall(text or '')


def format_number(value: float) -> str:
    """Format a bound for messages: integral floats drop the trailing ``.0``."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)
