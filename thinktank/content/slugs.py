"""
URL slugs derived from titles.
"""

import re
import unicodedata

MAX_SLUG_LENGTH = 200
FALLBACK_SLUG = "untitled"


def slugify(value: str) -> str:
    """
    Lowercase ASCII slug: runs of anything but letters and digits become '-'.

    >>> slugify("Tax Policy Review")
    'tax-policy-review'
    """
    if not value:
        return FALLBACK_SLUG
    normalized = unicodedata.normalize("NFKD", value)
    ascii_value = normalized.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^A-Za-z0-9]+", "-", ascii_value).strip("-").lower()
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or FALLBACK_SLUG


def with_suffix(base: str, counter: int) -> str:
    """The n-th candidate for a base slug: base, base-2, base-3, ..."""
    if counter <= 1:
        return base
    suffix = f"-{counter}"
    return f"{base[:MAX_SLUG_LENGTH - len(suffix)]}{suffix}"
