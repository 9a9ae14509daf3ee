"""
Content layer: slugs, sanitisation, the generic repository and search.
"""

from thinktank.content.repository import ContentRepository, ListFilter, ListOrder, Pagination
from thinktank.content.sanitize import sanitize_plain_text, sanitize_rich_text
from thinktank.content.slugs import slugify

__all__ = [
    "ContentRepository",
    "ListFilter",
    "ListOrder",
    "Pagination",
    "sanitize_plain_text",
    "sanitize_rich_text",
    "slugify",
]
