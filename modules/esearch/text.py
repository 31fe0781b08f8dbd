"""Slug helpers for index and type names."""

import re
import unicodedata


def slugify(value: str) -> str:
    """
    Turn a name into a lowercase, hyphenated, identifier-safe slug.

    'Article' -> 'article', 'Blog Post' -> 'blog-post', 'Crème Brûlée' -> 'creme-brulee'
    """
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^\w\s-]", "", value).strip().lower()
    return re.sub(r"[-\s]+", "-", value)
