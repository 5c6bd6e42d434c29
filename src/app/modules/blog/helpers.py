"""
Blog text helpers: slugs, excerpts, reading time, content cleaning, sitemap.
"""

import math
import re
from datetime import datetime
from xml.sax.saxutils import escape

from app.core.sanitize import collapse_whitespace, strip_tags, strip_unsafe_markup

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160
MAX_SLUG_LENGTH = 100

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]")
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")
_MARKDOWN = [
    (re.compile(r"```.*?```", re.DOTALL), ""),
    (re.compile(r"!\[[^\]]*\]\([^)]*\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]*\)"), r"\1"),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"^#+\s*", re.MULTILINE), ""),
    (re.compile(r"[*_]{1,2}"), ""),
]


def generate_slug(title: str) -> str:
    """
    "Study in Germany: A 2024 Guide!" -> "study-in-germany-a-2024-guide"
    """
    slug = _NON_SLUG_CHARS.sub("", title.lower().strip())
    slug = _SLUG_SEPARATORS.sub("-", slug).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def to_plain_text(content: str) -> str:
    text = strip_tags(content)
    for pattern, replacement in _MARKDOWN:
        text = pattern.sub(replacement, text)
    return collapse_whitespace(text)


def calculate_reading_time(content: str) -> int:
    """Minutes at WORDS_PER_MINUTE, never less than one."""
    words = len(to_plain_text(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def generate_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    text = to_plain_text(content)
    if len(text) <= length:
        return text
    cut = text[:length]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,.;:") + "..."


def sanitize_content(content: str) -> str:
    return strip_unsafe_markup(content).strip()


def build_sitemap(base_url: str, posts: list[tuple[str, datetime | None]]) -> str:
    """
    Sitemap for the blog index and each published post.

    Args:
        base_url: Public site URL, no trailing slash needed
        posts: (slug, last modified) pairs
    """
    base = base_url.rstrip("/")
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        "  <url>",
        f"    <loc>{escape(base)}/blog</loc>",
        "    <changefreq>daily</changefreq>",
        "    <priority>0.8</priority>",
        "  </url>",
    ]
    for slug, modified in posts:
        lines.append("  <url>")
        lines.append(f"    <loc>{escape(base)}/blog/{escape(slug)}</loc>")
        if modified is not None:
            lines.append(f"    <lastmod>{modified.date().isoformat()}</lastmod>")
        lines.append("    <changefreq>weekly</changefreq>")
        lines.append("    <priority>0.6</priority>")
        lines.append("  </url>")
    lines.append("</urlset>")
    return "\n".join(lines)
