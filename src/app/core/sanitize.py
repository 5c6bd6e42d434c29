"""
Input sanitization.

Two pydantic string types cover request bodies:

- PlainText: trimmed, every HTML tag removed (names, subjects, messages)
- SafeHtml: trimmed, dangerous markup removed but formatting kept (blog content)

escape_html is for interpolating user text into HTML we render ourselves.
"""

import html
import re
from typing import Annotated

from pydantic import AfterValidator, StringConstraints

_DANGEROUS_BLOCKS = re.compile(
    r"<(script|style|iframe|object|embed)\b[^>]*>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)
_DANGEROUS_TAGS = re.compile(r"</?(script|style|iframe|object|embed|link|meta)\b[^>]*>", re.IGNORECASE)
_EVENT_HANDLERS = re.compile(r"\s+on[a-z]+\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s>]+)", re.IGNORECASE)
_JS_URLS = re.compile(r"(href|src)\s*=\s*([\"']?)\s*javascript:[^\"'>\s]*\2", re.IGNORECASE)
_TAGS = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def escape_html(value: str) -> str:
    return html.escape(value, quote=True)


def strip_tags(value: str) -> str:
    """Remove all markup, including the contents of script/style blocks."""
    value = _DANGEROUS_BLOCKS.sub("", value)
    return _TAGS.sub("", value)


def strip_unsafe_markup(value: str) -> str:
    """Remove script-capable markup while keeping ordinary formatting tags."""
    value = _DANGEROUS_BLOCKS.sub("", value)
    value = _DANGEROUS_TAGS.sub("", value)
    value = _EVENT_HANDLERS.sub("", value)
    value = _JS_URLS.sub(r'\1=""', value)
    return value


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def _plain_text(value: str) -> str:
    return strip_tags(value).strip()


PlainText = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(_plain_text)]
SafeHtml = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(strip_unsafe_markup)]
