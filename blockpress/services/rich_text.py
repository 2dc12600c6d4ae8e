#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Rich text renderer
==================
Turns a sequence of Notion rich-text spans into inline HTML, plain text or
Markdown.

Each span is rendered on its own and the results are concatenated in order.
Annotations always nest in the same order, innermost first::

    bold → italic → strikethrough → underline → code → link → colour

so a bold+italic linked span renders as
``<a href="…"><em><strong>text</strong></em></a>``.

Equation spans are exempt from HTML escaping: the expression only has its
backslashes doubled and is handed to the client-side math engine verbatim.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import re
from collections.abc import Iterable

from blockpress.schemas.blocks import RichText


# -----------------------------------------------------------------------------

_MENTION_FALLBACKS = {
    "page": "[Page]",
    "user": "[User]",
    "date": "[Date]",
}

# Link schemes allowed in href / src; relative URLs have none
SAFE_URL_SCHEMES = frozenset({"http", "https", "mailto"})

_SCHEME_RE  = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_IGNORED_RE = re.compile(r"[\x00-\x20\x7f]")

# (annotation, open tag, close tag) in application order, innermost first
_ANNOTATION_TAGS = (
    ("bold",          "<strong>", "</strong>"),
    ("italic",        "<em>",     "</em>"),
    ("strikethrough", "<del>",    "</del>"),
    ("underline",     "<u>",      "</u>"),
    ("code",          "<code>",   "</code>"),
)


# -----------------------------------------------------------------------------
# URLs
# -----------------------------------------------------------------------------

def safe_url(url: str | None) -> str:
    """*url* stripped of surrounding whitespace, or "" when its scheme is not
    one of ``SAFE_URL_SCHEMES``.

    Browsers ignore control characters and blanks inside a scheme
    (a tab inside ``javascript:``), so those are removed before the scheme
    is read.
    """
    if not url:
        return ""
    m = _SCHEME_RE.match(_IGNORED_RE.sub("", url))
    if m and m.group(1).lower() not in SAFE_URL_SCHEMES:
        return ""
    return url.strip()


# -----------------------------------------------------------------------------
# Span content
# -----------------------------------------------------------------------------

def escape_equation(expression: str) -> str:
    """Double every backslash so the math engine receives them intact."""
    return expression.replace("\\", "\\\\")


def mention_label(span: RichText) -> str:
    """Display label for a mention span, with a per-kind fallback."""
    mention = span.mention
    kind = mention.type if mention else ""
    if kind == "page":
        label = mention.page.title if mention.page else None
    elif kind == "user":
        label = mention.user.name if mention.user else None
    elif kind == "date":
        label = mention.date.start if mention.date else None
    else:
        return span.plain_text or "[Mention]"
    return label or _MENTION_FALLBACKS[kind]


def span_text(span: RichText) -> str:
    """Unescaped literal content of a span."""
    if span.type == "equation":
        return span.equation.expression if span.equation else ""
    if span.type == "mention":
        return mention_label(span)
    if span.type == "text" and span.text is not None:
        return span.text.content or span.plain_text
    return span.plain_text


# -----------------------------------------------------------------------------
# HTML
# -----------------------------------------------------------------------------

def _span_content_html(span: RichText) -> str:
    if span.type == "equation":
        expression = span.equation.expression if span.equation else ""
        if not expression:
            return ""
        return (
            '<span class="notion-equation notion-equation-inline">'
            f'${escape_equation(expression)}$</span>'
        )
    return _html.escape(span_text(span), quote=False)


def render_span(span: RichText) -> str:
    """Render one span to HTML; empty content renders nothing at all."""
    content = _span_content_html(span)
    if not content:
        return ""

    annotations = span.annotations
    for name, open_tag, close_tag in _ANNOTATION_TAGS:
        if getattr(annotations, name):
            content = f"{open_tag}{content}{close_tag}"

    href = safe_url(span.link_url)
    if href:
        content = f'<a href="{_html.escape(href, quote=True)}">{content}</a>'

    color = annotations.color
    if color and color != "default":
        content = f'<span class="notion-color-{_html.escape(color, quote=True)}">{content}</span>'

    return content


def render_rich_text(spans: Iterable[RichText] | None) -> str:
    """Render a span sequence to one inline HTML string."""
    if not spans:
        return ""
    return "".join(render_span(span) for span in spans)


# -----------------------------------------------------------------------------
# Plain text / Markdown
# -----------------------------------------------------------------------------

def extract_plain_text(spans: Iterable[RichText] | None) -> str:
    """Concatenate the literal content of every span, unescaped."""
    if not spans:
        return ""
    return "".join(span_text(span) for span in spans)


_MD_SPECIALS = str.maketrans({c: "\\" + c for c in "*_`[]"})


def render_markdown(spans: Iterable[RichText] | None) -> str:
    """Render a span sequence to Markdown (underline and colour are dropped)."""
    if not spans:
        return ""
    parts: list[str] = []
    for span in spans:
        text = span_text(span)
        if not text:
            continue
        if span.type == "equation":
            text = f"${text}$"
        else:
            text = text.translate(_MD_SPECIALS)
        a = span.annotations
        if a.bold:
            text = f"**{text}**"
        if a.italic:
            text = f"*{text}*"
        if a.strikethrough:
            text = f"~~{text}~~"
        if a.code:
            text = f"`{text}`"
        href = safe_url(span.link_url)
        if href:
            text = f"[{text}]({href})"
        parts.append(text)
    return "".join(parts)


# -----------------------------------------------------------------------------
# Inspection helpers
# -----------------------------------------------------------------------------

def has_annotation(spans: Iterable[RichText] | None, annotation: str) -> bool:
    """True if any span carries *annotation* (``color`` means non-default)."""
    for span in spans or ():
        value = getattr(span.annotations, annotation, None)
        if annotation == "color":
            if value and value != "default":
                return True
        elif value:
            return True
    return False


def extract_links(spans: Iterable[RichText] | None) -> list[tuple[str, str]]:
    """Return ``(url, text)`` for every linked span, in order."""
    return [
        (span.link_url, span_text(span))
        for span in spans or ()
        if span.link_url
    ]


# -----------------------------------------------------------------------------
