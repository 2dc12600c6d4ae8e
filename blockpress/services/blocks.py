#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Block dispatcher
================
One render function per block model, looked up by class in ``_RENDERERS``.

Every function takes the block and the active ``RenderSession`` and returns
an HTML fragment.  Children are rendered through the session so they share
its dedup guard but get a list wrapper of their own.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from blockpress.schemas.blocks import (
    BaseBlock,
    BookmarkBlock,
    BulletedListItemBlock,
    CalloutBlock,
    ChildDatabaseBlock,
    ChildPageBlock,
    CodeBlock,
    ColumnBlock,
    ColumnListBlock,
    DividerBlock,
    EmbedBlock,
    EquationBlock,
    FileBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    ImageBlock,
    LinkToPageBlock,
    NumberedListItemBlock,
    ParagraphBlock,
    PdfBlock,
    QuoteBlock,
    SyncedBlock,
    TableBlock,
    TableRowBlock,
    ToDoBlock,
    ToggleBlock,
    VideoBlock,
)
from blockpress.schemas.schemas import EntityReference
from blockpress.services import media
from blockpress.services.rich_text import (
    escape_equation,
    extract_plain_text,
    render_rich_text,
    safe_url,
)

if TYPE_CHECKING:
    from blockpress.services.renderer import RenderSession


log = logging.getLogger(__name__)

_esc = _html.escape


# -----------------------------------------------------------------------------
# Text blocks
# -----------------------------------------------------------------------------

def _paragraph(block: ParagraphBlock, session: RenderSession) -> str:
    text = render_rich_text(block.paragraph.rich_text)
    if not text.strip() and not (block.has_children or block.children):
        return ""
    return f"<p>{text or '&nbsp;'}</p>{session.render_children(block)}"


def _heading(block: Heading1Block | Heading2Block | Heading3Block, session: RenderSession) -> str:
    n = block.level
    text = render_rich_text(block.heading.rich_text)
    return f'<h{n} id="{_esc(block.anchor)}">{text}</h{n}>{session.render_children(block)}'


def _bulleted(block: BulletedListItemBlock, session: RenderSession) -> str:
    text = render_rich_text(block.bulleted_list_item.rich_text)
    return f"<li>{text}{session.render_children(block)}</li>"


def _numbered(block: NumberedListItemBlock, session: RenderSession) -> str:
    text = render_rich_text(block.numbered_list_item.rich_text)
    return f"<li>{text}{session.render_children(block)}</li>"


def _to_do(block: ToDoBlock, session: RenderSession) -> str:
    checked = " checked" if block.to_do.checked else ""
    text = render_rich_text(block.to_do.rich_text)
    return (
        f'<li class="notion-to-do"><input type="checkbox"{checked} disabled>'
        f'<span class="notion-to-do-text">{text}</span>'
        f'{session.render_children(block)}</li>'
    )


def _toggle(block: ToggleBlock, session: RenderSession) -> str:
    text = render_rich_text(block.toggle.rich_text)
    return (
        f'<details class="notion-toggle"><summary>{text}</summary>'
        f'{session.render_children(block)}</details>'
    )


def _quote(block: QuoteBlock, session: RenderSession) -> str:
    return f"<blockquote>{render_rich_text(block.quote.rich_text)}</blockquote>"


# -----------------------------------------------------------------------------
# Static references
# -----------------------------------------------------------------------------

def _child_page(block: ChildPageBlock, session: RenderSession) -> str:
    title = _esc(block.child_page.title, quote=False)
    return f'<div class="notion-child-page"><span>{title}</span></div>'


def _child_database(block: ChildDatabaseBlock, session: RenderSession) -> str:
    title = _esc(block.child_database.title, quote=False)
    return f'<div class="notion-child-database"><span>{title}</span></div>'


def _default_notion_url(object_id: str) -> str:
    return "https://www.notion.so/" + object_id.replace("-", "")


def _resolve_link_target(block: LinkToPageBlock, session: RenderSession) -> tuple[str, str]:
    """Return ``(url, label)`` for a link_to_page block.

    Provider failures are logged and fall back to the public notion.so URL
    of the target with no label.
    """
    data = block.link_to_page
    if data.type == "url":
        return data.url, ""

    if data.type == "page_id":
        target_id, resolve = data.page_id, session.provider.resolve_page_reference
    elif data.type == "database_id":
        target_id, resolve = data.database_id, session.provider.resolve_database_reference
    else:
        return "", ""

    if not target_id:
        return "", ""

    try:
        ref: EntityReference | None = resolve(target_id)
    except Exception:
        log.warning("Could not resolve link_to_page target %s", target_id, exc_info=True)
        ref = None

    if ref is None:
        return _default_notion_url(target_id), ""
    return ref.url or _default_notion_url(target_id), ref.title


def _link_to_page(block: LinkToPageBlock, session: RenderSession) -> str:
    url, label = _resolve_link_target(block, session)
    url = safe_url(url)
    if not url:
        return "<!-- Empty link_to_page -->"
    if not label:
        try:
            label = urlsplit(url).hostname or "Notion Page"
        except ValueError:
            label = "Notion Page"
    return (
        f'<p class="notion-link-to-page"><a href="{_esc(url)}" target="_blank" rel="noopener">'
        f'{_esc(label, quote=False)}</a></p>'
    )


# -----------------------------------------------------------------------------
# Layout
# -----------------------------------------------------------------------------

def _divider(block: DividerBlock, session: RenderSession) -> str:
    return "<hr>"


def _equation(block: EquationBlock, session: RenderSession) -> str:
    expression = escape_equation(block.equation.expression)
    return f'<div class="notion-equation notion-equation-block">$${expression}$$</div>'


def _column_list(block: ColumnListBlock, session: RenderSession) -> str:
    return f'<div class="notion-column-list">{session.render_children(block)}</div>'


def column_width(block: ColumnBlock) -> str:
    """Flex-basis percentage of a column, at least 5."""
    payload = block.column
    ratio = payload.ratio if payload.ratio is not None else payload.width_ratio
    try:
        value = float(ratio if ratio is not None else 1)
    except (TypeError, ValueError):
        value = 1.0
    return f"{max(5.0, round(value * 100, 2)):.2f}".rstrip("0").rstrip(".")


def _column(block: ColumnBlock, session: RenderSession) -> str:
    return (
        f'<div class="notion-column" style="flex:0 0 {column_width(block)}%;">'
        f'{session.render_children(block)}</div>'
    )


def _synced_block(block: SyncedBlock, session: RenderSession) -> str:
    return session.render_children(block)


# -----------------------------------------------------------------------------
# Code
# -----------------------------------------------------------------------------

def _highlight_code(code: str, lang: str) -> str:
    """Highlight *code* using Pygments.  Falls back to plain <pre><code> on unknown language."""
    try:
        lexer = get_lexer_by_name(lang, stripall=True)
    except ClassNotFound:
        return f'<pre><code class="language-{_esc(lang)}">{_esc(code, quote=False)}</code></pre>'
    return highlight(code, lexer, HtmlFormatter(nowrap=False, cssclass="highlight"))


def _code(block: CodeBlock, session: RenderSession) -> str:
    language = (block.code.language or "text").lower()
    source = extract_plain_text(block.code.rich_text)

    if language in session.settings.diagram_languages:
        return f'<pre class="{_esc(language)}">{_esc(source, quote=False)}</pre>'

    if session.settings.highlight_code:
        return _highlight_code(source, language)

    return f'<pre><code class="language-{_esc(language)}">{_esc(source, quote=False)}</code></pre>'


# -----------------------------------------------------------------------------
# Tables
# -----------------------------------------------------------------------------

def _cells_html(cells, col_header_row: bool, row_header: bool) -> str:
    parts = []
    for idx, cell in enumerate(cells):
        tag = "th" if col_header_row or (row_header and idx == 0) else "td"
        parts.append(f"<{tag}>{render_rich_text(cell)}</{tag}>")
    return "".join(parts)


def _table(block: TableBlock, session: RenderSession) -> str:
    rows = session.child_blocks(block)
    if not rows:
        return "<!-- Empty table -->"

    has_col_header = block.table.has_column_header
    has_row_header = block.table.has_row_header

    thead = ""
    tbody = ""
    for index, row in enumerate(rows):
        # rows are rendered here, never again as standalone blocks
        session.mark_seen(row.id)
        cells = row.table_row.cells if isinstance(row, TableRowBlock) else []
        is_header = has_col_header and index == 0
        row_html = f"<tr>{_cells_html(cells, is_header, has_row_header)}</tr>"
        if is_header:
            thead += row_html
        else:
            tbody += row_html

    thead = f"<thead>{thead}</thead>" if thead else ""
    return f"<table>{thead}<tbody>{tbody}</tbody></table>"


def _table_row(block: TableRowBlock, session: RenderSession) -> str:
    cells = block.table_row.cells
    if not cells:
        return ""
    return f"<tr>{_cells_html(cells, False, False)}</tr>"


# -----------------------------------------------------------------------------
# Callout / bookmark
# -----------------------------------------------------------------------------

def _callout_icon(block: CalloutBlock) -> str:
    icon = block.callout.icon
    if icon is None:
        return ""
    if icon.emoji:
        return f'<span class="notion-callout-icon">{_esc(icon.emoji, quote=False)}</span>'
    source = icon.external or icon.file
    url = safe_url(source.url) if source else ""
    if url:
        return f'<img src="{_esc(url)}" class="notion-callout-icon" alt="icon">'
    return ""


def _callout(block: CalloutBlock, session: RenderSession) -> str:
    text = render_rich_text(block.callout.rich_text)
    return (
        f'<div class="notion-callout">{_callout_icon(block)}'
        f'<div class="notion-callout-content">{text}{session.render_children(block)}</div></div>'
    )


def _bookmark(block: BookmarkBlock, session: RenderSession) -> str:
    url = _esc(safe_url(block.bookmark.url))
    caption = render_rich_text(block.bookmark.caption)
    caption_html = f'<div class="notion-bookmark-caption">{caption}</div>' if caption else ""
    return (
        f'<div class="notion-bookmark"><a href="{url}" target="_blank" rel="noopener noreferrer">'
        f'{url}</a>{caption_html}</div>'
    )


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------

Renderer = Callable[[BaseBlock, "RenderSession"], str]

_RENDERERS: dict[type[BaseBlock], Renderer] = {
    ParagraphBlock:        _paragraph,
    Heading1Block:         _heading,
    Heading2Block:         _heading,
    Heading3Block:         _heading,
    BulletedListItemBlock: _bulleted,
    NumberedListItemBlock: _numbered,
    ToDoBlock:             _to_do,
    ToggleBlock:           _toggle,
    ChildPageBlock:        _child_page,
    ChildDatabaseBlock:    _child_database,
    QuoteBlock:            _quote,
    DividerBlock:          _divider,
    EquationBlock:         _equation,
    ColumnListBlock:       _column_list,
    ColumnBlock:           _column,
    SyncedBlock:           _synced_block,
    LinkToPageBlock:       _link_to_page,
    CodeBlock:             _code,
    TableBlock:            _table,
    TableRowBlock:         _table_row,
    CalloutBlock:          _callout,
    BookmarkBlock:         _bookmark,
    ImageBlock:            media.render_image,
    FileBlock:             media.render_file,
    PdfBlock:              media.render_pdf,
    VideoBlock:            media.render_video,
    EmbedBlock:            media.render_embed,
}


def unsupported_comment(block_type: str) -> str:
    """HTML comment for a block type with no renderer."""
    safe = block_type.replace("--", "- -").replace(">", "&gt;")
    return f"<!-- Unsupported block type: {safe} -->"


def render_block(block: BaseBlock, session: RenderSession) -> str:
    """Render a single block (and its children) to HTML."""
    renderer = _RENDERERS.get(type(block))
    if renderer is None:
        log.debug("Unsupported block type %r (id=%s)", block.type, block.id)
        return unsupported_comment(block.type)
    return renderer(block, session)


# -----------------------------------------------------------------------------
