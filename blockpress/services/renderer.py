#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Block tree renderer
===================
Renders a Notion block tree to one HTML fragment.

    html = render(parse_blocks(payload), provider)

A ``RenderSession`` lives for one top-level call.  It owns the set of block
ids already rendered (a block seen twice, or reached again through a cycle,
renders once) and the provider / settings the block renderers consult.
Each sibling sequence, the top-level one and every child list, gets its own
``ListWrapper`` so list markup never leaks across nesting levels.

The output is a pure function of the input tree and the provider's
responses: no timestamps, no random ids.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Optional

from blockpress.core.config import Settings, get_settings
from blockpress.schemas.blocks import BaseBlock, parse_blocks
from blockpress.services.blocks import render_block
from blockpress.services.lists import ListWrapper
from blockpress.services.provider import ContentProvider, InMemoryContentProvider


log = logging.getLogger(__name__)

__all__ = ["RenderSession", "render", "parse_blocks"]


# -----------------------------------------------------------------------------

class RenderSession:
    """State shared by every block rendered during one ``render`` call."""

    def __init__(
        self,
        provider: Optional[ContentProvider] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.provider: ContentProvider = provider if provider is not None else InMemoryContentProvider()
        self.settings: Settings = settings if settings is not None else get_settings()
        self.seen: set[str] = set()

    # ── dedup guard ────────────────────────────────────────────────────────

    def mark_seen(self, block_id: str) -> None:
        if block_id:
            self.seen.add(block_id)

    def is_seen(self, block_id: str) -> bool:
        return bool(block_id) and block_id in self.seen

    # ── sequences ──────────────────────────────────────────────────────────

    def render_sequence(self, blocks: Iterable[BaseBlock]) -> str:
        """Render sibling *blocks* in order, wrapping runs of list items."""
        wrapper = ListWrapper()
        parts: list[str] = []
        for block in blocks:
            if self.is_seen(block.id):
                log.debug("Skipping already rendered block %s", block.id)
                continue
            self.mark_seen(block.id)
            parts.append(wrapper.transition(block.type))
            parts.append(render_block(block, self))
        parts.append(wrapper.close())
        return "".join(parts)

    def child_blocks(self, block: BaseBlock) -> Sequence[BaseBlock]:
        """Inline children when present, otherwise fetched from the provider."""
        if block.children is not None:
            return block.children
        if block.has_children and block.id:
            return self.provider.fetch_children(block.id)
        return []

    def render_children(self, block: BaseBlock) -> str:
        children = self.child_blocks(block)
        if not children:
            return ""
        return self.render_sequence(children)


# -----------------------------------------------------------------------------

def render(
    blocks: Iterable[BaseBlock],
    provider: Optional[ContentProvider] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Render a top-level block sequence to HTML."""
    return RenderSession(provider, settings).render_sequence(blocks)


# -----------------------------------------------------------------------------
