#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
List wrapper state machine.

Notion has no list node: a list is just a run of adjacent list-item blocks.
``ListWrapper`` follows a sibling sequence and emits the opening / closing
``<ul>`` / ``<ol>`` markup only when the kind of run changes.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from enum import Enum


# -----------------------------------------------------------------------------

class ListState(str, Enum):
    NONE      = "none"
    UNORDERED = "unordered"
    ORDERED   = "ordered"
    CHECKLIST = "checklist"


_REQUIRED_STATE = {
    "bulleted_list_item": ListState.UNORDERED,
    "numbered_list_item": ListState.ORDERED,
    "to_do":              ListState.CHECKLIST,
}

_OPEN_TAGS = {
    ListState.UNORDERED: "<ul>",
    ListState.ORDERED:   "<ol>",
    ListState.CHECKLIST: '<ul class="notion-to-do-list">',
}

_CLOSE_TAGS = {
    ListState.UNORDERED: "</ul>",
    ListState.ORDERED:   "</ol>",
    ListState.CHECKLIST: "</ul>",
}


def required_state(block_type: str) -> ListState:
    """Wrapper a block of *block_type* must sit in."""
    return _REQUIRED_STATE.get(block_type, ListState.NONE)


# -----------------------------------------------------------------------------

class ListWrapper:
    """Currently open list wrapper for one sibling sequence."""

    def __init__(self) -> None:
        self.state = ListState.NONE

    def transition(self, block_type: str) -> str:
        """Move to the wrapper *block_type* needs; return the markup for the move."""
        target = required_state(block_type)
        if target is self.state:
            return ""
        markup = self.close()
        if target is not ListState.NONE:
            markup += _OPEN_TAGS[target]
            self.state = target
        return markup

    def close(self) -> str:
        """Close any open wrapper and return to ``NONE``."""
        if self.state is ListState.NONE:
            return ""
        tag = _CLOSE_TAGS[self.state]
        self.state = ListState.NONE
        return tag


# -----------------------------------------------------------------------------
