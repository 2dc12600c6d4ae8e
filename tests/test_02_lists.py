#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for list wrapping of adjacent list-item blocks."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re

from blockpress.services.lists import ListState, ListWrapper, required_state
from tests.conftest import bulleted, html_of, numbered, paragraph, to_do


# -----------------------------------------------------------------------------

def _balanced(html: str) -> bool:
    for tag in ("ul", "ol", "li"):
        if len(re.findall(rf"<{tag}[ >]", html)) != html.count(f"</{tag}>"):
            return False
    return True


# ── State machine ─────────────────────────────────────────────────────────────

def test_required_state():
    assert required_state("bulleted_list_item") is ListState.UNORDERED
    assert required_state("numbered_list_item") is ListState.ORDERED
    assert required_state("to_do") is ListState.CHECKLIST
    assert required_state("paragraph") is ListState.NONE


def test_transition_opens_and_closes():
    w = ListWrapper()
    assert w.transition("bulleted_list_item") == "<ul>"
    assert w.transition("bulleted_list_item") == ""
    assert w.transition("numbered_list_item") == "</ul><ol>"
    assert w.transition("to_do") == '</ol><ul class="notion-to-do-list">'
    assert w.transition("paragraph") == "</ul>"
    assert w.state is ListState.NONE


def test_close_is_idempotent():
    w = ListWrapper()
    w.transition("numbered_list_item")
    assert w.close() == "</ol>"
    assert w.close() == ""


# ── Rendering ─────────────────────────────────────────────────────────────────

def test_adjacent_items_share_one_wrapper():
    html = html_of([bulleted("a"), bulleted("b"), bulleted("c")])
    assert html == "<ul><li>a</li><li>b</li><li>c</li></ul>"


def test_kind_change_opens_new_wrapper():
    html = html_of([bulleted("a"), bulleted("b"), numbered("c"), bulleted("d")])
    assert html == "<ul><li>a</li><li>b</li></ul><ol><li>c</li></ol><ul><li>d</li></ul>"
    assert html.count("<ul>") == 2
    assert html.count("<ol>") == 1


def test_wrapper_closed_by_non_list_block():
    html = html_of([numbered("1"), paragraph("text"), numbered("2")])
    assert html == "<ol><li>1</li></ol><p>text</p><ol><li>2</li></ol>"


def test_wrapper_closed_at_end_of_sequence():
    html = html_of([paragraph("intro"), bulleted("last")])
    assert html.endswith("<li>last</li></ul>")


def test_checklist_wrapper():
    html = html_of([to_do("buy milk", checked=True), to_do("walk dog")])
    assert html.startswith('<ul class="notion-to-do-list">')
    assert html.count('<li class="notion-to-do">') == 2
    assert '<input type="checkbox" checked disabled>' in html
    assert '<input type="checkbox" disabled>' in html
    assert html.endswith("</ul>")


def test_nested_list_gets_own_wrapper():
    html = html_of([
        bulleted("parent", children=[numbered("child 1"), numbered("child 2")]),
        bulleted("sibling"),
    ])
    assert html == (
        "<ul><li>parent<ol><li>child 1</li><li>child 2</li></ol></li>"
        "<li>sibling</li></ul>"
    )


def test_nested_wrapper_does_not_leak_to_parent():
    # the child run is a bulleted list too, but must be closed inside the <li>
    html = html_of([
        bulleted("outer", children=[bulleted("inner")]),
        paragraph("after"),
    ])
    assert html == "<ul><li>outer<ul><li>inner</li></ul></li></ul><p>after</p>"


def test_mixed_sequence_is_balanced():
    html = html_of([
        bulleted("a"), to_do("b"), numbered("c", children=[bulleted("c1"), to_do("c2")]),
        paragraph("p"), to_do("d"), bulleted("e"),
    ])
    assert _balanced(html)


# -----------------------------------------------------------------------------
