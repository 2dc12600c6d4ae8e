#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the render session: dedup, child fetching, determinism."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from blockpress.schemas import BLOCK_TYPES, UnsupportedBlock, parse_blocks
from blockpress.services.provider import ContentProvider, InMemoryContentProvider
from blockpress.services.renderer import RenderSession, render
from tests.conftest import bulleted, html_of, image, make_settings, paragraph, text_block


# -----------------------------------------------------------------------------

class _CountingProvider(InMemoryContentProvider):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls: list[str] = []

    def fetch_children(self, block_id):
        self.calls.append(block_id)
        return super().fetch_children(block_id)


# ── Parsing ───────────────────────────────────────────────────────────────────

def test_parse_blocks_accepts_list_envelope():
    blocks = parse_blocks({"object": "list", "results": [paragraph("a")], "has_more": False})
    assert len(blocks) == 1
    assert blocks[0].type == "paragraph"


def test_unknown_type_parses_as_unsupported():
    [blk] = parse_blocks([{"id": "z", "type": "brand_new_thing"}])
    assert isinstance(blk, UnsupportedBlock)
    assert blk.type == "brand_new_thing"


def test_nested_children_parse_recursively():
    raw = bulleted("outer", children=[
        bulleted("inner", children=[{"id": "n-1", "type": "brand_new_thing"}]),
        paragraph("sibling"),
    ])
    [outer] = parse_blocks([raw])
    inner, sibling = outer.children
    assert inner.type == "bulleted_list_item"
    assert sibling.type == "paragraph"
    [leaf] = inner.children
    assert isinstance(leaf, UnsupportedBlock)
    assert leaf.type == "brand_new_thing"


def test_block_types_cover_variants():
    assert {"paragraph", "table", "embed", "child_database"} <= BLOCK_TYPES


def test_in_memory_provider_satisfies_protocol():
    assert isinstance(InMemoryContentProvider(), ContentProvider)


# ── Dedup ────────────────────────────────────────────────────────────────────

def test_duplicate_block_rendered_once():
    p = paragraph("once", id="dup-1")
    assert html_of([p, p, p]) == "<p>once</p>"


def test_duplicate_inside_children_skipped():
    shared = paragraph("shared", id="shared-1")
    html = html_of([shared, text_block("toggle", "t", children=[shared, paragraph("other")])])
    assert html.count("shared") == 1
    assert "<p>other</p>" in html


def test_blocks_without_id_are_never_deduplicated():
    p = paragraph("anon", id="")
    assert html_of([p, p]) == "<p>anon</p><p>anon</p>"


def test_cycle_through_provider_terminates():
    # A's child is B, B's child is A again
    a = parse_blocks([text_block("toggle", "A", id="A", has_children=True)])
    b = parse_blocks([text_block("toggle", "B", id="B", has_children=True)])
    provider = InMemoryContentProvider(children={"A": b, "B": a})
    html = render(a, provider, make_settings())
    assert html.count("<summary>A</summary>") == 1
    assert html.count("<summary>B</summary>") == 1


def test_self_referencing_children_terminate():
    blocks = parse_blocks([text_block("toggle", "loop", id="L", has_children=True)])
    provider = InMemoryContentProvider(children={"L": blocks})
    html = render(blocks, provider, make_settings())
    assert html == '<details class="notion-toggle"><summary>loop</summary></details>'


def test_session_guard_is_per_call():
    blocks = parse_blocks([paragraph("x", id="same")])
    settings = make_settings()
    assert render(blocks, None, settings) == render(blocks, None, settings) == "<p>x</p>"


def test_session_seen_contains_rendered_ids():
    session = RenderSession(InMemoryContentProvider(), make_settings())
    session.render_sequence(parse_blocks([paragraph("a", id="a1"), bulleted("b", id="b1")]))
    assert session.seen == {"a1", "b1"}


# ── Children ─────────────────────────────────────────────────────────────────

def test_inline_children_skip_provider():
    provider = _CountingProvider()
    html_of([bulleted("p", id="p", children=[paragraph("c")])], provider)
    assert provider.calls == []


def test_children_fetched_when_not_inline():
    children = parse_blocks([paragraph("fetched")])
    provider = _CountingProvider(children={"p": children})
    html = html_of([text_block("toggle", "t", id="p", has_children=True)], provider)
    assert provider.calls == ["p"]
    assert "<p>fetched</p>" in html


def test_no_fetch_without_has_children():
    provider = _CountingProvider()
    html_of([paragraph("leaf", id="leaf")], provider)
    assert provider.calls == []


def test_empty_inline_children_skip_provider():
    provider = _CountingProvider(children={"t1": parse_blocks([paragraph("remote")])})
    html = html_of([text_block("toggle", "t", id="t1", has_children=True, children=[])], provider)
    assert provider.calls == []
    assert "remote" not in html


def test_nothing_fetched_renders_empty_children():
    html = html_of([text_block("toggle", "t", id="p", has_children=True)])
    assert html == '<details class="notion-toggle"><summary>t</summary></details>'


def test_depth_first_sibling_order():
    html = html_of([
        text_block("toggle", "1", children=[paragraph("1.1"), paragraph("1.2")]),
        paragraph("2"),
    ])
    assert html.index("1.1") < html.index("1.2") < html.index("<p>2</p>")


# ── Determinism ──────────────────────────────────────────────────────────────

def test_identical_input_gives_identical_output():
    raw = [
        paragraph("intro"),
        bulleted("a"), bulleted("b"),
        image("https://secure.notion-static.com/x/pic.png", caption="pic"),
        text_block("toggle", "more", children=[paragraph("inside")]),
    ]
    assert html_of(raw, InMemoryContentProvider()) == html_of(raw, InMemoryContentProvider())


# -----------------------------------------------------------------------------
