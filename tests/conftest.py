#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures and block factories for Blockpress tests.
No network access: the Notion provider is exercised with httpx.MockTransport.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from blockpress.core.config import Settings, get_settings
from blockpress.main import create_app
from blockpress.schemas import parse_blocks
from blockpress.services.renderer import render


# -----------------------------------------------------------------------------

def make_settings(**overrides: Any) -> Settings:
    values = {"environment": "testing", "notion_api_token": "", "highlight_code": False}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def app():
    """Fresh application (and media registry) with test settings."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: make_settings()
    return app


@pytest_asyncio.fixture(scope="function")
async def client(app):
    """HTTP test client wired to *app*."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -----------------------------------------------------------------------------
# Factories (raw Notion JSON)
# -----------------------------------------------------------------------------

def span(text: str, href: str | None = None, **annotations: Any) -> dict:
    """A plain text rich-text span."""
    data: dict[str, Any] = {
        "type": "text",
        "text": {"content": text, "link": {"url": href} if href else None},
        "plain_text": text,
        "href": href,
    }
    if annotations:
        data["annotations"] = annotations
    return data


def equation_span(expression: str) -> dict:
    return {"type": "equation", "equation": {"expression": expression}, "plain_text": expression}


def mention_span(kind: str, payload: dict | None = None, plain_text: str = "") -> dict:
    mention: dict[str, Any] = {"type": kind}
    if payload is not None:
        mention[kind] = payload
    return {"type": "mention", "mention": mention, "plain_text": plain_text}


_counter = 0


def block(
    type_: str,
    payload: dict | None = None,
    id: str | None = None,
    children: list[dict] | None = None,
    has_children: bool | None = None,
) -> dict:
    """A raw block dict; ids are generated when not given."""
    global _counter
    if id is None:
        _counter += 1
        id = f"00000000-0000-0000-0000-{_counter:012d}"
    data: dict[str, Any] = {
        "object": "block",
        "id": id,
        "type": type_,
        type_: payload if payload is not None else {},
        "has_children": bool(children) if has_children is None else has_children,
    }
    if children is not None:
        data["children"] = children
    return data


def text_block(type_: str, text: str = "", **kwargs: Any) -> dict:
    rich = [span(text)] if text else []
    return block(type_, {"rich_text": rich}, **kwargs)


def paragraph(text: str = "", **kwargs: Any) -> dict:
    return text_block("paragraph", text, **kwargs)


def bulleted(text: str, **kwargs: Any) -> dict:
    return text_block("bulleted_list_item", text, **kwargs)


def numbered(text: str, **kwargs: Any) -> dict:
    return text_block("numbered_list_item", text, **kwargs)


def to_do(text: str, checked: bool = False, **kwargs: Any) -> dict:
    return block("to_do", {"rich_text": [span(text)], "checked": checked}, **kwargs)


def image(url: str, caption: str = "", kind: str = "file", **kwargs: Any) -> dict:
    payload = {"type": kind, kind: {"url": url}, "caption": [span(caption)] if caption else []}
    return block("image", payload, **kwargs)


def html_of(raw: list[dict], provider=None, settings: Settings | None = None) -> str:
    """Parse raw block dicts and render them."""
    return render(parse_blocks(raw), provider, settings or make_settings())


# -----------------------------------------------------------------------------
