#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoint.

POST /api/v1/render   {"blocks": [...], "children": {...}, "pages": {...}, "databases": {...}}
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from blockpress.core.config import Settings, get_settings
from blockpress.schemas import RenderRequest, RenderResponse
from blockpress.services.notion_api import NotionContentProvider
from blockpress.services.provider import InMemoryContentProvider, MediaRegistry
from blockpress.services.renderer import render


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/render", tags=["render"])


def get_media(request: Request) -> MediaRegistry:
    return request.app.state.media


# -----------------------------------------------------------------------------

@router.post("", response_model=RenderResponse)
def render_blocks(
    body:     RenderRequest,
    settings: Settings = Depends(get_settings),
    media:    MediaRegistry = Depends(get_media),
):
    """Render a block tree to HTML.

    With a Notion token configured, missing children and link targets are
    fetched from the Notion API; otherwise they are looked up in the tables
    sent with the request.  ``pending`` lists the downloads this render queued.
    """
    if settings.has_notion_token:
        with NotionContentProvider(settings=settings, media=media) as provider:
            html = render(body.blocks, provider, settings)
            pending = list(provider.enqueued)
    else:
        provider = InMemoryContentProvider(
            children=body.children,
            pages=body.pages,
            databases=body.databases,
            media=media,
        )
        html = render(body.blocks, provider, settings)
        pending = list(provider.enqueued)

    return RenderResponse(html=html, pending=pending)


# -----------------------------------------------------------------------------
