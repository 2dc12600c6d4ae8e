#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Media queue endpoints.

A download worker polls ``GET /media/pending``, copies each temporary URL to
stable storage and reports back with ``POST /media/resolved``.  Renders after
that use the stable URL instead of a placeholder.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from blockpress.routes.render import get_media
from blockpress.schemas import OKResponse, PendingResponse, ResolvedResource
from blockpress.services.provider import MediaRegistry


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/media", tags=["media"])


# -----------------------------------------------------------------------------

@router.get("/pending", response_model=PendingResponse)
async def list_pending(
    drain: bool = Query(default=False),
    media: MediaRegistry = Depends(get_media),
):
    """Fetch requests still waiting for a download; ``drain=true`` clears them."""
    pending = media.drain() if drain else media.pending()
    return PendingResponse(pending=pending, count=len(pending))


@router.post("/resolved", response_model=OKResponse)
async def mark_resolved(
    body:  ResolvedResource,
    media: MediaRegistry = Depends(get_media),
):
    media.register(body.url, body.local_url)
    return OKResponse(message=f"Registered {body.local_url}")


# -----------------------------------------------------------------------------
