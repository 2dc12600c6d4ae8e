#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pydantic v2 schemas for provider payloads and the HTTP API.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .blocks import Block


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Shared
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class OKResponse(BaseModel):
    ok: bool = True
    message: str = "success"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Content provider values
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class FetchRequest(BaseModel):
    """Ask the media worker to materialise a temporary URL."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["image", "file"]
    url: str
    caption: str = ""
    name: Optional[str] = None


# -----------------------------------------------------------------------------

class EntityReference(BaseModel):
    """Resolved page or database: where it lives and what it is called."""

    model_config = ConfigDict(frozen=True)

    url: str = ""
    title: str = ""


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Render API
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RenderRequest(BaseModel):
    blocks: list[Block] = Field(default_factory=list)
    # Lookup tables for the in-memory provider (ignored when the Notion API
    # provider is active).
    children: dict[str, list[Block]] = Field(default_factory=dict)
    pages: dict[str, EntityReference] = Field(default_factory=dict)
    databases: dict[str, EntityReference] = Field(default_factory=dict)


# -----------------------------------------------------------------------------

class RenderResponse(BaseModel):
    html: str
    pending: list[FetchRequest] = Field(default_factory=list)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Media queue API
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ResolvedResource(BaseModel):
    url: str = Field(..., min_length=1)
    local_url: str = Field(..., min_length=1)


# -----------------------------------------------------------------------------

class PendingResponse(BaseModel):
    pending: list[FetchRequest] = Field(default_factory=list)
    count: int = 0


# -----------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    app: str
    notion_api: bool = False


# -----------------------------------------------------------------------------
