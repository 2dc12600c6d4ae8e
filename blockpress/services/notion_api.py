#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Notion REST API content provider.

Fetches block children and page / database metadata over HTTPS with a
synchronous ``httpx.Client``.  Temporary media URLs are materialised through
a ``MediaRegistry`` shared with whoever performs the actual downloads.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from blockpress.core.config import Settings, get_settings
from blockpress.core.errors import ContentProviderError
from blockpress.schemas.blocks import BaseBlock, parse_blocks
from blockpress.schemas.schemas import EntityReference, FetchRequest
from blockpress.services.provider import MediaRegistry


log = logging.getLogger(__name__)

PAGE_SIZE = 100

# Returned by Notion when an integration has no access to a linked database.
_NOT_SHARED_HINT = "Make sure the relevant pages and databases are shared"


# -----------------------------------------------------------------------------

class NotionContentProvider:
    """``ContentProvider`` backed by the Notion public API."""

    def __init__(
        self,
        token: str | None = None,
        settings: Settings | None = None,
        media: MediaRegistry | None = None,
        client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.media = media if media is not None else MediaRegistry()
        self.enqueued: list[FetchRequest] = []
        self._client = client or httpx.Client(
            base_url=settings.notion_api_base,
            headers={
                "Authorization": f"Bearer {token if token is not None else settings.notion_api_token}",
                "Notion-Version": settings.notion_version,
                "Content-Type": "application/json",
            },
            timeout=settings.notion_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> NotionContentProvider:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ── transport ──────────────────────────────────────────────────────────

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise ContentProviderError(f"Notion request failed: {exc}") from exc

        if response.is_success:
            return response.json()

        try:
            message = response.json().get("message", response.text)
        except ValueError:
            message = response.text
        raise ContentProviderError(
            f"Notion API error ({response.status_code}): {message}",
            status_code=response.status_code,
        )

    # ── ContentProvider ────────────────────────────────────────────────────

    def fetch_children(self, block_id: str) -> list[BaseBlock]:
        """All direct children of *block_id*, following pagination."""
        results: list[dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            params: dict[str, Any] = {"page_size": PAGE_SIZE}
            if cursor:
                params["start_cursor"] = cursor
            try:
                data = self._get(f"blocks/{block_id}/children", params)
            except ContentProviderError as exc:
                if exc.status_code == 404 and _NOT_SHARED_HINT in str(exc):
                    log.warning("Children of %s are not shared with the integration", block_id)
                    break
                raise
            results.extend(data.get("results") or [])
            if not data.get("has_more"):
                break
            cursor = data.get("next_cursor")
            if not cursor:
                break
        log.debug("Fetched %d children of %s", len(results), block_id)
        return parse_blocks(results)

    def resolve_page_reference(self, page_id: str) -> Optional[EntityReference]:
        data = self._get_or_none(f"pages/{page_id}")
        if data is None:
            return None
        title_prop = (data.get("properties") or {}).get("title") or {}
        title = _first_plain_text(title_prop.get("title"))
        return EntityReference(url=data.get("url") or "", title=title)

    def resolve_database_reference(self, database_id: str) -> Optional[EntityReference]:
        data = self._get_or_none(f"databases/{database_id}")
        if data is None:
            return None
        return EntityReference(url=data.get("url") or "", title=_first_plain_text(data.get("title")))

    def lookup_existing_resource(self, url: str) -> Optional[str]:
        return self.media.lookup(url)

    def enqueue_fetch(self, request: FetchRequest) -> None:
        self.enqueued.append(request)
        self.media.enqueue(request)

    # ── extras ─────────────────────────────────────────────────────────────

    def check_connection(self) -> bool:
        """True if the token is accepted by the API."""
        try:
            self._get("users/me")
        except ContentProviderError as exc:
            log.warning("Notion connection check failed: %s", exc)
            return False
        return True

    def _get_or_none(self, path: str) -> Optional[dict[str, Any]]:
        try:
            return self._get(path)
        except ContentProviderError as exc:
            if exc.status_code == 404:
                log.debug("Notion object not found: %s", path)
                return None
            raise


# -----------------------------------------------------------------------------

def _first_plain_text(items: Any) -> str:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get("plain_text") or ""
    return ""


# -----------------------------------------------------------------------------
