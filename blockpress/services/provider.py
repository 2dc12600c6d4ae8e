#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Content provider interface and in-process implementations.

The renderer never talks to Notion, a database or a download worker
directly.  Everything it needs from the outside world goes through a
``ContentProvider``:

  - ``fetch_children``             : children of a block that arrived without them
  - ``resolve_page_reference``     : title + URL for a ``link_to_page`` page target
  - ``resolve_database_reference`` : title + URL for a ``link_to_page`` database target
  - ``lookup_existing_resource``   : stable URL for an already-downloaded temporary URL
  - ``enqueue_fetch``              : ask for a temporary URL to be downloaded later

All calls are blocking from the renderer's point of view.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Optional, Protocol, runtime_checkable
from urllib.parse import urlsplit, urlunsplit

from blockpress.schemas.blocks import BaseBlock
from blockpress.schemas.schemas import EntityReference, FetchRequest


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@runtime_checkable
class ContentProvider(Protocol):

    def fetch_children(self, block_id: str) -> Sequence[BaseBlock]:
        ...

    def resolve_page_reference(self, page_id: str) -> Optional[EntityReference]:
        ...

    def resolve_database_reference(self, database_id: str) -> Optional[EntityReference]:
        ...

    def lookup_existing_resource(self, url: str) -> Optional[str]:
        ...

    def enqueue_fetch(self, request: FetchRequest) -> None:
        ...


# -----------------------------------------------------------------------------
# Media registry
# -----------------------------------------------------------------------------

def base_url(url: str) -> str:
    """*url* without query string or fragment.

    Notion re-signs file URLs on every API call, so only the path identifies
    the underlying file.
    """
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class MediaRegistry:
    """Materialised resources plus the queue of fetches still outstanding.

    Shared by every request of an app, so all access goes through one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._resources: dict[str, str] = {}
        self._pending: dict[str, FetchRequest] = {}

    # ── lookups ────────────────────────────────────────────────────────────

    def lookup(self, url: str) -> Optional[str]:
        with self._lock:
            return self._resources.get(url) or self._resources.get(base_url(url))

    def register(self, url: str, local_url: str) -> None:
        """Record a completed fetch; drops the matching pending request."""
        base = base_url(url)
        with self._lock:
            self._resources[url] = local_url
            self._resources[base] = local_url
            for key in [k for k in self._pending if base_url(k) == base]:
                del self._pending[key]
        log.debug("Registered resource %s -> %s", url, local_url)

    # ── queue ──────────────────────────────────────────────────────────────

    def enqueue(self, request: FetchRequest) -> None:
        with self._lock:
            if request.url in self._pending:
                return
            self._pending[request.url] = request
        log.debug("Queued %s fetch for %s", request.kind, request.url)

    def pending(self) -> list[FetchRequest]:
        with self._lock:
            return list(self._pending.values())

    def drain(self) -> list[FetchRequest]:
        """Return and clear every pending request."""
        with self._lock:
            requests = list(self._pending.values())
            self._pending.clear()
        return requests


# -----------------------------------------------------------------------------
# In-memory provider
# -----------------------------------------------------------------------------

class InMemoryContentProvider:
    """Provider backed by plain mappings, used by the HTTP API and tests."""

    def __init__(
        self,
        children: Mapping[str, Sequence[BaseBlock]] | None = None,
        pages: Mapping[str, EntityReference] | None = None,
        databases: Mapping[str, EntityReference] | None = None,
        media: MediaRegistry | None = None,
    ) -> None:
        self.children  = dict(children or {})
        self.pages     = dict(pages or {})
        self.databases = dict(databases or {})
        self.media     = media if media is not None else MediaRegistry()
        self.enqueued: list[FetchRequest] = []

    def fetch_children(self, block_id: str) -> Sequence[BaseBlock]:
        return list(self.children.get(block_id, ()))

    def resolve_page_reference(self, page_id: str) -> Optional[EntityReference]:
        return self.pages.get(page_id)

    def resolve_database_reference(self, database_id: str) -> Optional[EntityReference]:
        return self.databases.get(database_id)

    def lookup_existing_resource(self, url: str) -> Optional[str]:
        return self.media.lookup(url)

    def enqueue_fetch(self, request: FetchRequest) -> None:
        self.enqueued.append(request)
        self.media.enqueue(request)


# -----------------------------------------------------------------------------
