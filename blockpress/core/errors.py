#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Exceptions raised across the render pipeline.

Document-level problems (missing payload fields, unknown block types,
unresolvable links) never raise; they degrade to placeholder markup.  Only a
failing content provider is allowed to surface to the caller.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations


# -----------------------------------------------------------------------------

class ContentProviderError(Exception):
    """A content provider could not complete a blocking call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# -----------------------------------------------------------------------------
