#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Media and embed blocks
======================
Renders image / file / pdf / video / embed blocks.

Notion serves uploaded files from signed URLs that expire after about an
hour.  Such *temporary* URLs (recognised by host, see
``Settings.temporary_hosts``) are swapped for a stable copy when the content
provider already has one; otherwise a background fetch is queued and a
placeholder is rendered.  The placeholder id is derived from the URL alone,
so re-rendering the same unresolved URL always yields the same id and a
post-processor can later replace it in place.

External (non-temporary) URLs are always rendered directly.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import hashlib
import html as _html
import re
from collections.abc import Iterable
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Optional
from urllib.parse import unquote, urlsplit

from blockpress.schemas.blocks import (
    EmbedBlock,
    FileBlock,
    ImageBlock,
    PdfBlock,
    VideoBlock,
)
from blockpress.schemas.schemas import FetchRequest
from blockpress.services.rich_text import extract_plain_text, render_rich_text, safe_url

if TYPE_CHECKING:
    from blockpress.services.renderer import RenderSession


# -----------------------------------------------------------------------------

VIDEO_EXTENSIONS = ("mp4", "webm", "ogg")

_YOUTUBE_RE  = re.compile(r'(?:youtube\.com/(?:[^/]+/.*/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^"&?/\s]{11})')
_VIMEO_RE    = re.compile(r'vimeo\.com/(?:channels/(?:\w+/)?|groups/([^/]*)/videos/|)(\d+)')
_BILIBILI_RE = re.compile(r'bilibili\.com/video/([^/?&]+)')
_PDF_URL_RE  = re.compile(r'\.pdf(\?|$)', re.IGNORECASE)


def _attr(value: str) -> str:
    return _html.escape(value, quote=True)


# -----------------------------------------------------------------------------
# URL helpers
# -----------------------------------------------------------------------------

def is_temporary_url(url: str, hosts: Iterable[str]) -> bool:
    """True if *url*'s host is one of *hosts* or a sub-domain of one."""
    try:
        host = (urlsplit(url).hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False
    for candidate in hosts:
        candidate = candidate.lower()
        if host == candidate or host.endswith("." + candidate):
            return True
    return False


def placeholder_id(kind: str, url: str, prefix: str = "bp") -> str:
    """Deterministic element id for the placeholder of an unresolved *url*."""
    digest = hashlib.md5(url.encode("utf-8")).hexdigest()[:10]
    return f"{prefix}-{kind}-{digest}"


def url_filename(url: str) -> str:
    return unquote(PurePosixPath(urlsplit(url).path).name)


def url_extension(url: str) -> str:
    return PurePosixPath(urlsplit(url).path).suffix.lower().lstrip(".")


def match_video_platform(url: str) -> Optional[tuple[str, str]]:
    """Return ``(platform, video_id)`` for YouTube, Vimeo and Bilibili URLs."""
    m = _YOUTUBE_RE.search(url)
    if m:
        return "youtube", m.group(1)
    m = _VIMEO_RE.search(url)
    if m:
        return "vimeo", m.group(2)
    m = _BILIBILI_RE.search(url)
    if m:
        return "bilibili", m.group(1)
    return None


def platform_player(platform: str, video_id: str) -> str:
    """``<iframe>`` player markup for a matched video platform."""
    vid = _attr(video_id)
    if platform == "youtube":
        return (
            f'<iframe width="560" height="315" src="https://www.youtube.com/embed/{vid}" '
            'frameborder="0" allow="accelerometer; autoplay; clipboard-write; '
            'encrypted-media; gyroscope; picture-in-picture" allowfullscreen></iframe>'
        )
    if platform == "vimeo":
        return (
            f'<iframe src="https://player.vimeo.com/video/{vid}" width="560" height="315" '
            'frameborder="0" allow="autoplay; fullscreen; picture-in-picture" '
            'allowfullscreen></iframe>'
        )
    return (
        f'<iframe src="//player.bilibili.com/player.html?bvid={vid}&amp;page=1" '
        'scrolling="no" border="0" frameborder="no" framespacing="0" '
        'allowfullscreen="true" width="560" height="315"></iframe>'
    )


def _video_player(src: str, ext: str) -> str:
    return (
        f'<video controls width="100%"><source src="{_attr(src)}" type="video/{_attr(ext)}">'
        'Your browser does not support the video tag.</video>'
    )


def _pdf_viewer(src: str, label: str, download: bool = False) -> str:
    dl = " download" if download else ""
    return (
        f'<embed src="{_attr(src)}" type="application/pdf" width="100%" height="600px" />'
        f'<p><a href="{_attr(src)}" target="_blank" rel="noopener"{dl}>{label}</a></p>'
    )


# -----------------------------------------------------------------------------
# Temporary URL resolution
# -----------------------------------------------------------------------------

def materialise(
    session: RenderSession,
    kind: str,
    url: str,
    caption: str = "",
    name: str = "",
) -> tuple[str, bool]:
    """Decide which URL to render for *url*.

    Returns ``(url_to_render, pending)``.  ``pending`` is True when *url* is
    temporary and no stable copy exists yet; a fetch has been queued and the
    caller must render a placeholder.
    """
    settings = session.settings
    if not is_temporary_url(url, settings.temporary_hosts):
        return url, False

    existing = session.provider.lookup_existing_resource(url)
    if existing:
        return existing, False

    session.provider.enqueue_fetch(
        FetchRequest(kind=kind, url=url, caption=caption, name=name or None)
    )
    return url, True


def _pending_attrs(session: RenderSession, kind: str, url: str) -> str:
    pid = placeholder_id(kind, url, session.settings.placeholder_prefix)
    return f' id="{_attr(pid)}" data-pending-url="{_attr(url)}"'


# -----------------------------------------------------------------------------
# Block renderers
# -----------------------------------------------------------------------------

def render_image(block: ImageBlock, session: RenderSession) -> str:
    payload = block.image
    url = safe_url(payload.source_url)
    if not url:
        return "<!-- Empty image URL -->"

    caption_html = render_rich_text(payload.caption)
    caption_text = extract_plain_text(payload.caption)
    alt = _attr(caption_text)

    src, pending = materialise(session, "image", url, caption_text)
    if pending:
        notice = "Image is being downloaded in the background…"
        figcaption = f"{caption_html} - {notice}" if caption_html else notice
        return (
            f'<figure class="notion-image notion-temp-image"{_pending_attrs(session, "img", url)}>'
            f'<img src="{_attr(src)}" alt="{alt}" loading="lazy">'
            f'<figcaption>{figcaption}</figcaption></figure>'
        )

    figcaption = f"<figcaption>{caption_html}</figcaption>" if caption_html else ""
    return (
        f'<figure class="notion-image"><img src="{_attr(src)}" alt="{alt}" loading="lazy">'
        f'{figcaption}</figure>'
    )


def render_file(block: FileBlock, session: RenderSession) -> str:
    payload = block.file
    url = safe_url(payload.source_url)
    if not url:
        return "<!-- Empty file block -->"

    caption_text = extract_plain_text(payload.caption)
    file_name = payload.name or url_filename(url)
    display = _html.escape(caption_text or file_name, quote=False)

    src, pending = materialise(session, "file", url, caption_text, file_name)
    if pending:
        return (
            f'<div class="file-download-box notion-temp-file"{_pending_attrs(session, "file", url)}>'
            f'<span class="file-download-name">{display}</span> '
            f'<a class="file-download-btn" href="{_attr(src)}" target="_blank" rel="noopener">'
            'Download attachment (processing in background…)</a></div>'
        )

    return (
        f'<div class="file-download-box"><span class="file-download-name">{display}</span> '
        f'<a class="file-download-btn" href="{_attr(src)}" download target="_blank" rel="noopener">'
        'Download attachment</a></div>'
    )


def render_pdf(block: PdfBlock, session: RenderSession) -> str:
    payload = block.pdf
    url = safe_url(payload.source_url)
    if not url:
        return "<!-- Empty PDF URL -->"

    caption_html = render_rich_text(payload.caption)
    caption_text = extract_plain_text(payload.caption)
    caption = f'<p class="notion-pdf-caption">{caption_html}</p>' if caption_html else ""

    src, pending = materialise(session, "file", url, caption_text, payload.name or url_filename(url))
    if pending:
        return (
            f'<div class="notion-pdf notion-temp-pdf"{_pending_attrs(session, "pdf", url)}>'
            f'{_pdf_viewer(src, "Download PDF (external link, may expire)")}{caption}</div>'
        )

    resolved = src != url
    return f'<div class="notion-pdf">{_pdf_viewer(src, "Download PDF", download=resolved)}{caption}</div>'


def render_video(block: VideoBlock, session: RenderSession) -> str:
    payload = block.video
    url = safe_url(payload.source_url)
    if not url:
        return "<!-- Empty video URL -->"

    platform = match_video_platform(url)
    if platform:
        name, vid = platform
        return f'<div class="notion-video notion-video-{name}">{platform_player(name, vid)}</div>'

    caption_text = extract_plain_text(payload.caption)
    src, pending = materialise(session, "file", url, caption_text, payload.name or url_filename(url))

    ext = url_extension(url)
    if ext in VIDEO_EXTENSIONS:
        body = _video_player(src, ext)
        css = "notion-video"
    else:
        body = f'<a href="{_attr(src)}" target="_blank" rel="noopener">View video</a>'
        css = "notion-video-link"

    if pending:
        return (
            f'<div class="{css} notion-temp-video"{_pending_attrs(session, "video", url)}>'
            f'{body}<p class="notion-processing">Video is being downloaded in the background…</p></div>'
        )
    return f'<div class="{css}">{body}</div>'


def render_embed(block: EmbedBlock, session: RenderSession) -> str:
    url = safe_url(block.embed.url)
    if not url:
        return "<!-- Empty embed URL -->"

    platform = match_video_platform(url)
    if platform:
        name, vid = platform
        return f'<div class="notion-embed notion-embed-{name}">{platform_player(name, vid)}</div>'

    caption_text = extract_plain_text(block.embed.caption)
    src, pending = materialise(session, "file", url, caption_text, url_filename(url))

    ext = url_extension(url)
    if _PDF_URL_RE.search(url):
        css, body = "notion-embed notion-embed-pdf", _pdf_viewer(src, "Download PDF")
    elif ext in VIDEO_EXTENSIONS:
        css, body = "notion-embed notion-embed-video", _video_player(src, ext)
    else:
        css, body = "notion-embed", (
            f'<iframe src="{_attr(src)}" width="100%" height="500" frameborder="0" '
            'loading="lazy" referrerpolicy="no-referrer"></iframe>'
        )

    if pending:
        return (
            f'<div class="{css} notion-temp-embed"{_pending_attrs(session, "embed", url)}>'
            f'{body}<p class="notion-processing">Embedded file is being downloaded in the background…</p></div>'
        )
    return f'<div class="{css}">{body}</div>'


# -----------------------------------------------------------------------------
