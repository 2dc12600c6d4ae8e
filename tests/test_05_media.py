#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for media blocks and temporary-URL materialisation."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import hashlib
import threading

import pytest

from blockpress.core.config import DEFAULT_TEMPORARY_HOSTS
from blockpress.services.media import (
    is_temporary_url,
    match_video_platform,
    placeholder_id,
    url_filename,
)
from blockpress.schemas import FetchRequest
from blockpress.services.provider import InMemoryContentProvider, MediaRegistry
from tests.conftest import block, html_of, image, make_settings, span


# -----------------------------------------------------------------------------

TEMP_URL   = "https://prod-files-secure.s3.us-west-2.amazonaws.com/ws/abc/photo.png?X-Amz-Signature=1"
RESIGNED   = "https://prod-files-secure.s3.us-west-2.amazonaws.com/ws/abc/photo.png?X-Amz-Signature=2"
STABLE_URL = "https://cdn.example.com/media/photo.png"


def _md5_10(url: str) -> str:
    return hashlib.md5(url.encode("utf-8")).hexdigest()[:10]


def _media(kind: str, url: str, caption: str = "", name: str = "") -> dict:
    payload = {"type": "external", "external": {"url": url}, "caption": [span(caption)] if caption else []}
    if name:
        payload["name"] = name
    return block(kind, payload)


# ── URL helpers ───────────────────────────────────────────────────────────────

@pytest.mark.parametrize("url", [
    "https://secure.notion-static.com/a/b.png",
    "https://s3.us-west-2.amazonaws.com.evil/x",
    "https://prod-files-secure.s3.amazonaws.com/x.pdf?sig=1",
    "https://files.secure.notion-static.com/a.png",
])
def test_temporary_url_classification(url):
    expected = "evil" not in url
    assert is_temporary_url(url, DEFAULT_TEMPORARY_HOSTS) is expected


def test_non_temporary_urls():
    assert not is_temporary_url("https://example.com/a.png", DEFAULT_TEMPORARY_HOSTS)
    assert not is_temporary_url("", DEFAULT_TEMPORARY_HOSTS)
    assert not is_temporary_url("not a url", DEFAULT_TEMPORARY_HOSTS)


def test_placeholder_id_is_deterministic():
    assert placeholder_id("img", TEMP_URL) == placeholder_id("img", TEMP_URL)
    assert placeholder_id("img", TEMP_URL) == f"bp-img-{_md5_10(TEMP_URL)}"
    assert placeholder_id("img", TEMP_URL) != placeholder_id("img", RESIGNED)
    assert placeholder_id("file", TEMP_URL, prefix="site").startswith("site-file-")


def test_url_filename():
    assert url_filename("https://h.example/a/My%20Report.pdf?x=1") == "My Report.pdf"


@pytest.mark.parametrize("url, expected", [
    ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", ("youtube", "dQw4w9WgXcQ")),
    ("https://youtu.be/dQw4w9WgXcQ", ("youtube", "dQw4w9WgXcQ")),
    ("https://www.youtube.com/embed/dQw4w9WgXcQ", ("youtube", "dQw4w9WgXcQ")),
    ("https://vimeo.com/76979871", ("vimeo", "76979871")),
    ("https://vimeo.com/channels/staffpicks/76979871", ("vimeo", "76979871")),
    ("https://www.bilibili.com/video/BV1GJ411x7h7?p=2", ("bilibili", "BV1GJ411x7h7")),
    ("https://example.com/movie.mp4", None),
])
def test_match_video_platform(url, expected):
    assert match_video_platform(url) == expected


# ── Images ────────────────────────────────────────────────────────────────────

def test_external_image_renders_directly():
    provider = InMemoryContentProvider()
    html = html_of([image("https://example.com/a.png", caption="A cat", kind="external")], provider)
    assert html == (
        '<figure class="notion-image"><img src="https://example.com/a.png" alt="A cat" loading="lazy">'
        "<figcaption>A cat</figcaption></figure>"
    )
    assert provider.enqueued == []


def test_temporary_image_renders_placeholder_and_enqueues():
    provider = InMemoryContentProvider()
    html = html_of([image(TEMP_URL, caption="Chart")], provider)

    assert f'id="bp-img-{_md5_10(TEMP_URL)}"' in html
    assert f'data-pending-url="{TEMP_URL}"' in html
    assert "notion-temp-image" in html
    assert "being downloaded in the background" in html

    assert len(provider.enqueued) == 1
    request = provider.enqueued[0]
    assert request.kind == "image"
    assert request.url == TEMP_URL
    assert request.caption == "Chart"


def test_placeholder_stable_across_renders():
    first = html_of([image(TEMP_URL)], InMemoryContentProvider())
    second = html_of([image(TEMP_URL)], InMemoryContentProvider())
    assert first == second


def test_materialised_image_uses_stable_url():
    provider = InMemoryContentProvider()
    provider.media.register(TEMP_URL, STABLE_URL)
    html = html_of([image(TEMP_URL)], provider)
    assert f'src="{STABLE_URL}"' in html
    assert "data-pending-url" not in html
    assert provider.enqueued == []


def test_resigned_url_matches_materialised_resource():
    provider = InMemoryContentProvider()
    provider.media.register(TEMP_URL, STABLE_URL)
    html = html_of([image(RESIGNED)], provider)
    assert f'src="{STABLE_URL}"' in html


def test_custom_temporary_hosts():
    settings = make_settings(temporary_hosts=["files.internal.example"])
    provider = InMemoryContentProvider()
    html_of([image("https://files.internal.example/a.png")], provider, settings)
    html_of([image(TEMP_URL)], provider, settings)
    assert [r.url for r in provider.enqueued] == ["https://files.internal.example/a.png"]


def test_custom_placeholder_prefix():
    settings = make_settings(placeholder_prefix="site")
    html = html_of([image(TEMP_URL)], settings=settings)
    assert f'id="site-img-{_md5_10(TEMP_URL)}"' in html


# ── Empty URLs ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("kind, comment", [
    ("image", "<!-- Empty image URL -->"),
    ("file",  "<!-- Empty file block -->"),
    ("pdf",   "<!-- Empty PDF URL -->"),
    ("video", "<!-- Empty video URL -->"),
])
def test_empty_media_url(kind, comment):
    assert html_of([block(kind, {"type": "file", "file": {"url": ""}})]) == comment


def test_empty_embed_url():
    assert html_of([block("embed", {"url": ""})]) == "<!-- Empty embed URL -->"


@pytest.mark.parametrize("kind", ["image", "file", "pdf", "video"])
def test_unsafe_media_url_is_treated_as_empty(kind):
    html = html_of([_media(kind, "javascript:alert(1)")])
    assert html.startswith("<!-- Empty")
    assert "javascript" not in html


def test_unsafe_embed_url_is_treated_as_empty():
    html = html_of([block("embed", {"url": "javascript:alert(3)"})])
    assert html == "<!-- Empty embed URL -->"


# ── Files / PDFs ──────────────────────────────────────────────────────────────

def test_external_file_download_box():
    html = html_of([_media("file", "https://example.com/files/report.zip")])
    assert '<span class="file-download-name">report.zip</span>' in html
    assert 'href="https://example.com/files/report.zip" download' in html


def test_temporary_file_enqueues_with_name():
    provider = InMemoryContentProvider()
    url = "https://secure.notion-static.com/abc/data.csv"
    html = html_of([_media("file", url, caption="Dataset", name="data.csv")], provider)
    assert "notion-temp-file" in html
    assert f'id="bp-file-{_md5_10(url)}"' in html
    assert '<span class="file-download-name">Dataset</span>' in html
    assert provider.enqueued[0].kind == "file"
    assert provider.enqueued[0].name == "data.csv"


def test_external_pdf_viewer():
    html = html_of([_media("pdf", "https://example.com/paper.pdf")])
    assert html.startswith('<div class="notion-pdf"><embed src="https://example.com/paper.pdf" type="application/pdf"')


def test_temporary_pdf_placeholder():
    provider = InMemoryContentProvider()
    url = "https://prod-files-secure.s3.amazonaws.com/ws/paper.pdf"
    html = html_of([_media("pdf", url)], provider)
    assert f'id="bp-pdf-{_md5_10(url)}"' in html
    assert provider.enqueued[0].kind == "file"
    assert provider.enqueued[0].name == "paper.pdf"


# ── Video ─────────────────────────────────────────────────────────────────────

def test_youtube_video():
    html = html_of([_media("video", "https://www.youtube.com/watch?v=dQw4w9WgXcQ")])
    assert 'class="notion-video notion-video-youtube"' in html
    assert 'src="https://www.youtube.com/embed/dQw4w9WgXcQ"' in html


def test_vimeo_and_bilibili_video():
    assert "player.vimeo.com/video/76979871" in html_of([_media("video", "https://vimeo.com/76979871")])
    assert "bvid=BV1GJ411x7h7" in html_of([_media("video", "https://www.bilibili.com/video/BV1GJ411x7h7")])


def test_direct_video_file():
    html = html_of([_media("video", "https://example.com/clip.webm")])
    assert '<video controls width="100%"><source src="https://example.com/clip.webm" type="video/webm">' in html


def test_other_video_falls_back_to_link():
    html = html_of([_media("video", "https://example.com/watch/42")])
    assert html == (
        '<div class="notion-video-link"><a href="https://example.com/watch/42" '
        'target="_blank" rel="noopener">View video</a></div>'
    )


def test_temporary_video_placeholder():
    provider = InMemoryContentProvider()
    url = "https://prod-files-secure.s3.us-west-2.amazonaws.com/ws/clip.mp4"
    html = html_of([_media("video", url)], provider)
    assert f'id="bp-video-{_md5_10(url)}"' in html
    assert "<video controls" in html
    assert provider.enqueued[0].kind == "file"


# ── Embed ─────────────────────────────────────────────────────────────────────

def test_embed_pdf():
    html = html_of([block("embed", {"url": "https://example.com/doc.pdf?dl=1"})])
    assert 'class="notion-embed notion-embed-pdf"' in html
    assert 'type="application/pdf"' in html


def test_embed_generic_iframe():
    html = html_of([block("embed", {"url": "https://codepen.io/pen/abc"})])
    assert html.startswith('<div class="notion-embed"><iframe src="https://codepen.io/pen/abc"')


def test_embed_youtube():
    html = html_of([block("embed", {"url": "https://youtu.be/dQw4w9WgXcQ"})])
    assert 'class="notion-embed notion-embed-youtube"' in html


# ── Registry ──────────────────────────────────────────────────────────────────

def test_registry_drain_loses_nothing_under_concurrent_enqueue():
    registry = MediaRegistry()
    urls = [f"https://prod-files-secure.s3.us-west-2.amazonaws.com/ws/{i}/f.png" for i in range(2000)]

    def produce(chunk):
        for url in chunk:
            registry.enqueue(FetchRequest(kind="image", url=url))

    def resolve():
        for i in range(500):
            registry.register(f"https://files.example.com/other-{i}.png", f"/media/other-{i}.png")

    threads = [threading.Thread(target=produce, args=(urls[i::4],)) for i in range(4)]
    threads.append(threading.Thread(target=resolve))
    for t in threads:
        t.start()

    drained: list[FetchRequest] = []
    while any(t.is_alive() for t in threads):
        drained.extend(registry.drain())
    for t in threads:
        t.join()
    drained.extend(registry.drain())

    assert sorted(r.url for r in drained) == sorted(urls)
    assert registry.pending() == []


def test_registry_register_clears_resigned_pending():
    registry = MediaRegistry()
    registry.enqueue(FetchRequest(kind="image", url=TEMP_URL))
    registry.register(RESIGNED, STABLE_URL)
    assert registry.pending() == []
    assert registry.lookup(TEMP_URL) == STABLE_URL


# -----------------------------------------------------------------------------
