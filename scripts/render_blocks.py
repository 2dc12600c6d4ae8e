#!/usr/bin/env python
"""
Render Notion blocks to HTML.

Usage:
    .venv/bin/python scripts/render_blocks.py <blocks.json> [options]
    .venv/bin/python scripts/render_blocks.py --page <page-id> [options]

Options:
    --page ID        Fetch the page's blocks from the Notion API instead of
                     reading a JSON file (needs BLOCKPRESS_NOTION_API_TOKEN)
    --output FILE    Write HTML to FILE (default: stdout)
    --highlight      Highlight code blocks with Pygments
    --pending        Also print queued media downloads to stderr

The JSON file may hold a list of block objects or a Notion list response
({"object": "list", "results": [...]}).  Blocks with children but no inline
"children" array have them fetched from the Notion API when a token is
configured.

Example:
    .venv/bin/python scripts/render_blocks.py export.json --output page.html
    .venv/bin/python scripts/render_blocks.py --page 1a2b3c... --highlight
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure the package is importable when run from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from blockpress.core.config import get_settings
from blockpress.core.errors import ContentProviderError
from blockpress.schemas import parse_blocks
from blockpress.services.notion_api import NotionContentProvider
from blockpress.services.provider import InMemoryContentProvider
from blockpress.services.renderer import render


# ── CLI ───────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render Notion blocks to HTML.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("json_file", nargs="?", help="Path to a JSON file of blocks")
    parser.add_argument("--page", metavar="ID",
                        help="Notion page id to fetch and render")
    parser.add_argument("--output", metavar="FILE",
                        help="Write HTML to FILE instead of stdout")
    parser.add_argument("--highlight", action="store_true",
                        help="Highlight code blocks with Pygments")
    parser.add_argument("--pending", action="store_true",
                        help="Print queued media downloads to stderr")
    args = parser.parse_args()

    if not args.json_file and not args.page:
        parser.error("either a JSON file or --page is required")

    settings = get_settings()
    if args.highlight:
        settings = settings.model_copy(update={"highlight_code": True})

    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(levelname)-8s %(name)s: %(message)s")

    if settings.has_notion_token:
        provider = NotionContentProvider(settings=settings)
    elif args.page:
        print("Error: --page needs BLOCKPRESS_NOTION_API_TOKEN", file=sys.stderr)
        sys.exit(1)
    else:
        provider = InMemoryContentProvider()

    try:
        if args.page:
            blocks = provider.fetch_children(args.page)
        else:
            path = Path(args.json_file).expanduser().resolve()
            if not path.exists():
                print(f"Error: file not found: {path}", file=sys.stderr)
                sys.exit(1)
            blocks = parse_blocks(json.loads(path.read_text(encoding="utf-8")))
        html = render(blocks, provider, settings)
    except ContentProviderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    finally:
        if isinstance(provider, NotionContentProvider):
            provider.close()

    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
        print(f"Written {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(html + "\n")

    if args.pending:
        for request in provider.enqueued:
            print(f"pending {request.kind}: {request.url}", file=sys.stderr)


if __name__ == "__main__":
    main()
