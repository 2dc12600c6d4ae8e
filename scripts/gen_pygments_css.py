#!/usr/bin/env python
"""
Write the Pygments stylesheet for highlighted code blocks.

Usage:
    .venv/bin/python scripts/gen_pygments_css.py [output.css] [--style NAME]
"""

import argparse

from pygments.formatters import HtmlFormatter


def main() -> None:
    parser = argparse.ArgumentParser(description="Write the Pygments stylesheet for .highlight blocks.")
    parser.add_argument("output", nargs="?", default="pygments.css")
    parser.add_argument("--style", default="friendly")
    args = parser.parse_args()

    css = HtmlFormatter(style=args.style).get_style_defs(".highlight")
    with open(args.output, "w") as f:
        f.write(css)
    print(f"Written {args.output}")


if __name__ == "__main__":
    main()
