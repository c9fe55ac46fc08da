#!/usr/bin/env python3
"""Turn rendered board Markdown into a standalone HTML document.

The exporter only ever sees finished Markdown text: it converts it with
Python-Markdown and wraps the result in ``templates/document.html.j2``.
It can be run on its own against any Markdown file written by
``trello_to_markdown.py``.

Example usage:
    markdown-to-document board.md -o board.html --title "My Board"
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).with_name("templates")
env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html.j2"]),
)
DOCUMENT_TEMPLATE = env.get_template("document.html.j2")

DOCUMENT_SUFFIX = ".html"
MARKDOWN_EXTENSIONS = ["sane_lists"]
LOG_LEVELS = ["debug", "info", "warning", "error"]
LOG_LEVEL_ENV = "TRELLO2MD_LOG_LEVEL"

logger = logging.getLogger(__name__)


def default_log_level() -> str:
    """Return the log level named by ``TRELLO2MD_LOG_LEVEL``, else ``info``.

    argparse does not check defaults against ``choices``, so an unknown
    value in the environment is ignored here.
    """
    level = os.environ.get(LOG_LEVEL_ENV, "").strip().lower()
    return level if level in LOG_LEVELS else "info"


class DocumentExportError(RuntimeError):
    """Raised when the document cannot be written."""


def render_document(markdown_text: str, title: str = "") -> str:
    """Return a complete HTML page for *markdown_text*."""
    body = markdown.markdown(markdown_text, extensions=MARKDOWN_EXTENSIONS)
    return DOCUMENT_TEMPLATE.render(title=title, body=body)


def export_document(markdown_text: str, destination: Path, title: str = "") -> Path:
    """Write the HTML rendition of *markdown_text* to *destination*."""
    html = render_document(markdown_text, title=title)
    try:
        if destination.parent != Path(""):
            destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(html, encoding="utf-8")
    except OSError as exc:
        raise DocumentExportError(f"Could not write document {destination}: {exc}") from exc

    logger.info("%s successfully created", destination)
    return destination


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert a Markdown board file into an HTML document",
    )
    parser.add_argument("markdown_file", type=Path, help="Path to the Markdown file")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Document to write (default: the Markdown path with an .html suffix)",
    )
    parser.add_argument("--title", default="", help="Optional page title")
    parser.add_argument(
        "-l",
        "--log-level",
        default=default_log_level(),
        choices=LOG_LEVELS,
        help="Logging verbosity (default: info or the TRELLO2MD_LOG_LEVEL env var)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(message)s")

    if not args.markdown_file.is_file():
        raise SystemExit(f"Markdown file not found: {args.markdown_file}")

    destination = args.output or args.markdown_file.with_suffix(DOCUMENT_SUFFIX)
    text = args.markdown_file.read_text(encoding="utf-8")
    try:
        export_document(text, destination, title=args.title)
    except DocumentExportError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - command line usage
    sys.exit(main())
