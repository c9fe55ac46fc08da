#!/usr/bin/env python3
"""Convert a Trello board export to a single Markdown document.

This script reads a Trello board export JSON file and writes one Markdown
file that follows the board's list order: a heading per list, a sub-heading
per card with its labels, then the card description, comments (oldest
first) and checklists.  The Markdown can optionally be turned into an HTML
document as well.

Example usage:
    trello-to-markdown board.json board.md
    trello-to-markdown -i board.json -o board.md --document-from-board
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from jinja2 import Environment, FileSystemLoader

from trello2md import __version__
from trello2md.export_document import (
    DOCUMENT_SUFFIX,
    LOG_LEVELS,
    DocumentExportError,
    default_log_level,
    export_document,
)
from trello2md.trello_board import INCOMPLETE, Board, BoardList, Label, ReshapeOptions, reshape

CHECKLIST_LABEL = "Checklist: "
UNCHECKED = "[ ] "
CHECKED = "[X] "

logger = logging.getLogger(__name__)


class BoardReadError(RuntimeError):
    """Raised when the export cannot be read or decoded."""


def slugify(value: str) -> str:
    """Return a filesystem friendly slug for *value*.

    Only the characters ``a-z`` and ``0-9`` are kept; everything else is
    replaced by ``-``.  Multiple ``-`` characters are collapsed into
    one, and leading/trailing ``-`` are stripped.  An empty result
    returns ``"board"``.
    """
    value = value.lower()
    value = re.sub(r"[^a-z0-9]+", "-", value).strip("-")
    return value or "board"


def label_tags(labels: Iterable[Label]) -> str:
    """Render labels as escaped ``\\[name\\]`` tags, each followed by a space."""
    return "".join(f"\\[{label.name}\\] " for label in labels)


def date_tag(timestamp: str) -> str:
    """Return the UTC calendar date of *timestamp* as ``YYYY-MM-DD``."""
    if not timestamp or not isinstance(timestamp, str):
        return ""
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return timestamp[:10]
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"


def checkbox(state: str) -> str:
    return UNCHECKED if state == INCOMPLETE else CHECKED


TEMPLATE_DIR = Path(__file__).with_name("templates")
env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)
env.filters["label_tags"] = label_tags
env.filters["date_tag"] = date_tag
env.filters["checkbox"] = checkbox
BOARD_TEMPLATE = env.get_template("board.md.j2")


@dataclass
class RenderOptions:
    checklist_label: bool = True


def render_board(
    lists: Iterable[dict[str, Any]],
    shaped: dict[str, BoardList],
    options: RenderOptions | None = None,
) -> str:
    """Render the reshaped board as Markdown.

    *lists* is the export's own list sequence and decides the output order;
    lists without an entry in *shaped* (closed ones, usually) are skipped.
    """
    options = options or RenderOptions()
    entries = [shaped[raw["id"]] for raw in lists if raw.get("id") in shaped]
    for entry in entries:
        logger.debug("Converting list: %s", entry.name)
    return BOARD_TEMPLATE.render(
        lists=entries,
        checklist_label=CHECKLIST_LABEL if options.checklist_label else "",
    )


def load_board(json_file: Path) -> Board:
    """Read and decode a board export, raising :class:`BoardReadError`."""
    try:
        with open(json_file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise BoardReadError(f"Error opening {json_file}: {exc}") from exc

    if not isinstance(data, dict):
        raise BoardReadError(
            f"Error opening {json_file}: expected a JSON object, got {type(data).__name__}"
        )
    logger.info("JSON file successfully parsed")
    return Board.from_export(data)


def convert(
    json_file: Path,
    reshape_options: ReshapeOptions | None = None,
    render_options: RenderOptions | None = None,
) -> tuple[Board, str]:
    """Read ``json_file`` and return the board with its Markdown rendering."""
    board = load_board(json_file)

    logger.info("Board name: %s (%s)", board.name, board.short_url)
    logger.info("Number of lists: %d", len(board.lists))
    logger.info("Number of cards: %d", len(board.cards))
    logger.info("Number of actions: %d", len(board.actions))
    logger.info("Number of checklists: %d", len(board.checklists))

    shaped = reshape(board, reshape_options)
    return board, render_board(board.lists, shaped, render_options)


def write_markdown(destination: Path, text: str) -> Path:
    if destination.parent != Path(""):
        destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")
    logger.info("%s successfully created", destination)
    return destination


def document_destination(
    markdown_path: Path,
    board_name: str | None = None,
    name: str | None = None,
) -> Path:
    """Pick the HTML document path.

    An explicit *name* wins (``.html`` is appended when missing); otherwise a
    *board_name* is slugified next to the Markdown file; otherwise the
    Markdown path is reused with an ``.html`` suffix.
    """
    if name:
        path = Path(name)
        if path.suffix.lower() == DOCUMENT_SUFFIX:
            return path
        return path.with_name(path.name + DOCUMENT_SUFFIX)
    if board_name is not None:
        return markdown_path.with_name(slugify(board_name) + DOCUMENT_SUFFIX)
    return markdown_path.with_suffix(DOCUMENT_SUFFIX)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a Trello board export to Markdown",
    )
    parser.add_argument("json_file", nargs="?", type=Path, help="Trello board export JSON file")
    parser.add_argument("markdown_file", nargs="?", type=Path, help="Markdown file to write")
    parser.add_argument(
        "-i", "--input", type=Path, help="Trello board export JSON file (instead of positional)"
    )
    parser.add_argument(
        "-o", "--output", type=Path, help="Markdown file to write (instead of positional)"
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default=default_log_level(),
        choices=LOG_LEVELS,
        help="Logging verbosity (default: info or the TRELLO2MD_LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--include-closed-lists",
        action="store_true",
        default=_env_flag("TRELLO2MD_INCLUDE_CLOSED_LISTS"),
        help="Also render archived lists",
    )
    parser.add_argument(
        "--include-closed-cards",
        action="store_true",
        default=_env_flag("TRELLO2MD_INCLUDE_CLOSED_CARDS"),
        help="Also render archived cards",
    )
    parser.add_argument(
        "--no-checklist-label",
        dest="checklist_label",
        action="store_false",
        help="Omit the 'Checklist: ' prefix in front of checklist names",
    )
    parser.add_argument(
        "--document",
        action="store_true",
        help="Also export an HTML document next to the Markdown file",
    )
    naming = parser.add_mutually_exclusive_group()
    naming.add_argument(
        "--document-name",
        help="File name for the HTML document (implies --document)",
    )
    naming.add_argument(
        "--document-from-board",
        action="store_true",
        help="Name the HTML document after the board (implies --document)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    source = args.input or args.json_file
    # With -i, a lone positional lands in json_file but names the output.
    destination = args.output or args.markdown_file or (args.json_file if args.input else None)
    if source is None:
        parser.error("a Trello export JSON file is required")
    if destination is None:
        parser.error("a Markdown output file is required")

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(message)s")
    logger.info("trello2md convert - version %s", __version__)

    try:
        board, text = convert(
            source,
            ReshapeOptions(
                include_closed_lists=args.include_closed_lists,
                include_closed_cards=args.include_closed_cards,
            ),
            RenderOptions(checklist_label=args.checklist_label),
        )
    except BoardReadError as exc:
        raise SystemExit(str(exc)) from exc

    try:
        write_markdown(destination, text)
    except OSError as exc:
        logger.error("Could not write %s: %s", destination, exc)
        return 1

    if args.document or args.document_name or args.document_from_board:
        document_path = document_destination(
            destination,
            board_name=board.name if args.document_from_board else None,
            name=args.document_name,
        )
        try:
            export_document(text, document_path, title=board.name)
        except DocumentExportError as exc:
            logger.error("%s", exc)
            return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    sys.exit(main())
