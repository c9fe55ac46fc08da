"""Shared fixtures for the converter tests."""

import json

import pytest

DEMO_MARKDOWN = (
    "## Todo\n"
    "\n"
    "#### Task A \\[urgent\\] \n"
    "do it\n"
    "\n"
    "* [2023-03-05] started\n"
    "\n"
    "* Checklist: Steps\n"
    "\t* [X] a\n"
    "\t* [ ] b\n"
    "\n"
)


@pytest.fixture
def demo_export():
    """A one-list board with a single fully populated card."""
    return {
        "name": "Demo",
        "shortUrl": "https://trello.com/b/demo",
        "lists": [{"id": "L1", "name": "Todo", "closed": False}],
        "cards": [
            {
                "id": "C1",
                "name": "Task A",
                "desc": "do it",
                "idList": "L1",
                "closed": False,
                "labels": [{"name": "urgent"}],
            }
        ],
        "actions": [
            {
                "type": "commentCard",
                "date": "2023-03-05T00:00:00Z",
                "data": {"text": "started", "card": {"id": "C1"}},
            }
        ],
        "checklists": [
            {
                "name": "Steps",
                "idCard": "C1",
                "checkItems": [
                    {"name": "a", "state": "complete"},
                    {"name": "b", "state": "incomplete"},
                ],
            }
        ],
    }


@pytest.fixture
def closed_export():
    """One open and one closed list, each with a card, plus a closed card."""
    return {
        "name": "Archive",
        "lists": [
            {"id": "L1", "name": "Open", "closed": False},
            {"id": "L2", "name": "Closed", "closed": True},
        ],
        "cards": [
            {"id": "C1", "name": "Visible", "desc": "", "idList": "L1", "closed": False},
            {"id": "C2", "name": "Hidden", "desc": "", "idList": "L2", "closed": False},
            {"id": "C3", "name": "Archived", "desc": "", "idList": "L1", "closed": True},
        ],
        "actions": [],
        "checklists": [],
    }


@pytest.fixture
def write_export(tmp_path):
    """Write an export dict to a JSON file and return its path."""

    def _write(data, name="board.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def demo_markdown():
    return DEMO_MARKDOWN
