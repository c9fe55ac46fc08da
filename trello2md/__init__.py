"""Convert Trello board exports to Markdown."""

__version__ = "0.1.0"
