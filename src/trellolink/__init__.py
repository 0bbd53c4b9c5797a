"""trellolink - Links GitHub pull requests to the Trello cards they reference."""

__version__ = "0.1.0"
