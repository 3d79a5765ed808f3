"""In-memory task tracker: HTTP API plus an optimistic client cache."""

__version__ = "1.0.0"
