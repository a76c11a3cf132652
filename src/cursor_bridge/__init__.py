"""cursor-bridge — stream Cursor Agent CLI output as assistant message events."""

__version__ = "0.1.0"
