"""Building blocks for interactive line editors: configuration, errors, history, completion, highlighting and hints."""

__version__ = "0.1.0"
__all__ = ["completion", "config", "error", "highlight", "hint", "history"]