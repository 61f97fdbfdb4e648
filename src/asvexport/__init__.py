"""Command-line export orchestrator for save-game inspection."""

__version__ = "1.0.0"
