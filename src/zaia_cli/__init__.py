"""ZAIA - JSON-first command line for AI agents driving Zerops."""

__version__ = "0.1.0"
