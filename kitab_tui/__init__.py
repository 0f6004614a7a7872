"""kitab-tui: terminal reader for the Arabic Bible."""

__version__ = "0.1.0"
