"""Command line tools for listing, searching and exporting OneNote pages."""

__version__ = "0.1.0"
