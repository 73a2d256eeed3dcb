"""Fetch web pages, CSV exports and JSON APIs into flat tables."""

__version__ = "0.1.0"
