"""Command-line client and Python library for the dive center admin API."""

__version__ = "1.0.0"
