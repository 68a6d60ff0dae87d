"""Retrieve and render Vespa application logs."""

__version__ = "8.420.0"
