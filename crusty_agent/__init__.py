"""Crusty Agent - host status over HTTP behind an access token."""

__version__ = "0.3.0"
