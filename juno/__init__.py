"""Juno backend: uniform success/error response envelopes for every handler."""

__version__ = "1.0.0"
