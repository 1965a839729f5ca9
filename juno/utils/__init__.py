"""Utilities shared by route handlers."""

from juno.utils.async_handler import NextFunction, RequestHandler, async_handler

__all__ = ["NextFunction", "RequestHandler", "async_handler"]
