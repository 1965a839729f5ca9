"""Configuration module."""

from juno.config.settings import JunoSettings

__all__ = ["JunoSettings"]
