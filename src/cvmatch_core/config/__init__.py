"""Configuration package."""

from cvmatch_core.config.settings import Settings

__all__ = ["Settings"]
