"""Environment-backed settings."""

from .config import Settings

__all__ = ["Settings"]
