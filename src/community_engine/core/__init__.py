"""Core configuration for the community engine."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
