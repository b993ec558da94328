"""Service layer for the community engine."""

from .community import CommunityService, StorageError

__all__ = ["CommunityService", "StorageError"]
