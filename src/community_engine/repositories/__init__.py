"""Storage collaborators for the community engine."""

from .community_repo import CommunityRepository

__all__ = ["CommunityRepository"]
