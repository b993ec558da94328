# src/community_engine/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .communities import router as communities_router
from .memberships import router as memberships_router

__all__ = ["communities_router", "memberships_router"]
