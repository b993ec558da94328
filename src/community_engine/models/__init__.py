# src/community_engine/models/__init__.py
"""SQLAlchemy models for the community engine."""

from .community import Community, MemberRole, Membership

__all__ = ["Community", "Membership", "MemberRole"]
