"""Pydantic schemas for the community engine."""

from .community import (
    CommunityCreate,
    CommunityRecord,
    CommunityUpdate,
    CreatedCommunity,
    MemberAdd,
    MembershipRecord,
    RoleChange,
)

__all__ = [
    "CommunityCreate", "CommunityRecord", "CommunityUpdate", "CreatedCommunity",
    "MemberAdd", "MembershipRecord", "RoleChange",
]
