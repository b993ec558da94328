# src/community_engine/schemas/community.py
"""Community-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from community_engine.models.community import MemberRole


class CommunityRecord(BaseModel):
    """Community information returned by queries."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str


class MembershipRecord(BaseModel):
    """Membership information returned by queries."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    community: str
    user: str
    role: MemberRole


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    name: str = Field(..., description="Unique community name")
    description: str = ""
    creator: str = Field(..., description="User who becomes the first ADMIN")


class CommunityUpdate(BaseModel):
    """Schema for replacing a community's name and description."""

    new_name: str
    new_description: str
    requester: str


class MemberAdd(BaseModel):
    """Schema for inviting a user into a community."""

    user: str
    inviter: str


class RoleChange(BaseModel):
    """Schema for changing the role attached to a membership."""

    # Left as a plain string so unknown roles reach the engine's own check.
    new_role: str
    requester: str


class CreatedCommunity(BaseModel):
    """Identifier of a freshly created community."""

    community: str
