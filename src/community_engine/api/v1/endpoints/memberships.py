# src/community_engine/api/v1/endpoints/memberships.py
"""Membership lookup and role endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from community_engine.api.v1.dependencies import CommunityServiceDep, raise_for_rejection
from community_engine.schemas.community import MembershipRecord, RoleChange

router = APIRouter(prefix="/memberships", tags=["memberships"])


@router.get("/", response_model=list[MembershipRecord])
def list_memberships(
    service: CommunityServiceDep,
    user: str | None = None,
) -> list[MembershipRecord]:
    """List all memberships, optionally only those held by ``user``."""
    if user is not None:
        return service.get_memberships_by_user(user=user)
    return service.get_all_memberships()


@router.get("/{membership_id}", response_model=MembershipRecord)
def get_membership(membership_id: str, service: CommunityServiceDep) -> MembershipRecord:
    """Get a specific membership by ID."""
    membership = service.get_membership_by_id(membership=membership_id)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Membership not found"
        )
    return membership


@router.put("/{membership_id}/role")
def set_member_role(
    membership_id: str,
    role_data: RoleChange,
    service: CommunityServiceDep,
) -> dict[str, str]:
    """Promote or demote a member."""
    return raise_for_rejection(
        service.set_member_role(
            membership=membership_id,
            new_role=role_data.new_role,
            requester=role_data.requester,
        )
    )
