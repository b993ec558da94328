# src/community_engine/api/v1/endpoints/communities.py
"""Community-related endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response, status

from community_engine.api.v1.dependencies import CommunityServiceDep, raise_for_rejection
from community_engine.schemas.community import (
    CommunityCreate,
    CommunityRecord,
    CommunityUpdate,
    CreatedCommunity,
    MemberAdd,
    MembershipRecord,
)

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=list[CommunityRecord])
def list_communities(service: CommunityServiceDep) -> list[CommunityRecord]:
    """List all communities."""
    return service.get_all_communities()


@router.post("/", response_model=CreatedCommunity, status_code=status.HTTP_201_CREATED)
def create_community(
    community_data: CommunityCreate,
    service: CommunityServiceDep,
) -> dict[str, str]:
    """Create a new community with its creator as ADMIN."""
    return raise_for_rejection(
        service.create_community(
            name=community_data.name,
            description=community_data.description,
            creator=community_data.creator,
        )
    )


@router.get("/{community_id}", response_model=CommunityRecord)
def get_community(community_id: str, service: CommunityServiceDep) -> CommunityRecord:
    """Get a specific community by ID."""
    community = service.get_community_by_id(community=community_id)
    if community is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Community not found"
        )
    return community


@router.put("/{community_id}")
def update_community(
    community_id: str,
    update_data: CommunityUpdate,
    service: CommunityServiceDep,
) -> dict[str, str]:
    """Replace a community's name and description."""
    return raise_for_rejection(
        service.update_community_details(
            community=community_id,
            new_name=update_data.new_name,
            new_description=update_data.new_description,
            requester=update_data.requester,
        )
    )


@router.delete(
    "/{community_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_community(
    community_id: str,
    requester: str,
    service: CommunityServiceDep,
) -> Response:
    """Delete a community and all of its memberships."""
    raise_for_rejection(service.delete_community(community=community_id, requester=requester))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{community_id}/members", response_model=list[MembershipRecord])
def list_members(community_id: str, service: CommunityServiceDep) -> list[MembershipRecord]:
    """List the memberships of a community."""
    return service.get_memberships_by_community(community=community_id)


@router.post("/{community_id}/members", status_code=status.HTTP_201_CREATED)
def add_member(
    community_id: str,
    member_data: MemberAdd,
    service: CommunityServiceDep,
) -> dict[str, str]:
    """Invite a user into a community as a MEMBER."""
    return raise_for_rejection(
        service.add_member(
            community=community_id,
            user=member_data.user,
            inviter=member_data.inviter,
        )
    )


@router.delete(
    "/{community_id}/members/{user}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def remove_member(
    community_id: str,
    user: str,
    requester: str,
    service: CommunityServiceDep,
) -> Response:
    """Remove a membership; members may always remove themselves."""
    raise_for_rejection(
        service.remove_member(community=community_id, user=user, requester=requester)
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
