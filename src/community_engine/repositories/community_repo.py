"""Data access helpers for communities and memberships."""
from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from community_engine.models.community import Community, MemberRole, Membership

__all__ = ["CommunityRepository"]


class CommunityRepository:
    """Thin wrapper around database access for community entities.

    Writes are flushed but never committed; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    # Communities

    def get_community(self, community_id: str) -> Community | None:
        """Return a community by identifier."""
        return self.session.get(Community, community_id)

    def find_community_by_name(self, name: str) -> Community | None:
        """Return the community holding ``name``, if any."""
        result = self.session.execute(select(Community).where(Community.name == name))
        return result.scalars().first()

    def list_communities(self) -> list[Community]:
        """Return every community in creation order."""
        result = self.session.execute(
            select(Community).order_by(Community.created_at, Community.id)
        )
        return list(result.scalars())

    def create_community(self, *, name: str, description: str) -> Community:
        """Insert a new community and return the persisted ORM instance."""
        community = Community(name=name, description=description)
        self.session.add(community)
        self.session.flush()
        return community

    def update_community(self, community: Community, **fields: Any) -> Community:
        """Apply partial updates to an existing community."""
        for key, value in fields.items():
            setattr(community, key, value)
        self.session.flush()
        return community

    def delete_community(self, community: Community) -> int:
        """Delete a community together with all of its memberships.

        Returns:
            Number of memberships removed alongside the community.
        """
        result = self.session.execute(
            delete(Membership).where(Membership.community == community.id)
        )
        self.session.delete(community)
        self.session.flush()
        return result.rowcount or 0

    # Memberships

    def get_membership(self, membership_id: str) -> Membership | None:
        """Return a membership by identifier."""
        return self.session.get(Membership, membership_id)

    def find_membership(self, community_id: str, user: str) -> Membership | None:
        """Return ``user``'s membership in ``community_id``, if any."""
        result = self.session.execute(
            select(Membership).where(
                Membership.community == community_id,
                Membership.user == user,
            )
        )
        return result.scalars().first()

    def list_memberships(
        self,
        *,
        community_id: str | None = None,
        user: str | None = None,
        role: MemberRole | None = None,
    ) -> list[Membership]:
        """Return memberships matching every supplied field, in creation order."""
        stmt = select(Membership)
        if community_id is not None:
            stmt = stmt.where(Membership.community == community_id)
        if user is not None:
            stmt = stmt.where(Membership.user == user)
        if role is not None:
            stmt = stmt.where(Membership.role == role)
        stmt = stmt.order_by(Membership.created_at, Membership.id)
        result = self.session.execute(stmt)
        return list(result.scalars())

    def create_membership(
        self,
        *,
        community_id: str,
        user: str,
        role: MemberRole = MemberRole.MEMBER,
    ) -> Membership:
        """Insert a new membership and return the persisted ORM instance."""
        membership = Membership(community=community_id, user=user, role=role)
        self.session.add(membership)
        self.session.flush()
        return membership

    def update_membership(self, membership: Membership, **fields: Any) -> Membership:
        """Apply partial updates to an existing membership."""
        for key, value in fields.items():
            setattr(membership, key, value)
        self.session.flush()
        return membership

    def delete_membership(self, membership: Membership) -> None:
        """Remove a single membership."""
        self.session.delete(membership)
        self.session.flush()
