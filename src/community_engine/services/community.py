"""Community management engine.

This module holds the authorization and invariant rules around communities
and their memberships:

- community names are unique
- only ADMIN members may manage a community, its details and its members
- a community with members cannot lose its last ADMIN through a role change
- deleting a community deletes its memberships in the same transaction

Every mutation returns a plain dict: its result payload on success or
``{"error": message}`` when a rule rejects the request. Storage failures are
never folded into that shape; they surface as :class:`StorageError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_engine.models.community import MemberRole, Membership
from community_engine.repositories.community_repo import CommunityRepository
from community_engine.schemas.community import CommunityRecord, MembershipRecord

# Configure logger for this module
logger = logging.getLogger(__name__)

DUPLICATE_NAME = "A community with this name already exists."
ALREADY_MEMBER = "User is already a member of this community."
LAST_ADMIN = "Cannot demote yourself from ADMIN to MEMBER when you are the only ADMIN."
NOT_ADMIN = "Requester is not an ADMIN of this community."
NOT_AUTHORIZED_TO_REMOVE = "Only an ADMIN or the member themselves can remove a membership."
COMMUNITY_NOT_FOUND = "Community not found."
MEMBERSHIP_NOT_FOUND = "Membership not found."
NOT_A_MEMBER = "User is not a member of this community."
INVALID_ROLE = "Role must be one of: ADMIN, MEMBER."

Result = dict[str, Any]


class StorageError(RuntimeError):
    """Raised when the backing store fails while an operation is running.

    Distinct from rule rejections, which are returned as ``{"error": ...}``.
    """


def _reject(operation: str, message: str) -> Result:
    logger.debug("%s rejected: %s", operation, message)
    return {"error": message}


class CommunityService:
    """Authorization and invariant engine over communities and memberships."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.repo = CommunityRepository(session)

    @contextmanager
    def _unit_of_work(self, operation: str, *, commit: bool = True) -> Iterator[None]:
        """Run one operation as a single transaction.

        Any SQLAlchemy failure rolls back everything the operation wrote and is
        re-raised as :class:`StorageError`.
        """
        try:
            yield
            if commit:
                self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Storage failure during %s: %s", operation, exc, exc_info=True)
            raise StorageError(f"Storage failure during {operation}") from exc

    def is_admin(self, user: str, community_id: str) -> bool:
        """Return True when ``user`` holds an ADMIN membership in ``community_id``."""
        membership = self.repo.find_membership(community_id, user)
        return membership is not None and membership.role == MemberRole.ADMIN

    def _has_other_admin(self, membership: Membership) -> bool:
        admins = self.repo.list_memberships(
            community_id=membership.community, role=MemberRole.ADMIN
        )
        return any(admin.id != membership.id for admin in admins)

    # Mutations

    def create_community(self, *, name: str, description: str, creator: str) -> Result:
        """Create a community and make ``creator`` its first ADMIN.

        Returns:
            ``{"community": id}`` on success.
        """
        with self._unit_of_work("create_community"):
            if self.repo.find_community_by_name(name) is not None:
                return _reject("create_community", DUPLICATE_NAME)
            community = self.repo.create_community(name=name, description=description)
            self.repo.create_membership(
                community_id=community.id, user=creator, role=MemberRole.ADMIN
            )
            community_id = community.id
        logger.info("Community %s (%r) created by %s", community_id, name, creator)
        return {"community": community_id}

    def update_community_details(
        self,
        *,
        community: str,
        new_name: str,
        new_description: str,
        requester: str,
    ) -> Result:
        """Replace the name and description of a community."""
        with self._unit_of_work("update_community_details"):
            record = self.repo.get_community(community)
            if record is None:
                return _reject("update_community_details", COMMUNITY_NOT_FOUND)
            if not self.is_admin(requester, community):
                return _reject("update_community_details", NOT_ADMIN)
            if new_name != record.name and self.repo.find_community_by_name(new_name) is not None:
                return _reject("update_community_details", DUPLICATE_NAME)
            self.repo.update_community(record, name=new_name, description=new_description)
        logger.info("Community %s updated by %s", community, requester)
        return {}

    def delete_community(self, *, community: str, requester: str) -> Result:
        """Delete a community and, in the same transaction, all of its memberships."""
        with self._unit_of_work("delete_community"):
            record = self.repo.get_community(community)
            if record is None:
                return _reject("delete_community", COMMUNITY_NOT_FOUND)
            if not self.is_admin(requester, community):
                return _reject("delete_community", NOT_ADMIN)
            removed = self.repo.delete_community(record)
        logger.info(
            "Community %s deleted by %s (%d memberships removed)", community, requester, removed
        )
        return {}

    def add_member(self, *, community: str, user: str, inviter: str) -> Result:
        """Add ``user`` to ``community`` as a MEMBER on behalf of an ADMIN ``inviter``."""
        with self._unit_of_work("add_member"):
            if self.repo.get_community(community) is None:
                return _reject("add_member", COMMUNITY_NOT_FOUND)
            if not self.is_admin(inviter, community):
                return _reject("add_member", NOT_ADMIN)
            if self.repo.find_membership(community, user) is not None:
                return _reject("add_member", ALREADY_MEMBER)
            self.repo.create_membership(community_id=community, user=user)
        logger.info("User %s added to community %s by %s", user, community, inviter)
        return {}

    def remove_member(self, *, community: str, user: str, requester: str) -> Result:
        """Remove ``user``'s membership from ``community``.

        Members may always remove themselves; anyone else needs ADMIN. The last
        ADMIN may be removed this way, unlike through a role change.
        """
        with self._unit_of_work("remove_member"):
            if self.repo.get_community(community) is None:
                return _reject("remove_member", COMMUNITY_NOT_FOUND)
            if requester != user and not self.is_admin(requester, community):
                return _reject("remove_member", NOT_AUTHORIZED_TO_REMOVE)
            membership = self.repo.find_membership(community, user)
            if membership is None:
                return _reject("remove_member", NOT_A_MEMBER)
            self.repo.delete_membership(membership)
        logger.info("User %s removed from community %s by %s", user, community, requester)
        return {}

    def set_member_role(
        self,
        *,
        membership: str,
        new_role: MemberRole | str,
        requester: str,
    ) -> Result:
        """Change the role attached to ``membership``.

        Demoting an ADMIN requires another ADMIN to remain in the community.
        """
        try:
            role = MemberRole(new_role)
        except ValueError:
            return _reject("set_member_role", INVALID_ROLE)

        with self._unit_of_work("set_member_role"):
            target = self.repo.get_membership(membership)
            if target is None:
                return _reject("set_member_role", MEMBERSHIP_NOT_FOUND)
            if not self.is_admin(requester, target.community):
                return _reject("set_member_role", NOT_ADMIN)
            if target.role == role:
                return {}
            if (
                target.role == MemberRole.ADMIN
                and role == MemberRole.MEMBER
                and not self._has_other_admin(target)
            ):
                return _reject("set_member_role", LAST_ADMIN)
            self.repo.update_membership(target, role=role)
        logger.info("Membership %s set to %s by %s", membership, role.value, requester)
        return {}

    # Queries

    def get_community_by_id(self, *, community: str) -> CommunityRecord | None:
        with self._unit_of_work("get_community_by_id", commit=False):
            record = self.repo.get_community(community)
            return CommunityRecord.model_validate(record) if record is not None else None

    def get_all_communities(self) -> list[CommunityRecord]:
        with self._unit_of_work("get_all_communities", commit=False):
            return [CommunityRecord.model_validate(c) for c in self.repo.list_communities()]

    def get_membership_by_id(self, *, membership: str) -> MembershipRecord | None:
        with self._unit_of_work("get_membership_by_id", commit=False):
            record = self.repo.get_membership(membership)
            return MembershipRecord.model_validate(record) if record is not None else None

    def get_memberships_by_user(self, *, user: str) -> list[MembershipRecord]:
        with self._unit_of_work("get_memberships_by_user", commit=False):
            return [
                MembershipRecord.model_validate(m) for m in self.repo.list_memberships(user=user)
            ]

    def get_memberships_by_community(self, *, community: str) -> list[MembershipRecord]:
        with self._unit_of_work("get_memberships_by_community", commit=False):
            return [
                MembershipRecord.model_validate(m)
                for m in self.repo.list_memberships(community_id=community)
            ]

    def get_all_memberships(self) -> list[MembershipRecord]:
        with self._unit_of_work("get_all_memberships", commit=False):
            return [MembershipRecord.model_validate(m) for m in self.repo.list_memberships()]
