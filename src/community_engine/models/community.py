"""SQLAlchemy models for communities and their memberships."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from community_engine.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


class MemberRole(str, Enum):
    """Roles a user can hold inside a community."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Community(Base):
    """A named group that owns a set of memberships."""

    __tablename__ = "community"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Creation ordering for list queries.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


class Membership(Base):
    """Join record linking one user to one community with a role."""

    __tablename__ = "membership"
    __table_args__ = (
        UniqueConstraint("community_id", "user_id", name="uq_membership_community_user"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    community: Mapped[str] = mapped_column(
        "community_id",
        String(36),
        ForeignKey("community.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Opaque identity reference; users live outside this store.
    user: Mapped[str] = mapped_column("user_id", Text, nullable=False, index=True)
    role: Mapped[MemberRole] = mapped_column(
        SAEnum(MemberRole, native_enum=False, length=16),
        nullable=False,
        default=MemberRole.MEMBER,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
