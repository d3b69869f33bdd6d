"""SQLAlchemy models for accounts and role assignments."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from discuss_board.db.session import Base

from .mixins import SoftDeleteMixin, TimestampMixin, enum_column, new_uuid


class MemberStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    BANNED = "banned"


class ModeratorStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


class Role(str, Enum):
    """Discriminator carried in the ``type`` claim of every token."""

    MEMBER = "member"
    MODERATOR = "moderator"
    ADMINISTRATOR = "administrator"


class Member(Base, TimestampMixin, SoftDeleteMixin):
    """A registered account. Moderators and administrators are members too."""

    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    nickname: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[MemberStatus] = mapped_column(
        enum_column(MemberStatus), nullable=False, default=MemberStatus.ACTIVE
    )

    moderator: Mapped[Moderator | None] = relationship(
        "Moderator",
        back_populates="member",
        uselist=False,
        foreign_keys="Moderator.member_id",
    )
    administrator: Mapped[Administrator | None] = relationship(
        "Administrator", back_populates="member", uselist=False
    )


class Moderator(Base, TimestampMixin, SoftDeleteMixin):
    """Moderator privileges granted to a member by an administrator."""

    __tablename__ = "moderators"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), unique=True, nullable=False
    )
    assigned_by_administrator_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("administrators.id"), nullable=True
    )
    status: Mapped[ModeratorStatus] = mapped_column(
        enum_column(ModeratorStatus), nullable=False, default=ModeratorStatus.ACTIVE
    )

    member: Mapped[Member] = relationship(
        "Member", back_populates="moderator", foreign_keys=[member_id]
    )


class Administrator(Base, TimestampMixin, SoftDeleteMixin):
    """Administrator privileges attached to a member account."""

    __tablename__ = "administrators"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id"), unique=True, nullable=False
    )

    member: Mapped[Member] = relationship("Member", back_populates="administrator")


class ConsentRecord(Base, TimestampMixin):
    """Policy consent captured at registration. Append-only."""

    __tablename__ = "consent_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    policy_type: Mapped[str] = mapped_column(String(64), nullable=False)
    policy_version: Mapped[str] = mapped_column(String(32), nullable=False)
    consent_action: Mapped[str] = mapped_column(String(16), nullable=False)
