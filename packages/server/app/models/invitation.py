"""Invitation model: an offer of membership addressed to an email."""

import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Invitation(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "invitations"

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", ondelete="CASCADE", nullable=False, index=True
    )
    invitee_email: str = Field(nullable=False, index=True)  # stored lower-cased
    role: str = Field(nullable=False)  # admin | editor | viewer
    status: str = Field(nullable=False, default="pending", index=True)  # pending | accepted | declined
    invited_by: uuid.UUID = Field(nullable=False)
