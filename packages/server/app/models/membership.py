"""Organization membership: one role per (organization, principal)."""

import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin, UUIDMixin


class Membership(UUIDMixin, CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "organization_members"
    __table_args__ = (
        sa.UniqueConstraint(
            "organization_id", "principal_id", name="uq_organization_members_org_principal"
        ),
    )

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", ondelete="CASCADE", nullable=False, index=True
    )
    principal_id: uuid.UUID = Field(nullable=False, index=True)
    role: str = Field(nullable=False, default="viewer")  # admin | editor | viewer
