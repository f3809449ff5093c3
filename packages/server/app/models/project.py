"""Project model."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Project(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "projects"

    organization_id: uuid.UUID = Field(
        foreign_key="organizations.id", ondelete="CASCADE", nullable=False, index=True
    )
    name: str = Field(nullable=False)
    description: Optional[str] = None
    status: str = Field(default="planned", nullable=False)  # planned | in_progress | completed | cancelled
    created_by: uuid.UUID = Field(nullable=False)
