"""Organization model (tenant boundary)."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Organization(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(nullable=False, index=True)
    description: Optional[str] = None
    created_by: uuid.UUID = Field(nullable=False, index=True)
