"""Principal profile, populated from the auth subsystem's signup events."""

from typing import Optional
import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin


class Profile(TimestampMixin, SQLModel, table=True):
    __tablename__ = "profiles"

    id: uuid.UUID = Field(primary_key=True, nullable=False)  # principal id
    email: str = Field(nullable=False, unique=True, index=True)
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
