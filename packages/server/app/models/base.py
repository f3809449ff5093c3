"""Base mixins for SQLModel tables."""

from datetime import datetime, timezone
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp_field(**column_kwargs) -> datetime:
    return Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now(), **column_kwargs},
        sa_type=sa.DateTime(timezone=True),
    )


class CreatedAtMixin(SQLModel):
    """For append-only rows such as memberships."""

    created_at: datetime = _timestamp_field()


class TimestampMixin(CreatedAtMixin):
    updated_at: datetime = _timestamp_field(onupdate=_utcnow)


class UUIDMixin(SQLModel):
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
        nullable=False,
    )
