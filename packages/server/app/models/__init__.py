# SQLModel definitions, imported so Alembic sees the full metadata.
from .base import CreatedAtMixin, TimestampMixin, UUIDMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .membership import Membership  # noqa: F401
from .invitation import Invitation  # noqa: F401
from .profile import Profile  # noqa: F401
from .project import Project  # noqa: F401
