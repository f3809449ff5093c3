"""
Profile service — reacts to principal-created events from the auth subsystem.

The auth subsystem owns emails. When an event carries an email that another
principal's profile still holds, that profile is stale (its principal has
since changed address) and is dropped; it is recreated by that principal's
next event.
"""

from __future__ import annotations

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import ProfileConflict
from app.models.profile import Profile
from roadmap_hub_shared.schemas.invitations import normalize_email
from roadmap_hub_shared.schemas.profiles import PrincipalCreatedEvent

log = structlog.get_logger()


async def _release_email(event: PrincipalCreatedEvent, email: str, session: AsyncSession) -> None:
    result = await session.execute(
        select(Profile).where(Profile.email == email, Profile.id != event.id)
    )
    stale = result.scalar_one_or_none()
    if stale is None:
        return
    log.warning(
        "profile.email_reassigned",
        stale_principal_id=str(stale.id),
        principal_id=str(event.id),
    )
    await session.delete(stale)
    await session.flush()


async def handle_principal_created(
    event: PrincipalCreatedEvent, session: AsyncSession
) -> Profile:
    """Create the principal's profile, or refresh it when the event is replayed."""
    email = normalize_email(event.email)
    await _release_email(event, email, session)

    profile = await session.get(Profile, event.id)
    created = profile is None
    if created:
        profile = Profile(id=event.id, email=email)

    profile.email = email
    profile.full_name = event.full_name
    profile.avatar_url = event.avatar_url
    session.add(profile)
    try:
        async with session.begin_nested():
            await session.flush()
    except IntegrityError:
        # a concurrent event claimed the id or the email first
        raise ProfileConflict()

    log.info(
        "profile.created" if created else "profile.refreshed",
        principal_id=str(profile.id),
    )
    return profile
