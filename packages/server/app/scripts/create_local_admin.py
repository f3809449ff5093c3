"""
Script to seed a local principal with a profile and an organization it administers,
then print a bearer token for it.
"""

import argparse
import asyncio
import uuid

from app.core.auth import create_jwt, Principal
from app.core.database import get_session_context, init_db
from app.services.organizations import create_organization_and_assign_admin
from app.services.profiles import handle_principal_created
from roadmap_hub_shared.schemas.organizations import OrgCreateRequest
from roadmap_hub_shared.schemas.profiles import PrincipalCreatedEvent


async def create_admin(email: str, name: str | None, org_name: str, create_tables: bool):
    if create_tables:
        await init_db()

    principal_id = uuid.uuid4()
    async with get_session_context() as session:
        profile = await handle_principal_created(
            PrincipalCreatedEvent(id=principal_id, email=email, full_name=name),
            session,
        )
        principal = Principal(id=profile.id, email=profile.email)
        org = await create_organization_and_assign_admin(
            OrgCreateRequest(name=org_name), principal, session
        )
        print(f"Created profile {profile.email} ({profile.id})")
        print(f"Created organization '{org.name}' ({org.id}) with {profile.email} as admin")

    print("Bearer token:")
    print(create_jwt(principal.id, principal.email))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a local admin principal.")
    parser.add_argument("--email", required=True, help="Email address for the principal")
    parser.add_argument("--name", default=None, help="Display name")
    parser.add_argument("--org-name", default="Default Organization", help="Organization to create")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create tables first (development databases without migrations)",
    )

    args = parser.parse_args()

    asyncio.run(create_admin(args.email, args.name, args.org_name, args.create_tables))
