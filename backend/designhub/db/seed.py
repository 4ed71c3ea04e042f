import asyncio
import os
import uuid

from sqlalchemy import select

from designhub.core.auth.security import create_access_token
from designhub.core.projects.models import Project
from designhub.core.projects.schemas import ProjectCreate
from designhub.core.projects.service import create_project
from designhub.core.tenants.models import Tenant
from designhub.db.session import get_session


async def seed() -> None:
    tenant_name = os.getenv("SEED_TENANT_NAME", "Demo Studio")
    tenant_slug = os.getenv("SEED_TENANT_SLUG", "demo-studio")
    business_email = os.getenv("SEED_BUSINESS_EMAIL", "studio@designhub.local")
    user_id = uuid.UUID(os.getenv("SEED_USER_ID", "00000000-0000-0000-0000-000000000001"))

    async with get_session() as db:
        existing = await db.execute(select(Tenant).where(Tenant.slug == tenant_slug))
        tenant = existing.scalar_one_or_none()

        if not tenant:
            tenant = Tenant(
                id=uuid.uuid4(), name=tenant_name, slug=tenant_slug, status="active",
                business_name=tenant_name, business_email=business_email,
            )
            db.add(tenant)
            await db.flush()
            print(f"Tenant: {tenant.slug} ({tenant.id})")
        else:
            print(f"Tenant exists: {tenant.slug}")

        existing_project = await db.execute(
            select(Project).where(Project.tenant_id == tenant.id, Project.name == "Demo Residence")
        )
        project = existing_project.scalar_one_or_none()

        if not project:
            project = await create_project(
                db, tenant.id,
                ProjectCreate(
                    name="Demo Residence",
                    client_name="Alex Client",
                    client_email="client@example.com",
                ),
                created_by=user_id,
            )
            print(f"Project: {project.project_no} ({project.id})")
        else:
            print(f"Project exists: {project.project_no}")

        print(f"Access token for {user_id}:")
        print(create_access_token(user_id, tenant.id))

    print("Done.")


if __name__ == "__main__":
    asyncio.run(seed())
