import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from designhub.core.contractors.models import Contractor, ProjectContractor
from designhub.core.contractors.schemas import ContractorCreate, ProjectContractorCreate
from designhub.core.errors import NotFoundError


async def create_contractor(db: AsyncSession, tenant_id: uuid.UUID, data: ContractorCreate) -> Contractor:
    values = data.model_dump()
    if values["email"]:
        values["email"] = values["email"].strip()
    c = Contractor(tenant_id=tenant_id, **values)
    db.add(c)
    await db.flush()
    await db.refresh(c)
    return c


async def get_contractor(db: AsyncSession, tenant_id: uuid.UUID, contractor_id: uuid.UUID) -> Contractor | None:
    result = await db.execute(
        select(Contractor).where(
            Contractor.id == contractor_id,
            Contractor.tenant_id == tenant_id,
            Contractor.is_deleted == False,
        )
    )
    return result.scalar_one_or_none()


async def list_contractors(db: AsyncSession, tenant_id: uuid.UUID) -> list[Contractor]:
    result = await db.execute(
        select(Contractor)
        .where(Contractor.tenant_id == tenant_id, Contractor.is_deleted == False)
        .order_by(Contractor.name)
    )
    return list(result.scalars().all())


async def link_contractor(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, data: ProjectContractorCreate
) -> ProjectContractor:
    contractor = await get_contractor(db, tenant_id, data.contractor_id)
    if not contractor:
        raise NotFoundError("Contractor not found")

    # Re-linking reactivates the existing row
    result = await db.execute(
        select(ProjectContractor).where(
            ProjectContractor.project_id == project_id,
            ProjectContractor.contractor_id == data.contractor_id,
        )
    )
    link = result.scalar_one_or_none()
    if link:
        link.is_active = True
        link.role = data.role
    else:
        link = ProjectContractor(
            tenant_id=tenant_id,
            project_id=project_id,
            contractor_id=data.contractor_id,
            role=data.role,
            is_active=True,
        )
        db.add(link)
    await db.flush()
    await db.refresh(link)
    return link


async def unlink_contractor(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, contractor_id: uuid.UUID
) -> ProjectContractor:
    result = await db.execute(
        select(ProjectContractor).where(
            ProjectContractor.tenant_id == tenant_id,
            ProjectContractor.project_id == project_id,
            ProjectContractor.contractor_id == contractor_id,
        )
    )
    link = result.scalar_one_or_none()
    if not link:
        raise NotFoundError("Contractor is not linked to this project")
    link.is_active = False
    await db.flush()
    await db.refresh(link)
    return link


async def list_project_links(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, only_active: bool = True
) -> list[ProjectContractor]:
    q = select(ProjectContractor).where(
        ProjectContractor.tenant_id == tenant_id,
        ProjectContractor.project_id == project_id,
    )
    if only_active:
        q = q.where(ProjectContractor.is_active == True)
    q = q.order_by(ProjectContractor.created_at)
    result = await db.execute(q)
    return list(result.scalars().unique().all())


async def trade_directory(db: AsyncSession, tenant_id: uuid.UUID) -> dict[str, str]:
    """Lowercased contractor email -> trade, oldest contractor record wins."""
    result = await db.execute(
        select(Contractor.email, Contractor.trade).where(
            Contractor.tenant_id == tenant_id,
            Contractor.is_deleted == False,
            Contractor.email.is_not(None),
            Contractor.trade.is_not(None),
        ).order_by(Contractor.created_at)
    )
    directory: dict[str, str] = {}
    for email, trade in result.all():
        directory.setdefault(email.lower(), trade)
    return directory
