import uuid
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from designhub.core.errors import NotFoundError
from designhub.core.projects.models import Project, ProjectSequence
from designhub.core.projects.schemas import ProjectCreate, ProjectUpdate


def format_project_no(year: int, seq: int) -> str:
    return f"{str(year)[-2:]}-{seq:04d}"


async def generate_project_no(db: AsyncSession, tenant_id: uuid.UUID) -> str:
    year = datetime.now(timezone.utc).year
    result = await db.execute(
        select(ProjectSequence)
        .where(ProjectSequence.tenant_id == tenant_id, ProjectSequence.year == year)
        .with_for_update()
    )
    seq = result.scalar_one_or_none()
    if seq is None:
        seq = ProjectSequence(tenant_id=tenant_id, year=year, last_seq=0)
        db.add(seq)
        await db.flush()
        result = await db.execute(
            select(ProjectSequence)
            .where(ProjectSequence.tenant_id == tenant_id, ProjectSequence.year == year)
            .with_for_update()
        )
        seq = result.scalar_one()
    seq.last_seq += 1
    await db.flush()
    return format_project_no(year, seq.last_seq)


async def create_project(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    data: ProjectCreate,
    created_by: uuid.UUID | None = None,
) -> Project:
    project_no = await generate_project_no(db, tenant_id)
    project = Project(
        tenant_id=tenant_id,
        project_no=project_no,
        name=data.name,
        description=data.description,
        client_name=data.client_name,
        client_email=data.client_email.strip() if data.client_email else None,
        client_company=data.client_company,
    )
    db.add(project)
    await db.flush()
    await db.refresh(project)

    if created_by:
        from designhub.core.audit.service import audit
        await audit(
            db, tenant_id=tenant_id, user_id=created_by,
            action="project.create",
            resource_type="project",
            resource_id=str(project.id),
            project_id=project.id,
            detail={"project_no": project_no, "name": data.name},
        )

    return project


async def update_project(db: AsyncSession, project: Project, data: ProjectUpdate) -> Project:
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(project, field, value)
    await db.flush()
    await db.refresh(project)
    return project


async def get_project(db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID) -> Project | None:
    result = await db.execute(
        select(Project).where(
            Project.id == project_id,
            Project.tenant_id == tenant_id,
            Project.is_deleted == False,
        )
    )
    return result.scalar_one_or_none()


async def require_project(db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID) -> Project:
    project = await get_project(db, tenant_id, project_id)
    if not project:
        raise NotFoundError("Project not found")
    return project


async def list_projects(db: AsyncSession, tenant_id: uuid.UUID) -> list[Project]:
    result = await db.execute(
        select(Project)
        .where(Project.tenant_id == tenant_id, Project.is_deleted == False)
        .order_by(Project.created_at.desc())
    )
    return list(result.scalars().all())
