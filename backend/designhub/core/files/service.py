import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from designhub.core.errors import NotFoundError
from designhub.core.files.models import File
from designhub.core.files.schemas import FileCreate


async def create_file(db: AsyncSession, tenant_id: uuid.UUID, data: FileCreate, uploaded_by: uuid.UUID | None = None) -> File:
    f = File(tenant_id=tenant_id, uploaded_by=uploaded_by, **data.model_dump())
    db.add(f)
    await db.flush()
    await db.refresh(f)
    return f


async def get_file(db: AsyncSession, tenant_id: uuid.UUID, file_id: uuid.UUID) -> File | None:
    result = await db.execute(
        select(File).where(File.id == file_id, File.tenant_id == tenant_id, File.is_deleted == False)
    )
    return result.scalar_one_or_none()


async def require_file(db: AsyncSession, tenant_id: uuid.UUID, file_id: uuid.UUID) -> File:
    f = await get_file(db, tenant_id, file_id)
    if not f:
        raise NotFoundError("File not found")
    return f
