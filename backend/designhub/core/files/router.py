import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from designhub.core.files import service
from designhub.core.files.schemas import FileCreate, FileRead
from designhub.dependencies import get_db, get_current_user, CurrentUser

router = APIRouter(tags=["files"])

@router.post("/files", response_model=FileRead, status_code=201)
async def register_file(data: FileCreate, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.create_file(db, current.tenant_id, data, current.user_id)

@router.get("/files/{file_id}", response_model=FileRead)
async def get_file(file_id: uuid.UUID, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.require_file(db, current.tenant_id, file_id)
