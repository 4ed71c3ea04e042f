import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from designhub.core.projects import service
from designhub.core.projects.schemas import ProjectCreate, ProjectRead, ProjectUpdate
from designhub.dependencies import get_db, get_current_user, CurrentUser

router = APIRouter(tags=["projects"])

@router.post("/projects", response_model=ProjectRead, status_code=201)
async def create_project(data: ProjectCreate, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.create_project(db, current.tenant_id, data, current.user_id)

@router.get("/projects", response_model=list[ProjectRead])
async def list_projects(db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.list_projects(db, current.tenant_id)

@router.get("/projects/{project_id}", response_model=ProjectRead)
async def get_project(project_id: uuid.UUID, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    return await service.require_project(db, current.tenant_id, project_id)

@router.patch("/projects/{project_id}", response_model=ProjectRead)
async def update_project(project_id: uuid.UUID, data: ProjectUpdate, db: AsyncSession = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    project = await service.require_project(db, current.tenant_id, project_id)
    return await service.update_project(db, project, data)
