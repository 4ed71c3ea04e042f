import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.contractors import service
from designhub.core.contractors.schemas import (
    ContractorCreate, ContractorRead, ProjectContractorCreate, ProjectContractorRead,
)
from designhub.core.projects.service import require_project
from designhub.dependencies import get_db, get_current_user, CurrentUser

router = APIRouter(tags=["contractors"])


@router.post("/contractors", response_model=ContractorRead, status_code=201)
async def create_contractor(
    data: ContractorCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    return await service.create_contractor(db, current.tenant_id, data)


@router.get("/contractors", response_model=list[ContractorRead])
async def list_contractors(
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    return await service.list_contractors(db, current.tenant_id)


@router.post("/projects/{project_id}/contractors", response_model=ProjectContractorRead, status_code=201)
async def link_contractor(
    project_id: uuid.UUID,
    data: ProjectContractorCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    await require_project(db, current.tenant_id, project_id)
    return await service.link_contractor(db, current.tenant_id, project_id, data)


@router.get("/projects/{project_id}/contractors", response_model=list[ProjectContractorRead])
async def list_project_contractors(
    project_id: uuid.UUID,
    only_active: bool = Query(True),
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    await require_project(db, current.tenant_id, project_id)
    return await service.list_project_links(db, current.tenant_id, project_id, only_active=only_active)


@router.delete("/projects/{project_id}/contractors/{contractor_id}", response_model=ProjectContractorRead)
async def unlink_contractor(
    project_id: uuid.UUID,
    contractor_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    return await service.unlink_contractor(db, current.tenant_id, project_id, contractor_id)
