import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.drawings import service
from designhub.core.drawings.schemas import (
    DrawingCreate, DrawingRead, DrawingUpdate, DrawingHistoryEntry,
    RevisionCreate, RevisionRead,
)
from designhub.core.errors import with_conflict_retry
from designhub.core.projects.service import require_project
from designhub.dependencies import get_db, get_current_user, CurrentUser
from designhub.settings import get_settings

router = APIRouter(tags=["drawings"])


@router.post("/projects/{project_id}/drawings", response_model=DrawingRead, status_code=201)
async def create_drawing(
    project_id: uuid.UUID,
    data: DrawingCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    await require_project(db, current.tenant_id, project_id)
    return await service.create_drawing(db, current.tenant_id, project_id, data, current.user_id)


@router.get("/projects/{project_id}/drawings", response_model=list[DrawingRead])
async def list_drawings(
    project_id: uuid.UUID,
    include_archived: bool = Query(False),
    discipline: str | None = Query(None),
    drawing_no: str | None = Query(None),
    status: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    await require_project(db, current.tenant_id, project_id)
    return await service.list_drawings(
        db, current.tenant_id, project_id,
        include_archived=include_archived,
        discipline=discipline,
        drawing_no=drawing_no,
        status=status,
    )


@router.get("/projects/{project_id}/drawings/{drawing_id}", response_model=DrawingRead)
async def get_drawing(
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    return await service.require_drawing(db, current.tenant_id, project_id, drawing_id)


@router.patch("/projects/{project_id}/drawings/{drawing_id}", response_model=DrawingRead)
async def update_drawing(
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    data: DrawingUpdate,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    drawing = await service.require_drawing(db, current.tenant_id, project_id, drawing_id)
    return await service.update_drawing(db, drawing, data, current.user_id)


@router.post("/projects/{project_id}/drawings/{drawing_id}/archive", response_model=DrawingRead)
async def archive_drawing(
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    drawing = await service.require_drawing(db, current.tenant_id, project_id, drawing_id)
    return await service.set_drawing_status(db, drawing, "archived", current.user_id)


@router.post("/projects/{project_id}/drawings/{drawing_id}/restore", response_model=DrawingRead)
async def restore_drawing(
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    drawing = await service.require_drawing(db, current.tenant_id, project_id, drawing_id)
    return await service.set_drawing_status(db, drawing, "active", current.user_id)


@router.post("/projects/{project_id}/drawings/{drawing_id}/revisions", response_model=RevisionRead, status_code=201)
async def add_revision(
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    data: RevisionCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    return await with_conflict_retry(
        service.add_revision,
        db, current.tenant_id, project_id, drawing_id, data, current.user_id,
        retries=get_settings().REVISION_CONFLICT_RETRIES,
    )


@router.get("/projects/{project_id}/drawings/{drawing_id}/revisions", response_model=list[RevisionRead])
async def list_revisions(
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    drawing = await service.require_drawing(db, current.tenant_id, project_id, drawing_id)
    return await service.list_revisions(db, drawing)


@router.get("/projects/{project_id}/drawings/{drawing_id}/history", response_model=list[DrawingHistoryEntry])
async def drawing_history(
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    drawing = await service.require_drawing(db, current.tenant_id, project_id, drawing_id)
    return await service.drawing_history(db, drawing)
