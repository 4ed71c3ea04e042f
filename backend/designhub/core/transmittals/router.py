import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.delivery.service import Notifier
from designhub.core.projects.service import require_project
from designhub.core.transmittals import service
from designhub.core.transmittals.schemas import (
    BulkTransmittalCreate, SendResult, TransmittalCreate, TransmittalRead,
)
from designhub.dependencies import get_db, get_current_user, get_notifier, CurrentUser

router = APIRouter(tags=["transmittals"])


@router.post("/projects/{project_id}/transmittals", response_model=TransmittalRead, status_code=201)
async def create_transmittal(
    project_id: uuid.UUID,
    data: TransmittalCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    project = await require_project(db, current.tenant_id, project_id)
    return await service.create_transmittal(db, current.tenant_id, project, data, current.user_id)


@router.post("/projects/{project_id}/transmittals/bulk", response_model=list[SendResult], status_code=201)
async def create_transmittals(
    project_id: uuid.UUID,
    data: BulkTransmittalCreate,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
):
    project = await require_project(db, current.tenant_id, project_id)
    return await service.create_transmittals(db, current.tenant_id, project, data, current.user_id, notifier)


@router.get("/projects/{project_id}/transmittals", response_model=list[TransmittalRead])
async def list_transmittals(
    project_id: uuid.UUID,
    status: str | None = Query(None),
    recipient_email: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    await require_project(db, current.tenant_id, project_id)
    return await service.list_transmittals(
        db, current.tenant_id, project_id, status=status, recipient_email=recipient_email,
    )


@router.get("/projects/{project_id}/transmittals/{transmittal_id}", response_model=TransmittalRead)
async def get_transmittal(
    project_id: uuid.UUID,
    transmittal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    return await service.require_transmittal(db, current.tenant_id, project_id, transmittal_id)


@router.post("/projects/{project_id}/transmittals/{transmittal_id}/mark-sent", response_model=TransmittalRead)
async def mark_sent(
    project_id: uuid.UUID,
    transmittal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    """Records a send done outside the system (hand delivery, courier, ...)."""
    return await service.mark_sent(db, current.tenant_id, project_id, transmittal_id, current.user_id)


@router.post("/projects/{project_id}/transmittals/{transmittal_id}/send", response_model=SendResult)
async def send_transmittal(
    project_id: uuid.UUID,
    transmittal_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
    notifier: Notifier = Depends(get_notifier),
):
    project = await require_project(db, current.tenant_id, project_id)
    return await service.send_transmittal(db, current.tenant_id, project, transmittal_id, current.user_id, notifier)
