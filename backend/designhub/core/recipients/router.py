import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.projects.service import require_project
from designhub.core.recipients import service
from designhub.core.recipients.schemas import Recipient
from designhub.dependencies import get_db, get_current_user, CurrentUser

router = APIRouter(tags=["recipients"])


@router.get("/projects/{project_id}/recipients", response_model=list[Recipient])
async def list_recipients(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    project = await require_project(db, current.tenant_id, project_id)
    return await service.list_recipients(db, current.tenant_id, project)
