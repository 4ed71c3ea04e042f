import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.distribution import service
from designhub.core.distribution.schemas import DistributionMatrix, RecipientSummary
from designhub.dependencies import get_db, get_current_user, CurrentUser

router = APIRouter(tags=["distribution"])


@router.get("/projects/{project_id}/distribution", response_model=DistributionMatrix)
async def get_distribution_matrix(
    project_id: uuid.UUID,
    include_archived: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    return await service.get_distribution_matrix(db, current.tenant_id, project_id, include_archived)


@router.get("/projects/{project_id}/distribution/summary", response_model=list[RecipientSummary])
async def get_distribution_summary(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current: CurrentUser = Depends(get_current_user),
):
    matrix = await service.get_distribution_matrix(db, current.tenant_id, project_id)
    return service.summarise(matrix.cells)
