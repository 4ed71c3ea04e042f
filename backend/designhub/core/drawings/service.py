import logging
import uuid
from datetime import datetime, timezone
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.audit.service import audit
from designhub.core.drawings.models import Drawing, DrawingRevision
from designhub.core.drawings.schemas import DrawingCreate, DrawingUpdate, RevisionCreate
from designhub.core.errors import ConflictError, InvalidStateError, NotFoundError, ValidationError
from designhub.core.files.service import require_file

logger = logging.getLogger(__name__)


def next_revision_number(current: int) -> int:
    if current < 1:
        raise ValidationError(f"Invalid current revision {current}")
    return current + 1


async def _find_by_number(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, drawing_no: str
) -> Drawing | None:
    result = await db.execute(
        select(Drawing).where(
            Drawing.tenant_id == tenant_id,
            Drawing.project_id == project_id,
            Drawing.drawing_no == drawing_no,
            Drawing.is_deleted == False,
        )
    )
    return result.scalar_one_or_none()


async def create_drawing(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project_id: uuid.UUID,
    data: DrawingCreate,
    created_by: uuid.UUID | None,
) -> Drawing:
    """Registers the drawing together with its revision 1."""
    if await _find_by_number(db, tenant_id, project_id, data.drawing_no):
        raise ValidationError(f"Drawing {data.drawing_no} already exists in this project")
    if data.file_id:
        await require_file(db, tenant_id, data.file_id)

    now = datetime.now(timezone.utc)
    drawing = Drawing(
        tenant_id=tenant_id,
        project_id=project_id,
        drawing_no=data.drawing_no,
        title=data.title,
        discipline=data.discipline,
        drawing_type=data.drawing_type,
        description=data.description,
        status="active",
        current_revision=1,
        created_by=created_by,
    )
    db.add(drawing)
    await db.flush()

    db.add(DrawingRevision(
        tenant_id=tenant_id,
        drawing_id=drawing.id,
        revision_number=1,
        description=data.revision_description,
        file_id=data.file_id,
        issued_at=now,
        issued_by=created_by,
    ))
    await db.flush()

    await audit(
        db, tenant_id=tenant_id, user_id=created_by,
        action="drawing.created",
        resource_type="drawing",
        resource_id=str(drawing.id),
        project_id=project_id,
        detail={
            "drawing_no": data.drawing_no,
            "discipline": data.discipline,
            "drawing_type": data.drawing_type,
        },
    )
    await db.refresh(drawing)
    return drawing


async def get_drawing(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, drawing_id: uuid.UUID
) -> Drawing | None:
    result = await db.execute(
        select(Drawing).where(
            Drawing.id == drawing_id,
            Drawing.tenant_id == tenant_id,
            Drawing.project_id == project_id,
            Drawing.is_deleted == False,
        )
    )
    return result.scalar_one_or_none()


async def require_drawing(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, drawing_id: uuid.UUID
) -> Drawing:
    drawing = await get_drawing(db, tenant_id, project_id, drawing_id)
    if not drawing:
        raise NotFoundError("Drawing not found")
    return drawing


async def list_drawings(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project_id: uuid.UUID,
    include_archived: bool = False,
    discipline: str | None = None,
    drawing_no: str | None = None,
    status: str | None = None,
) -> list[Drawing]:
    q = select(Drawing).where(
        Drawing.tenant_id == tenant_id,
        Drawing.project_id == project_id,
        Drawing.is_deleted == False,
    )
    if status:
        q = q.where(Drawing.status == status)
    elif not include_archived:
        q = q.where(Drawing.status == "active")
    if discipline:
        q = q.where(Drawing.discipline == discipline)
    if drawing_no:
        q = q.where(Drawing.drawing_no.ilike(f"%{drawing_no}%"))
    q = q.order_by(Drawing.drawing_no)
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_drawing(
    db: AsyncSession, drawing: Drawing, data: DrawingUpdate, updated_by: uuid.UUID | None
) -> Drawing:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "drawing_no" in changes and changes["drawing_no"] != drawing.drawing_no:
        if await _find_by_number(db, drawing.tenant_id, drawing.project_id, changes["drawing_no"]):
            raise ValidationError(f"Drawing {changes['drawing_no']} already exists in this project")
    for field, value in changes.items():
        setattr(drawing, field, value)
    await db.flush()
    await audit(
        db, tenant_id=drawing.tenant_id, user_id=updated_by,
        action="drawing.updated",
        resource_type="drawing",
        resource_id=str(drawing.id),
        project_id=drawing.project_id,
        detail=changes,
    )
    await db.refresh(drawing)
    return drawing


async def set_drawing_status(
    db: AsyncSession, drawing: Drawing, to_status: str, changed_by: uuid.UUID | None
) -> Drawing:
    if drawing.status == to_status:
        raise InvalidStateError(f"Drawing {drawing.drawing_no} is already {to_status}")
    drawing.status = to_status
    await db.flush()
    await audit(
        db, tenant_id=drawing.tenant_id, user_id=changed_by,
        action="drawing.archived" if to_status == "archived" else "drawing.restored",
        resource_type="drawing",
        resource_id=str(drawing.id),
        project_id=drawing.project_id,
        detail={"drawing_no": drawing.drawing_no},
    )
    await db.refresh(drawing)
    return drawing


async def add_revision(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project_id: uuid.UUID,
    drawing_id: uuid.UUID,
    data: RevisionCreate,
    issued_by: uuid.UUID | None,
) -> DrawingRevision:
    """
    Creates revision N+1 and advances the drawing's pointer in one savepoint.

    The drawing row is locked FOR UPDATE, so concurrent callers on the same
    drawing queue up behind each other. The pointer update is additionally
    conditional on the N we read, and the (drawing_id, revision_number)
    unique constraint backs both; losing either check raises ConflictError.
    """
    result = await db.execute(
        select(Drawing)
        .where(
            Drawing.id == drawing_id,
            Drawing.tenant_id == tenant_id,
            Drawing.project_id == project_id,
            Drawing.is_deleted == False,
        )
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    drawing = result.scalar_one_or_none()
    if not drawing:
        raise NotFoundError("Drawing not found")
    if drawing.status == "archived":
        raise InvalidStateError(f"Drawing {drawing.drawing_no} is archived and cannot be revised")
    if data.file_id:
        await require_file(db, tenant_id, data.file_id)

    current = drawing.current_revision
    revision_number = next_revision_number(current)
    revision = DrawingRevision(
        tenant_id=tenant_id,
        drawing_id=drawing.id,
        revision_number=revision_number,
        description=data.description,
        file_id=data.file_id,
        issued_at=datetime.now(timezone.utc),
        issued_by=issued_by,
    )
    try:
        async with db.begin_nested():
            moved = await db.execute(
                update(Drawing)
                .where(Drawing.id == drawing.id, Drawing.current_revision == current)
                .values(current_revision=revision_number, updated_at=datetime.now(timezone.utc))
            )
            if moved.rowcount != 1:
                raise ConflictError(f"Drawing {drawing.drawing_no} was revised concurrently")
            db.add(revision)
            await db.flush()
    except IntegrityError:
        raise ConflictError(f"Revision {revision_number} of drawing {drawing.drawing_no} already exists")

    logger.info(
        "drawing %s revised to %s", drawing.drawing_no, revision_number,
        extra={"drawing_id": drawing.id, "revision_number": revision_number},
    )
    await audit(
        db, tenant_id=tenant_id, user_id=issued_by,
        action="drawing.revised",
        resource_type="drawing",
        resource_id=str(drawing.id),
        project_id=project_id,
        detail={
            "drawing_no": drawing.drawing_no,
            "old_revision": current,
            "new_revision": revision_number,
        },
    )
    await db.refresh(revision)
    return revision


async def list_revisions(db: AsyncSession, drawing: Drawing) -> list[DrawingRevision]:
    result = await db.execute(
        select(DrawingRevision)
        .where(DrawingRevision.drawing_id == drawing.id)
        .order_by(DrawingRevision.revision_number.desc())
    )
    return list(result.scalars().all())


async def drawing_history(db: AsyncSession, drawing: Drawing) -> list[dict]:
    from designhub.core.transmittals.models import Transmittal, TransmittalItem

    result = await db.execute(
        select(TransmittalItem, Transmittal)
        .join(Transmittal, Transmittal.id == TransmittalItem.transmittal_id)
        .where(
            TransmittalItem.drawing_id == drawing.id,
            Transmittal.tenant_id == drawing.tenant_id,
            Transmittal.is_deleted == False,
        )
        .order_by(Transmittal.created_at.desc())
    )
    return [
        {
            "transmittal_id": t.id,
            "transmittal_no": t.transmittal_no,
            "status": t.status,
            "recipient_name": t.recipient_name,
            "recipient_email": t.recipient_email,
            "revision_number": item.revision_number,
            "purpose": item.purpose,
            "sent_at": t.sent_at,
        }
        for item, t in result.all()
    ]
