import logging
import uuid
from datetime import datetime, timezone
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from designhub.core.audit.service import audit
from designhub.core.delivery.service import (
    DeliveryLine, DeliveryMessage, Notifier, build_body, build_subject,
)
from designhub.core.drawings.models import Drawing, DrawingRevision
from designhub.core.errors import InvalidStateError, NotFoundError, ValidationError
from designhub.core.projects.models import Project
from designhub.core.transmittals.models import Transmittal, TransmittalItem
from designhub.core.transmittals.schemas import (
    BulkTransmittalCreate, RecipientIn, SendResult, TransmittalCreate,
    TransmittalItemCreate, TransmittalRead,
)
from designhub.settings import get_settings

logger = logging.getLogger(__name__)


# ── Pure helpers ──────────────────────────────────────────────────────────────

def format_transmittal_no(prefix: str, seq: int) -> str:
    return f"{prefix}-{seq:03d}"


def normalise_recipient(recipient: RecipientIn) -> RecipientIn:
    name = recipient.name.strip()
    email = recipient.email.strip()
    if not email:
        raise ValidationError("Recipient email address is required")
    if "@" not in email:
        raise ValidationError(f"Invalid recipient email address '{email}'")
    return recipient.model_copy(update={
        "name": name or email,
        "email": email,
        "company": recipient.company.strip() if recipient.company else None,
    })


def validate_items(items: list[TransmittalItemCreate]) -> None:
    if not items:
        raise ValidationError("A transmittal needs at least one drawing")
    seen: set[uuid.UUID] = set()
    for item in items:
        if item.drawing_id in seen:
            raise ValidationError(f"Drawing {item.drawing_id} is listed twice")
        seen.add(item.drawing_id)


def snapshot_revision_number(drawing_current: int, chosen_revision_number: int | None) -> int:
    """Revision number a transmittal item records: the chosen revision, else the drawing's current one."""
    if chosen_revision_number is not None:
        return chosen_revision_number
    return drawing_current


# ── Loading ───────────────────────────────────────────────────────────────────

async def _next_transmittal_no(db: AsyncSession, project: Project) -> str:
    result = await db.execute(
        select(Project)
        .where(Project.id == project.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    locked = result.scalar_one()
    locked.last_transmittal_seq += 1
    await db.flush()
    return format_transmittal_no(get_settings().TRANSMITTAL_PREFIX, locked.last_transmittal_seq)


async def _resolve_items(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project_id: uuid.UUID,
    items: list[TransmittalItemCreate],
) -> list[tuple[TransmittalItemCreate, Drawing, DrawingRevision | None]]:
    drawing_ids = [i.drawing_id for i in items]
    result = await db.execute(
        select(Drawing).where(
            Drawing.id.in_(drawing_ids),
            Drawing.tenant_id == tenant_id,
            Drawing.project_id == project_id,
            Drawing.is_deleted == False,
        )
    )
    drawings = {d.id: d for d in result.scalars().all()}

    revision_ids = [i.revision_id for i in items if i.revision_id]
    revisions: dict[uuid.UUID, DrawingRevision] = {}
    if revision_ids:
        result = await db.execute(
            select(DrawingRevision).where(
                DrawingRevision.id.in_(revision_ids),
                DrawingRevision.tenant_id == tenant_id,
            )
        )
        revisions = {r.id: r for r in result.scalars().all()}

    resolved = []
    for item in items:
        drawing = drawings.get(item.drawing_id)
        if not drawing:
            raise NotFoundError(f"Drawing {item.drawing_id} not found in this project")
        revision = None
        if item.revision_id:
            revision = revisions.get(item.revision_id)
            if not revision:
                raise NotFoundError(f"Revision {item.revision_id} not found")
            if revision.drawing_id != drawing.id:
                raise InvalidStateError(
                    f"Revision {item.revision_id} does not belong to drawing {drawing.drawing_no}"
                )
        resolved.append((item, drawing, revision))
    return resolved


async def get_transmittal(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, transmittal_id: uuid.UUID
) -> Transmittal | None:
    result = await db.execute(
        select(Transmittal)
        .options(selectinload(Transmittal.items))
        .where(
            Transmittal.id == transmittal_id,
            Transmittal.tenant_id == tenant_id,
            Transmittal.project_id == project_id,
            Transmittal.is_deleted == False,
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def require_transmittal(
    db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID, transmittal_id: uuid.UUID
) -> Transmittal:
    t = await get_transmittal(db, tenant_id, project_id, transmittal_id)
    if not t:
        raise NotFoundError("Transmittal not found")
    return t


async def list_transmittals(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project_id: uuid.UUID,
    status: str | None = None,
    recipient_email: str | None = None,
) -> list[Transmittal]:
    q = select(Transmittal).options(selectinload(Transmittal.items)).where(
        Transmittal.tenant_id == tenant_id,
        Transmittal.project_id == project_id,
        Transmittal.is_deleted == False,
    )
    if status:
        q = q.where(Transmittal.status == status)
    if recipient_email:
        q = q.where(func.lower(Transmittal.recipient_email) == recipient_email.strip().lower())
    q = q.order_by(Transmittal.created_at.desc())
    result = await db.execute(q)
    return list(result.scalars().all())


# ── Log operations ────────────────────────────────────────────────────────────

async def create_transmittal(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project: Project,
    data: TransmittalCreate,
    created_by: uuid.UUID | None,
) -> Transmittal:
    recipient = normalise_recipient(data.recipient)
    validate_items(data.items)
    resolved = await _resolve_items(db, tenant_id, project.id, data.items)

    transmittal_no = await _next_transmittal_no(db, project)
    t = Transmittal(
        tenant_id=tenant_id,
        project_id=project.id,
        transmittal_no=transmittal_no,
        subject=data.subject,
        recipient_name=recipient.name,
        recipient_email=recipient.email,
        recipient_company=recipient.company,
        recipient_type=recipient.type,
        method=data.method,
        status="draft",
        notes=data.notes,
        created_by=created_by,
    )
    db.add(t)
    await db.flush()

    for item, drawing, revision in resolved:
        db.add(TransmittalItem(
            tenant_id=tenant_id,
            transmittal_id=t.id,
            drawing_id=drawing.id,
            revision_id=revision.id if revision else None,
            revision_number=snapshot_revision_number(
                drawing.current_revision, revision.revision_number if revision else None
            ),
            purpose=item.purpose,
            notes=item.notes,
        ))
    await db.flush()

    await audit(
        db, tenant_id=tenant_id, user_id=created_by,
        action="transmittal.created",
        resource_type="transmittal",
        resource_id=str(t.id),
        project_id=project.id,
        detail={
            "transmittal_no": transmittal_no,
            "recipient_email": recipient.email,
            "items": len(resolved),
        },
    )
    return await require_transmittal(db, tenant_id, project.id, t.id)


async def mark_sent(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project_id: uuid.UUID,
    transmittal_id: uuid.UUID,
    sent_by: uuid.UUID | None,
) -> Transmittal:
    """
    draft -> sent, exactly once. Freezes every item's revision_number from
    the state at this moment so later revisions never rewrite history.
    """
    result = await db.execute(
        select(Transmittal)
        .where(
            Transmittal.id == transmittal_id,
            Transmittal.tenant_id == tenant_id,
            Transmittal.project_id == project_id,
            Transmittal.is_deleted == False,
        )
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    t = result.scalar_one_or_none()
    if not t:
        raise NotFoundError("Transmittal not found")
    if t.status == "sent":
        raise InvalidStateError(f"Transmittal {t.transmittal_no} has already been sent")
    if not t.recipient_email or not t.recipient_email.strip():
        raise ValidationError("Recipient email address is required to send")

    items = (await db.execute(
        select(TransmittalItem).where(TransmittalItem.transmittal_id == t.id)
    )).scalars().all()
    if not items:
        raise ValidationError(f"Transmittal {t.transmittal_no} has no drawings")

    drawings = {
        d.id: d for d in (await db.execute(
            select(Drawing).where(Drawing.id.in_([i.drawing_id for i in items]))
            .execution_options(populate_existing=True)
        )).scalars().all()
    }
    revision_ids = [i.revision_id for i in items if i.revision_id]
    revisions = {}
    if revision_ids:
        revisions = {
            r.id: r for r in (await db.execute(
                select(DrawingRevision).where(DrawingRevision.id.in_(revision_ids))
            )).scalars().all()
        }

    for item in items:
        chosen = revisions[item.revision_id].revision_number if item.revision_id else None
        item.revision_number = snapshot_revision_number(drawings[item.drawing_id].current_revision, chosen)

    t.status = "sent"
    t.sent_at = datetime.now(timezone.utc)
    t.sent_by = sent_by
    await db.flush()

    await audit(
        db, tenant_id=tenant_id, user_id=sent_by,
        action="transmittal.sent",
        resource_type="transmittal",
        resource_id=str(t.id),
        project_id=project_id,
        detail={
            "transmittal_no": t.transmittal_no,
            "recipient_email": t.recipient_email,
            "revisions": {drawings[i.drawing_id].drawing_no: i.revision_number for i in items},
        },
    )
    return await require_transmittal(db, tenant_id, project_id, t.id)


async def _build_delivery(
    db: AsyncSession, project: Project, t: Transmittal
) -> DeliveryMessage:
    from designhub.core.tenants.models import Tenant

    drawing_ids = [i.drawing_id for i in t.items]
    drawings = {
        d.id: d for d in (await db.execute(
            select(Drawing).where(Drawing.id.in_(drawing_ids))
        )).scalars().all()
    }
    revisions = (await db.execute(
        select(DrawingRevision).where(DrawingRevision.drawing_id.in_(drawing_ids))
    )).scalars().all()
    revision_files = {(r.drawing_id, r.revision_number): r.file_id for r in revisions}

    lines = []
    file_ids = []
    for item in t.items:
        drawing = drawings[item.drawing_id]
        lines.append(DeliveryLine(
            drawing_no=drawing.drawing_no,
            title=drawing.title,
            revision_number=item.revision_number,
            purpose=item.purpose,
        ))
        file_id = revision_files.get((item.drawing_id, item.revision_number))
        if file_id:
            file_ids.append(file_id)
        else:
            logger.warning(
                "drawing %s rev %s has no file to attach", drawing.drawing_no, item.revision_number,
                extra={"transmittal_no": t.transmittal_no},
            )

    tenant = (await db.execute(select(Tenant).where(Tenant.id == project.tenant_id))).scalar_one_or_none()
    company_name = (tenant.business_name or tenant.name) if tenant else None
    return DeliveryMessage(
        transmittal_id=t.id,
        transmittal_no=t.transmittal_no,
        method=t.method,
        to_email=t.recipient_email,
        to_name=t.recipient_name,
        subject=build_subject(project.name, t.subject, len(lines)),
        body=build_body(project.name, t.recipient_name, lines, t.notes, company_name),
        lines=lines,
        file_ids=file_ids,
    )


async def send_transmittal(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project: Project,
    transmittal_id: uuid.UUID,
    sent_by: uuid.UUID | None,
    notifier: Notifier,
) -> SendResult:
    """mark_sent, then hand over to the notifier. The sent status stands whatever delivery does."""
    t = await mark_sent(db, tenant_id, project.id, transmittal_id, sent_by)
    message = await _build_delivery(db, project, t)
    try:
        reference = await notifier.deliver(message)
    except Exception as exc:
        logger.exception(
            "delivery of transmittal %s failed", t.transmittal_no,
            extra={"transmittal_id": t.id, "project_id": project.id},
        )
        return SendResult(
            transmittal=TransmittalRead.model_validate(t),
            delivered=False,
            delivery_error=str(exc) or exc.__class__.__name__,
        )

    if reference:
        t.delivery_reference = reference
        await db.flush()
    return SendResult(
        transmittal=TransmittalRead.model_validate(t),
        delivered=True,
        delivery_reference=reference,
    )


async def create_transmittals(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project: Project,
    data: BulkTransmittalCreate,
    created_by: uuid.UUID | None,
    notifier: Notifier,
) -> list[SendResult]:
    if not data.recipients:
        raise ValidationError("At least one recipient is required")
    validate_items(data.items)

    results = []
    for recipient in data.recipients:
        t = await create_transmittal(
            db, tenant_id, project,
            TransmittalCreate(
                recipient=recipient,
                items=data.items,
                subject=data.subject,
                notes=data.notes,
                method=data.method,
            ),
            created_by,
        )
        if data.send_immediately:
            results.append(await send_transmittal(db, tenant_id, project, t.id, created_by, notifier))
        else:
            results.append(SendResult(transmittal=TransmittalRead.model_validate(t), delivered=False))
    return results
