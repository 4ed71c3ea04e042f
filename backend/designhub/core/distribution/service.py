"""
Distribution matrix: for every (drawing, recipient) pair that has ever been
sent something, the highest revision that recipient received and whether it
is still the drawing's current revision.

build_matrix is a pure fold over already-loaded rows; get_distribution_matrix
does the loading.
"""
import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.distribution.schemas import (
    DistributionCell, DistributionMatrix, DrawingState, RecipientSummary, SentItem,
)
from designhub.core.drawings.service import list_drawings
from designhub.core.projects.service import require_project
from designhub.core.recipients.schemas import Recipient
from designhub.core.recipients.service import address_key, list_recipients
from designhub.core.transmittals.models import Transmittal, TransmittalItem


def _beats(candidate: SentItem, best: SentItem) -> bool:
    # Higher revision wins; equal revisions go to the later send, and on equal
    # timestamps to the later row (load_sent_items orders by send then creation).
    if candidate.revision_number != best.revision_number:
        return candidate.revision_number > best.revision_number
    return candidate.sent_at >= best.sent_at


def build_matrix(
    drawings: list[DrawingState],
    sent_items: list[SentItem],
    recipients: list[Recipient] | None = None,
) -> list[DistributionCell]:
    by_id = {d.id: d for d in drawings}
    directory = {address_key(r.email): r for r in recipients or []}

    best: dict[tuple[uuid.UUID, str], SentItem] = {}
    for item in sent_items:
        if item.drawing_id not in by_id or item.revision_number is None:
            continue
        key = (item.drawing_id, address_key(item.recipient_email))
        held = best.get(key)
        if held is None or _beats(item, held):
            best[key] = item

    cells = []
    for (drawing_id, address), item in best.items():
        drawing = by_id[drawing_id]
        known = directory.get(address)
        cells.append(DistributionCell(
            drawing_id=drawing_id,
            drawing_no=drawing.drawing_no,
            recipient_email=known.email if known else item.recipient_email,
            recipient_name=known.name if known else item.recipient_name,
            revision_number=item.revision_number,
            current_revision=drawing.current_revision,
            is_current=item.revision_number >= drawing.current_revision,
            sent_at=item.sent_at,
            transmittal_id=item.transmittal_id,
            transmittal_no=item.transmittal_no,
        ))
    cells.sort(key=lambda c: (c.drawing_no, address_key(c.recipient_email)))
    return cells


def summarise(cells: list[DistributionCell]) -> list[RecipientSummary]:
    """Per recipient: how many drawings they hold the current revision of, and which are stale."""
    summaries: dict[str, RecipientSummary] = {}
    for cell in cells:
        key = address_key(cell.recipient_email)
        s = summaries.get(key)
        if s is None:
            s = summaries[key] = RecipientSummary(
                recipient_email=cell.recipient_email,
                recipient_name=cell.recipient_name,
                current=0,
                stale=0,
                stale_drawings=[],
            )
        if cell.is_current:
            s.current += 1
        else:
            s.stale += 1
            s.stale_drawings.append(cell.drawing_no)
    return sorted(summaries.values(), key=lambda s: (-s.stale, address_key(s.recipient_email)))


async def load_sent_items(db: AsyncSession, tenant_id: uuid.UUID, project_id: uuid.UUID) -> list[SentItem]:
    result = await db.execute(
        select(
            TransmittalItem.drawing_id,
            TransmittalItem.revision_number,
            Transmittal.id,
            Transmittal.transmittal_no,
            Transmittal.recipient_email,
            Transmittal.recipient_name,
            Transmittal.sent_at,
        )
        .join(Transmittal, Transmittal.id == TransmittalItem.transmittal_id)
        .where(
            Transmittal.tenant_id == tenant_id,
            Transmittal.project_id == project_id,
            Transmittal.status == "sent",
            Transmittal.is_deleted == False,
        )
        .order_by(Transmittal.sent_at, Transmittal.created_at, Transmittal.transmittal_no)
    )
    return [
        SentItem(
            drawing_id=drawing_id,
            revision_number=revision_number,
            transmittal_id=transmittal_id,
            transmittal_no=transmittal_no,
            recipient_email=email,
            recipient_name=name,
            sent_at=sent_at,
        )
        for drawing_id, revision_number, transmittal_id, transmittal_no, email, name, sent_at in result.all()
    ]


async def get_distribution_matrix(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    project_id: uuid.UUID,
    include_archived: bool = False,
) -> DistributionMatrix:
    """Archived drawings are left out unless include_archived (history/audit views)."""
    project = await require_project(db, tenant_id, project_id)
    drawings = [
        DrawingState.model_validate(d)
        for d in await list_drawings(db, tenant_id, project_id, include_archived=include_archived)
    ]
    recipients = await list_recipients(db, tenant_id, project)
    sent_items = await load_sent_items(db, tenant_id, project_id)
    return DistributionMatrix(
        project_id=project_id,
        include_archived=include_archived,
        drawings=drawings,
        recipients=recipients,
        cells=build_matrix(drawings, sent_items, recipients),
    )
