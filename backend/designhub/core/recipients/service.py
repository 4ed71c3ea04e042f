import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from designhub.core.contractors.models import ProjectContractor
from designhub.core.contractors.service import list_project_links, trade_directory
from designhub.core.projects.models import Project
from designhub.core.recipients.schemas import HistoricalRecipient, Recipient
from designhub.core.transmittals.models import Transmittal

KNOWN_CATEGORIES = {"client", "contractor", "subcontractor", "team"}


def address_key(email: str) -> str:
    return email.lower()


def merge_recipients(
    client: Recipient | None,
    contractors: list[Recipient],
    history: list[HistoricalRecipient],
    trades: dict[str, str] | None = None,
) -> list[Recipient]:
    """
    Client first, then active project contractors, then everyone the project
    has sent to (oldest send first). First entry per address wins; addresses
    compare case-insensitively and are otherwise left as entered.
    """
    trades = trades or {}
    merged: dict[str, Recipient] = {}

    def _add(r: Recipient) -> None:
        if not r.email or not r.email.strip():
            return
        key = address_key(r.email)
        if key in merged:
            return
        if r.trade is None and key in trades:
            r = r.model_copy(update={"trade": trades[key]})
        merged[key] = r

    if client:
        _add(client)
    for r in contractors:
        _add(r)
    for h in sorted(history, key=lambda h: h.sent_at):
        _add(Recipient(
            name=h.name,
            email=h.email.strip(),
            company=h.company,
            category=h.recipient_type if h.recipient_type in KNOWN_CATEGORIES else "other",
            source="history",
        ))
    return list(merged.values())


def client_recipient(project: Project) -> Recipient | None:
    if not project.client_email:
        return None
    return Recipient(
        name=project.client_name or project.client_email,
        email=project.client_email.strip(),
        company=project.client_company,
        category="client",
        source="client",
    )


def contractor_recipient(link: ProjectContractor) -> Recipient | None:
    c = link.contractor
    if c is None or c.is_deleted or not c.email:
        return None
    return Recipient(
        name=c.name,
        email=c.email.strip(),
        company=c.company,
        category=c.contractor_type,
        trade=c.trade,
        source="project_contractor",
    )


async def list_recipients(db: AsyncSession, tenant_id: uuid.UUID, project: Project) -> list[Recipient]:
    links = await list_project_links(db, tenant_id, project.id, only_active=True)
    result = await db.execute(
        select(
            Transmittal.recipient_name,
            Transmittal.recipient_email,
            Transmittal.recipient_company,
            Transmittal.recipient_type,
            Transmittal.sent_at,
        ).where(
            Transmittal.tenant_id == tenant_id,
            Transmittal.project_id == project.id,
            Transmittal.status == "sent",
            Transmittal.is_deleted == False,
        ).order_by(Transmittal.sent_at)
    )
    history = [
        HistoricalRecipient(name=name, email=email, company=company, recipient_type=rtype, sent_at=sent_at)
        for name, email, company, rtype, sent_at in result.all()
    ]
    contractors = [r for r in (contractor_recipient(link) for link in links) if r]
    return merge_recipients(
        client_recipient(project),
        contractors,
        history,
        await trade_directory(db, tenant_id),
    )
