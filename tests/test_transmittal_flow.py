import pytest

from designhub.core.delivery.service import LogNotifier
from designhub.core.distribution.service import get_distribution_matrix
from designhub.core.drawings.schemas import DrawingCreate, RevisionCreate
from designhub.core.drawings.service import add_revision, create_drawing, list_revisions, set_drawing_status
from designhub.core.errors import InvalidStateError
from designhub.core.transmittals.schemas import RecipientIn, TransmittalCreate, TransmittalItemCreate
from designhub.core.transmittals.service import (
    create_transmittal, get_transmittal, mark_sent, send_transmittal,
)

from conftest import USER_ID


class BrokenNotifier:
    async def deliver(self, message):
        raise RuntimeError("mail relay unavailable")


async def _drawing(db, project, no="D1"):
    return await create_drawing(
        db, project.tenant_id, project.id,
        DrawingCreate(drawing_no=no, title=f"{no} plan", discipline="ARCHITECTURAL"),
        USER_ID,
    )


async def _revise(db, project, drawing):
    return await add_revision(db, project.tenant_id, project.id, drawing.id, RevisionCreate(), USER_ID)


async def _draft(db, project, *items, email="jane@x.com"):
    return await create_transmittal(
        db, project.tenant_id, project,
        TransmittalCreate(
            recipient=RecipientIn(name="Jane Doe", email=email),
            items=[TransmittalItemCreate(drawing_id=d.id, revision_id=rev_id) for d, rev_id in items],
        ),
        USER_ID,
    )


async def test_first_transmittal_numbered(db, project):
    d1 = await _drawing(db, project)
    t1 = await _draft(db, project, (d1, None))
    t2 = await _draft(db, project, (d1, None), email="bob@x.com")
    assert (t1.transmittal_no, t2.transmittal_no) == ("T-001", "T-002")
    assert t1.status == "draft"
    assert t1.sent_at is None


async def test_send_is_one_way(db, project):
    d1 = await _drawing(db, project)
    t = await _draft(db, project, (d1, None))

    result = await send_transmittal(db, project.tenant_id, project, t.id, USER_ID, LogNotifier())
    assert result.delivered is True
    sent_at = (await get_transmittal(db, project.tenant_id, project.id, t.id)).sent_at
    assert sent_at is not None

    with pytest.raises(InvalidStateError):
        await mark_sent(db, project.tenant_id, project.id, t.id, USER_ID)
    with pytest.raises(InvalidStateError):
        await send_transmittal(db, project.tenant_id, project, t.id, USER_ID, LogNotifier())

    again = await get_transmittal(db, project.tenant_id, project.id, t.id)
    assert again.status == "sent"
    assert again.sent_at == sent_at


async def test_snapshot_frozen_at_send(db, project):
    d1 = await _drawing(db, project)
    d2 = await _drawing(db, project, no="D2")
    d2_rev1 = (await list_revisions(db, d2))[0]

    t = await _draft(db, project, (d1, None), (d2, d2_rev1.id))
    assert sorted(i.revision_number for i in t.items) == [1, 1]

    await _revise(db, project, d1)
    await _revise(db, project, d2)
    sent = await mark_sent(db, project.tenant_id, project.id, t.id, USER_ID)
    numbers = {i.drawing_id: i.revision_number for i in sent.items}
    assert numbers == {d1.id: 2, d2.id: 1}

    await _revise(db, project, d1)
    reread = await get_transmittal(db, project.tenant_id, project.id, t.id)
    assert {i.drawing_id: i.revision_number for i in reread.items} == {d1.id: 2, d2.id: 1}


async def test_delivery_failure_keeps_sent(db, project):
    d1 = await _drawing(db, project)
    t = await _draft(db, project, (d1, None))

    result = await send_transmittal(db, project.tenant_id, project, t.id, USER_ID, BrokenNotifier())
    assert result.delivered is False
    assert result.delivery_error == "mail relay unavailable"
    assert result.transmittal.status == "sent"

    reread = await get_transmittal(db, project.tenant_id, project.id, t.id)
    assert reread.status == "sent"
    assert reread.sent_at is not None


async def test_stale_after_revision_following_send(db, project):
    d1 = await _drawing(db, project)
    await _revise(db, project, d1)
    t1 = await _draft(db, project, (d1, None))
    await send_transmittal(db, project.tenant_id, project, t1.id, USER_ID, LogNotifier())
    await _revise(db, project, d1)

    matrix = await get_distribution_matrix(db, project.tenant_id, project.id)
    cells = [(c.drawing_no, c.recipient_email, c.revision_number, c.is_current) for c in matrix.cells]
    assert cells == [("D1", "jane@x.com", 2, False)]
    assert matrix.drawings[0].current_revision == 3


async def test_draft_not_in_matrix(db, project):
    d1 = await _drawing(db, project)
    await _draft(db, project, (d1, None))
    matrix = await get_distribution_matrix(db, project.tenant_id, project.id)
    assert matrix.cells == []


async def test_archived_drawing_only_in_history_view(db, project):
    d1 = await _drawing(db, project)
    t = await _draft(db, project, (d1, None))
    await mark_sent(db, project.tenant_id, project.id, t.id, USER_ID)
    await set_drawing_status(db, d1, "archived", USER_ID)

    active = await get_distribution_matrix(db, project.tenant_id, project.id)
    history = await get_distribution_matrix(db, project.tenant_id, project.id, include_archived=True)
    assert len(active.cells) == 0
    assert len(history.cells) == 1


async def test_recipients_include_history(db, project):
    from designhub.core.recipients.service import list_recipients

    d1 = await _drawing(db, project)
    t = await _draft(db, project, (d1, None), email="Jane@X.com")
    await mark_sent(db, project.tenant_id, project.id, t.id, USER_ID)

    recipients = await list_recipients(db, project.tenant_id, project)
    assert [(r.email, r.source) for r in recipients] == [
        ("alex@client.com", "client"), ("Jane@X.com", "history"),
    ]
