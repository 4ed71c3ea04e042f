from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from designhub.core.drawings import service
from designhub.core.drawings.models import Drawing, DrawingRevision
from designhub.core.drawings.schemas import DrawingCreate, RevisionCreate
from designhub.core.errors import ConflictError, InvalidStateError

from conftest import USER_ID


async def _new_drawing(db, project, no="A-101"):
    return await service.create_drawing(
        db, project.tenant_id, project.id,
        DrawingCreate(drawing_no=no, title="Ground floor plan", discipline="ARCHITECTURAL"),
        USER_ID,
    )


async def _revise(db, project, drawing):
    return await service.add_revision(
        db, project.tenant_id, project.id, drawing.id, RevisionCreate(description="update"), USER_ID,
    )


async def _current_revision(db, drawing) -> int:
    return (await db.execute(select(Drawing.current_revision).where(Drawing.id == drawing.id))).scalar_one()


async def _revision_count(db, drawing) -> int:
    return (await db.execute(
        select(func.count()).select_from(DrawingRevision).where(DrawingRevision.drawing_id == drawing.id)
    )).scalar_one()


async def test_revisions_run_without_gaps(db, project):
    drawing = await _new_drawing(db, project)
    for _ in range(3):
        await _revise(db, project, drawing)

    revisions = await service.list_revisions(db, drawing)
    assert [r.revision_number for r in revisions] == [4, 3, 2, 1]
    assert await _current_revision(db, drawing) == 4
    assert await _revision_count(db, drawing) == 4


async def test_revision_number_taken_raises_conflict(db, project):
    drawing = await _new_drawing(db, project)
    db.add(DrawingRevision(
        tenant_id=project.tenant_id,
        drawing_id=drawing.id,
        revision_number=2,
        issued_at=datetime.now(timezone.utc),
    ))
    await db.flush()

    with pytest.raises(ConflictError):
        await _revise(db, project, drawing)

    assert await _current_revision(db, drawing) == 1
    assert await _revision_count(db, drawing) == 2


async def test_pointer_moved_underneath_raises_conflict(db, project, monkeypatch):
    drawing = await _new_drawing(db, project)
    real_update = service.update
    # Another writer already advanced the pointer: the conditional update matches nothing.
    monkeypatch.setattr(service, "update", lambda model: real_update(model).where(model.current_revision == -1))

    with pytest.raises(ConflictError):
        await _revise(db, project, drawing)

    monkeypatch.undo()
    assert await _current_revision(db, drawing) == 1
    assert await _revision_count(db, drawing) == 1


async def test_session_usable_after_conflict(db, project):
    drawing = await _new_drawing(db, project)
    db.add(DrawingRevision(
        tenant_id=project.tenant_id, drawing_id=drawing.id, revision_number=2,
        issued_at=datetime.now(timezone.utc),
    ))
    await db.flush()
    with pytest.raises(ConflictError):
        await _revise(db, project, drawing)

    other = await _new_drawing(db, project, no="E-201")
    revision = await _revise(db, project, other)
    assert revision.revision_number == 2


async def test_archived_drawing_cannot_be_revised(db, project):
    drawing = await _new_drawing(db, project)
    await service.set_drawing_status(db, drawing, "archived", USER_ID)

    with pytest.raises(InvalidStateError):
        await _revise(db, project, drawing)
    assert await _current_revision(db, drawing) == 1


async def test_archive_twice_rejected(db, project):
    drawing = await _new_drawing(db, project)
    await service.set_drawing_status(db, drawing, "archived", USER_ID)
    with pytest.raises(InvalidStateError):
        await service.set_drawing_status(db, drawing, "archived", USER_ID)
