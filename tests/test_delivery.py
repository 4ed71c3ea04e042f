import logging
import uuid

from designhub.core.delivery.service import (
    DeliveryLine, DeliveryMessage, LogNotifier, build_body, build_subject,
)


def test_subject_single_drawing():
    assert build_subject("Smith House", None, 1) == "Smith House — Drawing"


def test_subject_many_drawings():
    assert build_subject("Smith House", "  ", 3) == "Smith House — Drawings"


def test_subject_explicit():
    assert build_subject("Smith House", " Kitchen update ", 3) == "Smith House — Kitchen update"


def test_body_single_drawing():
    lines = [DeliveryLine(drawing_no="A-101", title="Ground floor plan", revision_number=2, purpose="for_approval")]
    body = build_body("Smith House", "Jane Doe", lines)
    assert body.startswith("Hi Jane, Here's a drawing for approval for Smith House.")
    assert "A-101\tGround floor plan\tRev 2" in body


def test_body_many_drawings_with_notes_and_footer():
    lines = [
        DeliveryLine(drawing_no="A-101", title="Plan", revision_number=3, purpose="for_information"),
        DeliveryLine(drawing_no="E-201", title="Lighting", revision_number=1, purpose="for_information"),
    ]
    body = build_body("Smith House", "Bob", lines, notes="Please review by Friday.", company_name="Studio Co")
    assert body.startswith("Hi Bob, Here are 2 drawings for information for Smith House.")
    assert "Please review by Friday." in body
    assert body.endswith("Studio Co")


def test_body_line_without_revision():
    lines = [DeliveryLine(drawing_no="A-101", title="Plan", revision_number=None, purpose="for_review")]
    body = build_body("P", "Jane", lines)
    assert body.splitlines()[-1] == "A-101\tPlan"


async def test_log_notifier(caplog):
    message = DeliveryMessage(
        transmittal_id=uuid.uuid4(),
        transmittal_no="T-001",
        method="email",
        to_email="jane@x.com",
        to_name="Jane",
        subject="Smith House — Drawing",
        body="Hi Jane",
    )
    with caplog.at_level(logging.INFO, logger="designhub.core.delivery.service"):
        reference = await LogNotifier().deliver(message)
    assert reference is None
    assert "T-001" in caplog.text
    assert "jane@x.com" in caplog.text
