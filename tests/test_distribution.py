import uuid
from datetime import datetime, timedelta, timezone

from designhub.core.distribution.schemas import DrawingState, SentItem
from designhub.core.distribution.service import build_matrix, summarise
from designhub.core.recipients.schemas import Recipient

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _drawing(no: str, current: int, status: str = "active") -> DrawingState:
    return DrawingState(
        id=uuid.uuid4(), drawing_no=no, title=f"{no} plan", discipline="ARCHITECTURAL",
        status=status, current_revision=current,
    )


def _sent(drawing: DrawingState, email: str, rev: int | None, at: datetime, no: str = "T-001", name: str = "Jane") -> SentItem:
    return SentItem(
        drawing_id=drawing.id, recipient_email=email, recipient_name=name, revision_number=rev,
        sent_at=at, transmittal_id=uuid.uuid4(), transmittal_no=no,
    )


def test_stale_after_new_revision():
    # D1 at rev 2 sent to jane, then revised to 3
    d1 = _drawing("D1", current=3)
    cells = build_matrix([d1], [_sent(d1, "jane@x.com", 2, T0)])
    assert len(cells) == 1
    assert cells[0].revision_number == 2
    assert cells[0].current_revision == 3
    assert cells[0].is_current is False


def test_current_when_latest_sent():
    d1 = _drawing("D1", current=2)
    cells = build_matrix([d1], [_sent(d1, "jane@x.com", 2, T0)])
    assert cells[0].is_current is True


def test_never_sent_is_absent():
    d1, d2 = _drawing("D1", 1), _drawing("D2", 1)
    cells = build_matrix([d1, d2], [_sent(d1, "jane@x.com", 1, T0)])
    assert [c.drawing_no for c in cells] == ["D1"]


def test_highest_revision_wins_regardless_of_order():
    d1 = _drawing("D1", current=3)
    items = [
        _sent(d1, "jane@x.com", 3, T0, no="T-002"),
        _sent(d1, "jane@x.com", 1, T0 + timedelta(days=2), no="T-003"),
    ]
    cells = build_matrix([d1], items)
    assert cells[0].revision_number == 3
    assert cells[0].transmittal_no == "T-002"
    assert cells[0].is_current is True


def test_equal_revision_keeps_latest_send():
    d1 = _drawing("D1", current=2)
    items = [
        _sent(d1, "jane@x.com", 2, T0 + timedelta(hours=5), no="T-004"),
        _sent(d1, "jane@x.com", 2, T0, no="T-002"),
    ]
    cells = build_matrix([d1], items)
    assert cells[0].transmittal_no == "T-004"
    assert cells[0].sent_at == T0 + timedelta(hours=5)


def test_identical_send_time_keeps_later_row():
    d1 = _drawing("D1", current=2)
    items = [
        _sent(d1, "jane@x.com", 2, T0, no="T-002"),
        _sent(d1, "jane@x.com", 2, T0, no="T-003"),
    ]
    assert build_matrix([d1], items)[0].transmittal_no == "T-003"
    assert build_matrix([d1], list(reversed(items)))[0].transmittal_no == "T-002"


def test_addresses_compare_case_insensitively():
    d1 = _drawing("D1", current=2)
    items = [
        _sent(d1, "Jane@X.com", 1, T0),
        _sent(d1, "jane@x.com", 2, T0 + timedelta(days=1)),
    ]
    cells = build_matrix([d1], items)
    assert len(cells) == 1
    assert cells[0].revision_number == 2


def test_directory_supplies_display_name_and_address():
    d1 = _drawing("D1", current=1)
    directory = [Recipient(name="Jane Doe", email="Jane@X.com", category="client", source="client")]
    cells = build_matrix([d1], [_sent(d1, "jane@x.com", 1, T0, name="J")], directory)
    assert cells[0].recipient_name == "Jane Doe"
    assert cells[0].recipient_email == "Jane@X.com"


def test_drawings_not_listed_are_skipped():
    d1 = _drawing("D1", current=1)
    archived = _drawing("D9", current=4, status="archived")
    items = [_sent(d1, "jane@x.com", 1, T0), _sent(archived, "jane@x.com", 4, T0)]
    cells = build_matrix([d1], items)
    assert [c.drawing_no for c in cells] == ["D1"]
    cells = build_matrix([d1, archived], items)
    assert [c.drawing_no for c in cells] == ["D1", "D9"]


def test_items_without_revision_are_ignored():
    d1 = _drawing("D1", current=1)
    assert build_matrix([d1], [_sent(d1, "jane@x.com", None, T0)]) == []


def test_cells_sorted_by_drawing_then_address():
    a, b = _drawing("A-101", 1), _drawing("B-201", 1)
    items = [
        _sent(b, "zed@x.com", 1, T0),
        _sent(a, "zed@x.com", 1, T0),
        _sent(a, "amy@x.com", 1, T0),
    ]
    cells = build_matrix([a, b], items)
    assert [(c.drawing_no, c.recipient_email) for c in cells] == [
        ("A-101", "amy@x.com"), ("A-101", "zed@x.com"), ("B-201", "zed@x.com"),
    ]


def test_summarise_counts_stale_first():
    d1, d2 = _drawing("D1", current=3), _drawing("D2", current=1)
    items = [
        _sent(d1, "amy@x.com", 3, T0, name="Amy"),
        _sent(d2, "amy@x.com", 1, T0, name="Amy"),
        _sent(d1, "zed@x.com", 2, T0, name="Zed"),
        _sent(d2, "zed@x.com", 1, T0, name="Zed"),
    ]
    summary = summarise(build_matrix([d1, d2], items))
    assert [s.recipient_email for s in summary] == ["zed@x.com", "amy@x.com"]
    assert summary[0].stale == 1
    assert summary[0].current == 1
    assert summary[0].stale_drawings == ["D1"]
    assert summary[1].stale == 0
    assert summary[1].current == 2
