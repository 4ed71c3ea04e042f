from datetime import datetime, timedelta, timezone

from designhub.core.recipients.schemas import HistoricalRecipient, Recipient
from designhub.core.recipients.service import address_key, merge_recipients

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

CLIENT = Recipient(name="Alex Client", email="alex@client.com", category="client", source="client")


def _contractor(name: str, email: str, trade: str | None = None) -> Recipient:
    return Recipient(name=name, email=email, category="contractor", trade=trade, source="project_contractor")


def _history(name: str, email: str, days: int, rtype: str | None = None) -> HistoricalRecipient:
    return HistoricalRecipient(name=name, email=email, recipient_type=rtype, sent_at=T0 + timedelta(days=days))


def test_address_key():
    assert address_key("Jane@X.com") == "jane@x.com"


def test_address_key_only_lowercases():
    assert address_key(" jane@x.com") != address_key("jane@x.com")


def test_merge_order_client_contractors_history():
    merged = merge_recipients(
        CLIENT,
        [_contractor("Sparky", "sparky@trade.com", "Electrical")],
        [_history("Jane", "jane@x.com", 1)],
    )
    assert [r.source for r in merged] == ["client", "project_contractor", "history"]


def test_first_seen_name_wins():
    merged = merge_recipients(
        CLIENT,
        [],
        [_history("Alex C", "ALEX@client.com", 1)],
    )
    assert len(merged) == 1
    assert merged[0].name == "Alex Client"
    assert merged[0].source == "client"


def test_history_oldest_first():
    merged = merge_recipients(
        None,
        [],
        [
            _history("Jane Later", "jane@x.com", 5),
            _history("Bob", "bob@x.com", 3),
            _history("Jane Early", "Jane@x.com", 1),
        ],
    )
    assert [r.name for r in merged] == ["Jane Early", "Bob"]
    assert merged[0].email == "Jane@x.com"


def test_history_category_mapping():
    merged = merge_recipients(
        None,
        [],
        [_history("Sub", "sub@x.com", 1, "subcontractor"), _history("Odd", "odd@x.com", 2, "courier")],
    )
    assert merged[0].category == "subcontractor"
    assert merged[1].category == "other"


def test_trade_enrichment_from_directory():
    merged = merge_recipients(
        None,
        [_contractor("Sparky", "sparky@trade.com", "Electrical")],
        [_history("Plumber", "Pipes@Trade.com", 1)],
        trades={"pipes@trade.com": "Plumbing", "sparky@trade.com": "Other"},
    )
    assert merged[0].trade == "Electrical"
    assert merged[1].trade == "Plumbing"


def test_blank_addresses_skipped():
    merged = merge_recipients(None, [_contractor("Nobody", "   ")], [])
    assert merged == []
