from datetime import datetime
from pydantic import BaseModel
from typing import Literal

SOURCES = Literal["client", "project_contractor", "history"]


class Recipient(BaseModel):
    name: str
    email: str
    company: str | None = None
    category: str = "other"
    trade: str | None = None
    source: SOURCES = "history"


class HistoricalRecipient(BaseModel):
    """Recipient as recorded on a sent transmittal."""
    name: str
    email: str
    company: str | None = None
    recipient_type: str | None = None
    sent_at: datetime
