import uuid
from datetime import datetime
from pydantic import BaseModel

from designhub.core.recipients.schemas import Recipient


class DrawingState(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    drawing_no: str
    title: str
    discipline: str
    status: str
    current_revision: int


class SentItem(BaseModel):
    """One transmittal item of a sent transmittal, flattened."""
    drawing_id: uuid.UUID
    recipient_email: str
    recipient_name: str
    revision_number: int | None
    sent_at: datetime
    transmittal_id: uuid.UUID
    transmittal_no: str


class DistributionCell(BaseModel):
    drawing_id: uuid.UUID
    drawing_no: str
    recipient_email: str
    recipient_name: str
    revision_number: int
    current_revision: int
    is_current: bool
    sent_at: datetime
    transmittal_id: uuid.UUID
    transmittal_no: str


class DistributionMatrix(BaseModel):
    project_id: uuid.UUID
    include_archived: bool
    drawings: list[DrawingState]
    recipients: list[Recipient]
    cells: list[DistributionCell]


class RecipientSummary(BaseModel):
    recipient_email: str
    recipient_name: str
    current: int
    stale: int
    stale_drawings: list[str]
