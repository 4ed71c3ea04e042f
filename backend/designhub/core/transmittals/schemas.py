import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal

RECIPIENT_TYPES = Literal["client", "contractor", "subcontractor", "team", "other"]
METHODS = Literal["email", "hand_delivery", "courier", "ftp", "other"]
PURPOSES = Literal["for_approval", "for_construction", "for_information", "for_review", "as_requested"]


class RecipientIn(BaseModel):
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    company: str | None = Field(None, max_length=255)
    type: RECIPIENT_TYPES | None = None


class TransmittalItemCreate(BaseModel):
    drawing_id: uuid.UUID
    revision_id: uuid.UUID | None = None
    purpose: PURPOSES = "for_information"
    notes: str | None = None


class TransmittalCreate(BaseModel):
    recipient: RecipientIn
    items: list[TransmittalItemCreate]
    subject: str | None = Field(None, max_length=500)
    notes: str | None = None
    method: METHODS = "email"


class BulkTransmittalCreate(BaseModel):
    """One transmittal is created per recipient, all carrying the same items."""
    recipients: list[RecipientIn]
    items: list[TransmittalItemCreate]
    subject: str | None = Field(None, max_length=500)
    notes: str | None = None
    method: METHODS = "email"
    send_immediately: bool = False


class TransmittalItemRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    drawing_id: uuid.UUID
    revision_id: uuid.UUID | None
    revision_number: int | None
    purpose: str
    notes: str | None


class TransmittalRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    project_id: uuid.UUID
    transmittal_no: str
    subject: str | None
    recipient_name: str
    recipient_email: str
    recipient_company: str | None
    recipient_type: str | None
    method: str
    status: str
    notes: str | None
    sent_at: datetime | None
    sent_by: uuid.UUID | None
    created_by: uuid.UUID | None
    delivery_reference: str | None
    created_at: datetime
    items: list[TransmittalItemRead]


class SendResult(BaseModel):
    transmittal: TransmittalRead
    delivered: bool
    delivery_reference: str | None = None
    delivery_error: str | None = None
