import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal

VALID_STATUSES = Literal["active", "archived"]
DISCIPLINES = Literal[
    "ARCHITECTURAL", "ELECTRICAL", "RCP", "PLUMBING", "MECHANICAL", "INTERIOR_DESIGN",
]
DRAWING_TYPES = Literal[
    "FLOOR_PLAN", "REFLECTED_CEILING", "ELEVATION", "DETAIL", "SECTION",
    "TITLE_BLOCK", "XREF", "SCHEDULE", "OTHER",
]


class DrawingCreate(BaseModel):
    drawing_no: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=500)
    discipline: DISCIPLINES
    drawing_type: DRAWING_TYPES = "OTHER"
    description: str | None = None
    file_id: uuid.UUID | None = None
    revision_description: str | None = None


class DrawingUpdate(BaseModel):
    drawing_no: str | None = Field(None, min_length=1, max_length=100)
    title: str | None = Field(None, min_length=1, max_length=500)
    discipline: DISCIPLINES | None = None
    drawing_type: DRAWING_TYPES | None = None
    description: str | None = None


class RevisionCreate(BaseModel):
    description: str | None = None
    file_id: uuid.UUID | None = None


class RevisionRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    drawing_id: uuid.UUID
    revision_number: int
    description: str | None
    file_id: uuid.UUID | None
    issued_at: datetime
    issued_by: uuid.UUID | None


class DrawingRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    tenant_id: uuid.UUID
    project_id: uuid.UUID
    drawing_no: str
    title: str
    discipline: str
    drawing_type: str
    description: str | None
    status: str
    current_revision: int
    created_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class DrawingHistoryEntry(BaseModel):
    """One transmittal item that carried the drawing."""
    transmittal_id: uuid.UUID
    transmittal_no: str
    status: str
    recipient_name: str
    recipient_email: str
    revision_number: int | None
    purpose: str
    sent_at: datetime | None
