import uuid
from datetime import datetime
from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    client_name: str | None = Field(None, max_length=255)
    client_email: str | None = Field(None, max_length=255)
    client_company: str | None = Field(None, max_length=255)


class ProjectUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    status: str | None = Field(None, max_length=50)
    client_name: str | None = Field(None, max_length=255)
    client_email: str | None = Field(None, max_length=255)
    client_company: str | None = Field(None, max_length=255)


class ProjectRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    tenant_id: uuid.UUID
    project_no: str
    name: str
    description: str | None
    status: str
    client_name: str | None
    client_email: str | None
    client_company: str | None
    created_at: datetime
