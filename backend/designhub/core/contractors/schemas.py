import uuid
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Literal

CONTRACTOR_TYPES = Literal["contractor", "subcontractor"]


class ContractorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(None, max_length=255)
    company: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)
    trade: str | None = Field(None, max_length=100)
    contractor_type: CONTRACTOR_TYPES = "contractor"


class ContractorRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    email: str | None
    company: str | None
    phone: str | None
    trade: str | None
    contractor_type: str
    created_at: datetime


class ProjectContractorCreate(BaseModel):
    contractor_id: uuid.UUID
    role: str | None = Field(None, max_length=100)


class ProjectContractorRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    project_id: uuid.UUID
    contractor_id: uuid.UUID
    role: str | None
    is_active: bool
    contractor: ContractorRead
    created_at: datetime
