import uuid
from datetime import datetime
from pydantic import BaseModel, Field

class FileRead(BaseModel):
    model_config = {"from_attributes": True}
    id: uuid.UUID
    filename: str
    content_type: str | None
    size_bytes: int | None
    storage_path: str | None
    uploaded_by: uuid.UUID | None
    created_at: datetime

class FileCreate(BaseModel):
    filename: str = Field(..., min_length=1, max_length=500)
    content_type: str | None = Field(None, max_length=100)
    size_bytes: int | None = Field(None, ge=0)
    storage_path: str | None = Field(None, max_length=1000)
