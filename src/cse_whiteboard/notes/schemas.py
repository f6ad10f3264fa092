"""Pydantic schemas for customer note endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    customer_id: int = Field(..., gt=0)
    note: str = Field(..., min_length=1, max_length=5000)


class NoteUpdate(BaseModel):
    id: int = Field(..., gt=0)
    note: str = Field(..., min_length=1, max_length=5000)


class NoteResponse(BaseModel):
    id: int
    customer_id: int
    note: str
    created_at: datetime
    user_id: str

    model_config = {"from_attributes": True}
