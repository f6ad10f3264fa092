"""Pydantic schemas for to-do endpoints."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from cse_whiteboard.common.validation import optional_iso_date

Priority = Literal["low", "medium", "high"]


class TodoCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    priority: Priority = "medium"
    due_date: Optional[date] = None
    customer_id: Optional[int] = Field(None, gt=0)
    note_id: Optional[int] = Field(None, gt=0)

    @field_validator("due_date", mode="before")
    @classmethod
    def _check_due_date(cls, value):
        return optional_iso_date(value)


class TodoUpdate(BaseModel):
    """Partial update: only fields that are sent are applied."""
    id: int = Field(..., gt=0)
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[date] = None
    customer_id: Optional[int] = Field(None, gt=0)
    completed: Optional[bool] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _check_due_date(cls, value):
        return optional_iso_date(value)


class TodoDelete(BaseModel):
    id: int = Field(..., gt=0)


class TodoResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    priority: str
    due_date: Optional[date] = None
    customer_id: Optional[int] = None
    note_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    user_id: str

    model_config = {"from_attributes": True}
