"""Pydantic schemas for the weekly report."""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from cse_whiteboard.customers.schemas import CustomerResponse
from cse_whiteboard.notes.schemas import NoteResponse


class WeeklyReportEntryResponse(BaseModel):
    customer: CustomerResponse
    notes: list[NoteResponse]
    executive_summary: Optional[str] = None


class WeeklyReportResponse(BaseModel):
    week_start: date
    week_end: date
    entries: list[WeeklyReportEntryResponse]
    text: str
