"""Shared Pydantic schemas for CSE Whiteboard."""

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    service: str = "cse-whiteboard"


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: str = ""
    field: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True
