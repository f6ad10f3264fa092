"""Pydantic schemas for customer endpoints."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from cse_whiteboard.common.validation import optional_iso_date, optional_url

Temperament = Literal["happy", "satisfied", "neutral", "concerned", "frustrated"]
Topology = Literal["dev", "qa", "stage", "prod"]
PatchFrequency = Literal["monthly", "quarterly"]


class _CustomerFields(BaseModel):
    last_patch_date: Optional[date] = None
    last_patch_version: Optional[str] = Field(None, max_length=100)
    patch_frequency: PatchFrequency = "monthly"
    work_load: str = Field("", max_length=100)
    cloud_manager: str = Field("", max_length=50)
    product_set: str = Field("", max_length=255)
    msc_url: Optional[str] = None
    runbook_url: Optional[str] = None
    snow_url: Optional[str] = None

    model_config = {"extra": "forbid"}

    @field_validator("last_patch_date", mode="before")
    @classmethod
    def _check_date(cls, value):
        return optional_iso_date(value)

    @field_validator("msc_url", "runbook_url", "snow_url", mode="before")
    @classmethod
    def _check_url(cls, value):
        return optional_url(value)


class CustomerCreate(_CustomerFields):
    name: str = Field(..., min_length=1, max_length=255)
    temperament: Temperament = "neutral"
    topology: Topology = "dev"
    dumbledore_stage: int = Field(1, ge=1, le=9, strict=True)


class CustomerUpdate(_CustomerFields):
    """Full-form update: identity fields required, the rest optional."""
    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    temperament: Temperament
    topology: Topology
    dumbledore_stage: int = Field(..., ge=1, le=9, strict=True)
    patch_frequency: Optional[PatchFrequency] = None
    work_load: Optional[str] = Field(None, max_length=100)
    cloud_manager: Optional[str] = Field(None, max_length=50)
    product_set: Optional[str] = Field(None, max_length=255)


class CustomerResponse(BaseModel):
    id: int
    name: str
    last_patch_date: Optional[date] = None
    last_patch_version: Optional[str] = None
    temperament: str
    topology: str
    dumbledore_stage: int
    patch_frequency: str
    work_load: str
    cloud_manager: str
    product_set: str
    msc_url: Optional[str] = None
    runbook_url: Optional[str] = None
    snow_url: Optional[str] = None
    archived: bool
    created_at: datetime
    updated_at: datetime
    user_id: str

    model_config = {"from_attributes": True}


class CustomerListItem(CustomerResponse):
    """Dashboard card: customer plus its most recent note."""
    latest_note: Optional[str] = None
    latest_note_date: Optional[datetime] = None


class ActiveCustomer(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}
