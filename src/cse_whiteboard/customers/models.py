"""SQLAlchemy model for customers."""

from datetime import date

from sqlalchemy import Boolean, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cse_whiteboard.common.models import Base, OwnedMixin, TimestampMixin


class CustomerModel(Base, TimestampMixin, OwnedMixin):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_patch_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_patch_version: Mapped[str | None] = mapped_column(String(100), nullable=True)
    temperament: Mapped[str] = mapped_column(String(20), nullable=False, default="neutral")
    topology: Mapped[str] = mapped_column(String(20), nullable=False, default="dev")
    dumbledore_stage: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    patch_frequency: Mapped[str] = mapped_column(String(20), nullable=False, default="monthly")
    work_load: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    cloud_manager: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    product_set: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    msc_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    runbook_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    snow_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
