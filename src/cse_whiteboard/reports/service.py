"""Weekly report service — per-customer activity for a Monday–Sunday window."""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cse_whiteboard.common.config import WhiteboardSettings
from cse_whiteboard.common.security import require_user
from cse_whiteboard.customers.models import CustomerModel
from cse_whiteboard.notes.models import CustomerNoteModel
from cse_whiteboard.reports.render import render_weekly_report
from cse_whiteboard.reports.summarizer import build_prompt
from cse_whiteboard.reports.window import week_bounds

logger = logging.getLogger(__name__)

NO_ACTIVITY_SUMMARY = "No activity recorded for this customer during the week."
SUMMARY_UNAVAILABLE = "Executive summary unavailable."


@dataclass
class WeeklyReportEntry:
    customer: CustomerModel
    notes: list[CustomerNoteModel] = field(default_factory=list)
    executive_summary: Optional[str] = None


@dataclass
class WeeklyReport:
    week_ending_date: date
    week_start: datetime
    week_end: datetime
    entries: list[WeeklyReportEntry]

    def render(self) -> str:
        return render_weekly_report(self.entries, self.week_ending_date)


class ReportService:
    """Builds the weekly digest; executive summaries are best-effort."""

    def __init__(self, settings: WhiteboardSettings, summary_client=None):
        self.settings = settings
        self.summary_client = summary_client

    async def get_weekly_report(
        self,
        session: AsyncSession,
        user_id: str | None,
        week_ending_date: str,
        include_summaries: bool = True,
    ) -> WeeklyReport:
        user_id = require_user(user_id)
        start, end = week_bounds(week_ending_date)

        customers_result = await session.execute(
            select(CustomerModel)
            .where(
                CustomerModel.user_id == user_id,
                CustomerModel.archived.is_(False),
            )
            .order_by(CustomerModel.name.asc())
        )
        customers = list(customers_result.scalars().all())

        notes_result = await session.execute(
            select(CustomerNoteModel)
            .where(
                CustomerNoteModel.user_id == user_id,
                CustomerNoteModel.created_at >= start,
                CustomerNoteModel.created_at <= end,
            )
            .order_by(CustomerNoteModel.created_at.asc(), CustomerNoteModel.id.asc())
        )
        notes_by_customer: dict[int, list[CustomerNoteModel]] = defaultdict(list)
        for note in notes_result.scalars().all():
            notes_by_customer[note.customer_id].append(note)

        entries = [
            WeeklyReportEntry(customer=c, notes=notes_by_customer.get(c.id, []))
            for c in customers
        ]

        if include_summaries and self.summary_client is not None:
            await self._attach_summaries(entries, start, end)

        logger.info(
            "weekly report generated",
            extra={
                "user_id": user_id,
                "week_ending_date": str(end.date()),
                "customers": len(entries),
            },
        )
        return WeeklyReport(
            week_ending_date=end.date(),
            week_start=start,
            week_end=end,
            entries=entries,
        )

    async def _attach_summaries(
        self, entries: list[WeeklyReportEntry], start: datetime, end: datetime,
    ) -> None:
        """Summarize all customers concurrently, bounded by a semaphore."""
        semaphore = asyncio.Semaphore(max(1, self.settings.summary_max_concurrency))
        summaries = await asyncio.gather(
            *(self._summarize(entry, start, end, semaphore) for entry in entries)
        )
        for entry, summary in zip(entries, summaries):
            entry.executive_summary = summary

    async def _summarize(
        self,
        entry: WeeklyReportEntry,
        start: datetime,
        end: datetime,
        semaphore: asyncio.Semaphore,
    ) -> str:
        if not entry.notes:
            return NO_ACTIVITY_SUMMARY

        prompt = build_prompt(entry.customer, entry.notes, start, end)
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    self.summary_client.summarize(prompt),
                    timeout=self.settings.summary_timeout,
                )
            except Exception:
                logger.warning(
                    "executive summary unavailable",
                    extra={"customer_id": entry.customer.id},
                    exc_info=True,
                )
                return SUMMARY_UNAVAILABLE
