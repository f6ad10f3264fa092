"""Weekly report API router."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from cse_whiteboard.common.security import resolve_caller
from cse_whiteboard.customers.schemas import CustomerResponse
from cse_whiteboard.notes.schemas import NoteResponse
from cse_whiteboard.reports.schemas import WeeklyReportEntryResponse, WeeklyReportResponse

router = APIRouter(prefix="/reports")


def _get_service():
    from cse_whiteboard.deps import get_report_service
    return get_report_service()


def _get_db():
    from cse_whiteboard.deps import get_db
    return get_db()


@router.get("/weekly", response_model=WeeklyReportResponse)
async def get_weekly_report(
    week_ending_date: str = Query(..., description="YYYY-MM-DD"),
    summaries: bool = Query(True),
    user_id=Depends(resolve_caller),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        report = await svc.get_weekly_report(
            session, user_id, week_ending_date, include_summaries=summaries,
        )
        return WeeklyReportResponse(
            week_start=report.week_start.date(),
            week_end=report.week_end.date(),
            entries=[
                WeeklyReportEntryResponse(
                    customer=CustomerResponse.model_validate(e.customer),
                    notes=[NoteResponse.model_validate(n) for n in e.notes],
                    executive_summary=e.executive_summary,
                )
                for e in report.entries
            ],
            text=report.render(),
        )


@router.get("/weekly.txt", response_class=PlainTextResponse)
async def get_weekly_report_text(
    week_ending_date: str = Query(..., description="YYYY-MM-DD"),
    summaries: bool = Query(True),
    user_id=Depends(resolve_caller),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        report = await svc.get_weekly_report(
            session, user_id, week_ending_date, include_summaries=summaries,
        )
        return PlainTextResponse(report.render())
