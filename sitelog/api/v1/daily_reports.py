import uuid
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sitelog.api.deps import get_db
from sitelog.common.enums import ReportStatus
from sitelog.common.exceptions import BadRequestError, ConflictError, NotFoundError
from sitelog.common.logging import get_logger
from sitelog.common.pagination import PaginatedResponse, PaginationParams, paginate
from sitelog.core.reporting.dates import to_calendar_day
from sitelog.core.reporting.schemas import ReportData, SubmitRequest, WireModel
from sitelog.db.models.report import DailyReport

logger = get_logger("api.daily_reports")

router = APIRouter(prefix="/daily-reports", tags=["Daily Reports"])


# ---------- Schemas ----------


class SaveResponse(BaseModel):
    message: str
    id: uuid.UUID
    status: str


class SubmitResponse(WireModel):
    message: str
    id: uuid.UUID
    status: str
    submitted_at: datetime


class DailyReportSummary(WireModel):
    id: uuid.UUID
    project_name: str
    report_date: date
    status: str
    submitted_at: datetime | None
    updated_at: datetime


# ---------- Endpoints ----------


@router.get("", response_model=PaginatedResponse[DailyReportSummary])
async def list_daily_reports(
    project_name: str | None = Query(None, alias="projectName"),
    params: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    query = select(DailyReport)
    if project_name:
        query = query.where(DailyReport.project_name == project_name)
    query = query.order_by(DailyReport.report_date.desc(), DailyReport.project_name)

    reports, total = await paginate(db, query, params)
    return PaginatedResponse[DailyReportSummary].build(
        [_summary(r) for r in reports], total, params
    )


@router.get("/date/{report_date}", response_model=ReportData)
async def get_report_by_date(
    report_date: date,
    project_name: str | None = Query(None, alias="projectName"),
    db: AsyncSession = Depends(get_db),
):
    query = select(DailyReport).where(DailyReport.report_date == report_date)
    if project_name:
        query = query.where(DailyReport.project_name == project_name)
    result = await db.execute(query.order_by(DailyReport.updated_at.desc()).limit(1))
    report = result.scalar_one_or_none()
    if not report:
        raise NotFoundError("Daily report", report_date.isoformat())

    return ReportData.model_validate(report.content)


@router.post("/save", response_model=SaveResponse)
async def save_report(body: ReportData, db: AsyncSession = Depends(get_db)):
    project_name = body.project_name.strip()
    if not project_name:
        raise BadRequestError("projectName is required")
    day = body.day()
    if day is None:
        raise BadRequestError("reportDate is required")

    content = body.model_copy(update={"project_name": project_name}).to_payload()
    report = await _find_report(db, project_name, day)
    if report:
        report.content = content
    else:
        report = DailyReport(project_name=project_name, report_date=day, content=content)
        db.add(report)
    await db.flush()
    await db.refresh(report)

    logger.info("Saved daily report %s / %s (status=%s)", project_name, day, report.status)
    return SaveResponse(message="Report saved", id=report.id, status=report.status)


@router.post("/submit", response_model=SubmitResponse)
async def submit_report(body: SubmitRequest, db: AsyncSession = Depends(get_db)):
    day = to_calendar_day(body.report_date)
    report = await _find_report(db, body.project_name.strip(), day)
    if not report:
        raise NotFoundError("Daily report", f"{body.project_name} {day.isoformat()}")
    if report.status == ReportStatus.SUBMITTED.value:
        raise ConflictError("Report has already been submitted")

    report.status = ReportStatus.SUBMITTED.value
    report.submitted_at = datetime.now(timezone.utc)
    await db.flush()

    logger.info("Submitted daily report %s / %s", report.project_name, day)
    return SubmitResponse(
        message="Report submitted",
        id=report.id,
        status=report.status,
        submitted_at=report.submitted_at,
    )


async def _find_report(db: AsyncSession, project_name: str, day: date) -> DailyReport | None:
    result = await db.execute(
        select(DailyReport).where(
            DailyReport.project_name == project_name,
            DailyReport.report_date == day,
        )
    )
    return result.scalar_one_or_none()


def _summary(report: DailyReport) -> DailyReportSummary:
    return DailyReportSummary(
        id=report.id,
        project_name=report.project_name,
        report_date=report.report_date,
        status=report.status,
        submitted_at=report.submitted_at,
        updated_at=report.updated_at,
    )
