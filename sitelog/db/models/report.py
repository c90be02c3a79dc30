from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from sitelog.common.enums import ReportStatus
from sitelog.db.base import BaseModel


class DailyReport(BaseModel):
    __tablename__ = "daily_reports"
    __table_args__ = (
        UniqueConstraint("project_name", "report_date", name="uq_daily_reports_project_date"),
    )

    project_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    report_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), default=ReportStatus.SAVED.value, nullable=False)
    # Full camelCase ReportData payload as last saved
    content: Mapped[dict] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
