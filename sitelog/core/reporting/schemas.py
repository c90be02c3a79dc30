import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sitelog.common.enums import ResourceCategory, WeatherPeriod
from sitelog.config import settings
from sitelog.core.reporting.dates import day_key, to_calendar_day


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResourceRow(WireModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    description: str = ""
    unit: str | None = None
    prev: float = Field(default=0, ge=0)
    today: float = Field(default=0, ge=0)
    accumulated: float = Field(default=0, ge=0)  # expected prev + today, not enforced

    @field_validator("prev", "today", "accumulated", mode="before")
    @classmethod
    def _blank_as_zero(cls, value):
        if value is None or value == "":
            return 0
        return value


class ReportData(WireModel):
    project_name: str = ""
    report_date: str | None = None
    weather: str = Field(default_factory=lambda: settings.DEFAULT_WEATHER)
    weather_period: WeatherPeriod = WeatherPeriod.AM
    temperature: str = ""
    weather_am: str = Field(default="", alias="weatherAM")
    weather_pm: str = Field(default="", alias="weatherPM")
    activity_today: str = ""
    work_plan_next_day: str = ""
    management_team: list[ResourceRow] = Field(default_factory=list)
    working_team: list[ResourceRow] = Field(default_factory=list)
    materials: list[ResourceRow] = Field(default_factory=list)
    machinery: list[ResourceRow] = Field(default_factory=list)

    @field_validator("report_date", mode="before")
    @classmethod
    def _normalize_report_date(cls, value):
        if value is None or value == "":
            return None
        return day_key(value)

    def day(self) -> date | None:
        if self.report_date is None:
            return None
        return to_calendar_day(self.report_date)

    def rows(self, category: ResourceCategory) -> list[ResourceRow]:
        return getattr(self, ResourceCategory(category).value)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ExportSnapshot(ReportData):
    """Finalized report handed to the exporter; the date is a real date."""

    report_date: date  # type: ignore[assignment]


class SubmitRequest(WireModel):
    project_name: str
    report_date: str = Field(alias="date")

    @field_validator("report_date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return day_key(value)
