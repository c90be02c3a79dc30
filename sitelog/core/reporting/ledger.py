"""Resource ledger: the four resource tables and the transforms applied to them.

Two transforms matter:

* ``carry_forward`` moves a day's accumulated totals into the next day's
  "previous" column. It keeps every row, in order, with its id.
* ``clean_rows`` runs at submission time and drops rows the user added but
  never filled in.
"""

from collections.abc import Iterable
from datetime import date

from sitelog.common.enums import ResourceCategory, WeatherPeriod
from sitelog.common.logging import get_logger
from sitelog.config import settings
from sitelog.core.reporting.dates import day_key
from sitelog.core.reporting.schemas import ReportData, ResourceRow

logger = get_logger("reporting.ledger")

RESOURCE_CATEGORIES: tuple[ResourceCategory, ...] = (
    ResourceCategory.MANAGEMENT_TEAM,
    ResourceCategory.WORKING_TEAM,
    ResourceCategory.MATERIALS,
    ResourceCategory.MACHINERY,
)


def new_row(with_unit: bool = False) -> ResourceRow:
    return ResourceRow(unit="" if with_unit else None)


def carry_forward_row(row: ResourceRow) -> ResourceRow:
    return row.model_copy(
        update={"prev": row.accumulated, "today": 0, "accumulated": row.accumulated}
    )


def carry_forward(rows: Iterable[ResourceRow]) -> list[ResourceRow]:
    return [carry_forward_row(r) for r in rows]


def is_blank_row(row: ResourceRow) -> bool:
    return (
        not row.description.strip()
        and row.prev <= 0
        and row.today <= 0
        and row.accumulated <= 0
    )


def clean_rows(rows: Iterable[ResourceRow]) -> list[ResourceRow]:
    return [
        ResourceRow(
            id=r.id,
            description=r.description.strip(),
            unit=r.unit or "",
            prev=r.prev,
            today=r.today,
            accumulated=r.accumulated,
        )
        for r in rows
        if not is_blank_row(r)
    ]


def clean_report(data: ReportData) -> ReportData:
    """Drop blank rows from every table and pin the date to a plain calendar day."""
    update = {c.value: clean_rows(data.rows(c)) for c in RESOURCE_CATEGORIES}
    if data.report_date is not None:
        update["report_date"] = day_key(data.report_date)
    return data.model_copy(update=update)


def carry_forward_report(data: ReportData, next_day: date) -> ReportData:
    """Build the next day's starting template from a (usually cleaned) report."""
    template = ReportData(
        project_name=data.project_name,
        report_date=next_day,
        weather=settings.DEFAULT_WEATHER,
        weather_period=WeatherPeriod.AM,
        **{c.value: carry_forward(data.rows(c)) for c in RESOURCE_CATEGORIES},
    )
    logger.debug(
        "Carry-forward template for %s: %s",
        template.report_date,
        {c.value: len(template.rows(c)) for c in RESOURCE_CATEGORIES},
    )
    return template
