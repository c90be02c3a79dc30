from sitelog.common.exceptions import ReportValidationError
from sitelog.core.reporting.schemas import ReportData

PROJECT_NAME_REQUIRED = "Project name is required."
REPORT_DATE_REQUIRED = "Report date is required."
ACTIVITY_REQUIRED = "Today's activity description is required."


def check_report(data: ReportData) -> None:
    """Raise ReportValidationError for the first missing required field.

    Rules are checked in a fixed order and only the first failure is reported.
    """
    if not data.project_name.strip():
        raise ReportValidationError(PROJECT_NAME_REQUIRED)
    if data.report_date is None:
        raise ReportValidationError(REPORT_DATE_REQUIRED)
    if not data.activity_today.strip():
        raise ReportValidationError(ACTIVITY_REQUIRED)


def first_validation_error(data: ReportData) -> str | None:
    try:
        check_report(data)
    except ReportValidationError as e:
        return str(e)
    return None
