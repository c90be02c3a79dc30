import enum


class WeatherPeriod(str, enum.Enum):
    AM = "AM"
    PM = "PM"


class ResourceCategory(str, enum.Enum):
    MANAGEMENT_TEAM = "management_team"
    WORKING_TEAM = "working_team"
    MATERIALS = "materials"
    MACHINERY = "machinery"


class ReportStatus(str, enum.Enum):
    SAVED = "saved"
    SUBMITTED = "submitted"


class DateChangeState(str, enum.Enum):
    NO_DATE_SELECTED = "no_date_selected"
    FIRST_SELECTION = "first_selection"
    DATE_SWITCH = "date_switch"


class ExportFormat(str, enum.Enum):
    PDF = "pdf"
    EXCEL = "excel"
    ZIP = "zip"


class NoticeVariant(str, enum.Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"
