from sitelog.db.models.report import DailyReport

__all__ = ["DailyReport"]
