from fastapi import HTTPException, status


# ---------- HTTP errors (server of record) ----------


class SitelogException(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(SitelogException):
    def __init__(self, resource: str, resource_id: str | None = None):
        detail = f"{resource} not found"
        if resource_id:
            detail = f"{resource} '{resource_id}' not found"
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)


class BadRequestError(SitelogException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class ConflictError(SitelogException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_409_CONFLICT)


# ---------- Draft engine errors ----------


class ReportError(Exception):
    """Base class for failures inside the report draft engine."""


class ReportValidationError(ReportError):
    """A required report field is missing. Carries the first failing rule only."""


class LocalStoreError(ReportError):
    """The local draft cache could not be read, written or decoded."""


class RemoteError(ReportError):
    def __init__(self, service: str, detail: str | None = None, status_code: int | None = None):
        self.service = service
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail or f"{service} request failed")


class RemoteNotFoundError(RemoteError):
    pass


class ExportError(ReportError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
