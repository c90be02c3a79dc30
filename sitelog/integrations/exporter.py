"""Export dispatcher client.

Hands a finalized report snapshot to the document exporter service, which
renders PDF / Excel / ZIP. Uses the real service when ``EXPORTER_URL`` points
at one, otherwise returns an empty document record for development.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import BaseModel, Field

from sitelog.common.enums import ExportFormat
from sitelog.common.exceptions import ExportError
from sitelog.config import settings
from sitelog.core.reporting.schemas import ExportSnapshot
from sitelog.integrations.base import BaseIntegration

EXTENSIONS: dict[ExportFormat, str] = {
    ExportFormat.PDF: "pdf",
    ExportFormat.EXCEL: "xlsx",
    ExportFormat.ZIP: "zip",
}

CONTENT_TYPES: dict[ExportFormat, str] = {
    ExportFormat.PDF: "application/pdf",
    ExportFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.ZIP: "application/zip",
}


class ExportResult(BaseModel):
    format: ExportFormat
    filename: str
    content_type: str
    content: bytes = b""
    preview: bool = False
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def size_bytes(self) -> int:
        return len(self.content)


def export_filename(snapshot: ExportSnapshot, fmt: ExportFormat) -> str:
    project = re.sub(r"[^\w.-]+", "-", snapshot.project_name).strip("-") or "export"
    return f"report-{project}-{snapshot.report_date.isoformat()}.{EXTENSIONS[fmt]}"


class ExportClient(BaseIntegration):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__("exporter")
        self._base_url = (base_url or settings.EXPORTER_URL).rstrip("/")
        self._timeout = timeout or settings.EXPORTER_TIMEOUT_SECONDS
        self._transport = transport

    def _is_mock(self) -> bool:
        return self._base_url.startswith("mock")

    async def health_check(self) -> bool:
        if self._is_mock():
            self.logger.info("Exporter health check: OK (mock)")
            return True
        try:
            async with httpx.AsyncClient(timeout=10, transport=self._transport) as client:
                resp = await client.get(f"{self._base_url}/health")
                return resp.status_code == 200
        except httpx.HTTPError as e:
            self.logger.error("Exporter health check failed: %s", e)
            return False

    async def dispatch(
        self, snapshot: ExportSnapshot, fmt: ExportFormat, preview: bool = False
    ) -> ExportResult:
        fmt = ExportFormat(fmt)
        if preview and fmt != ExportFormat.PDF:
            raise ExportError("Only PDF exports can be previewed")

        filename = export_filename(snapshot, fmt)

        if self._is_mock():
            self.logger.info("Mock export: %s (preview=%s)", filename, preview)
            return ExportResult(
                format=fmt, filename=filename, content_type=CONTENT_TYPES[fmt], preview=preview
            )

        payload: dict[str, Any] = {
            "mode": "report",
            "format": fmt.value,
            "preview": preview,
            "data": snapshot.model_dump(mode="json", by_alias=True),
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(f"{self._base_url}/generate-report", json=payload)
                resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExportError(
                f"Exporter returned HTTP {e.response.status_code}: {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise ExportError(f"Could not reach the exporter: {e}") from e

        result = ExportResult(
            format=fmt,
            filename=filename,
            content_type=resp.headers.get("content-type", CONTENT_TYPES[fmt]),
            content=resp.content,
            preview=preview,
        )
        self.logger.info("Exported %s (%d bytes)", filename, result.size_bytes)
        return result
