"""Remote report repository client.

Talks to the daily-reports server of record over HTTP. A 404 on load means
"no report for that day" and is returned as ``None``; every other failure,
network or server side, is raised as ``RemoteError`` with the server's own
message when it sent one. Nothing here retries: ``submit`` in particular is
not idempotent on the server.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import httpx
from pydantic import ValidationError

from sitelog.common.exceptions import RemoteError, RemoteNotFoundError
from sitelog.config import settings
from sitelog.core.reporting.dates import day_key
from sitelog.core.reporting.schemas import ReportData, SubmitRequest
from sitelog.integrations.base import BaseIntegration


class ReportsAPIClient(BaseIntegration):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__("reports_api")
        self._base_url = (base_url or settings.REPORTS_API_URL).rstrip("/")
        self._timeout = timeout or settings.REPORTS_API_TIMEOUT_SECONDS
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error("%s %s failed: %s", method, path, e)
            raise RemoteError(self.name, f"Could not reach the report server: {e}") from e
        self.logger.debug("%s %s -> %d", method, path, resp.status_code)
        return resp

    def _raise_for_status(self, resp: httpx.Response, fallback: str) -> None:
        if resp.is_success:
            return
        detail = fallback
        try:
            body = resp.json()
            if isinstance(body, dict):
                detail = body.get("message") or body.get("detail") or fallback
        except ValueError:
            pass
        self.logger.error("Report server error %d: %s", resp.status_code, detail)
        error_cls = RemoteNotFoundError if resp.status_code == 404 else RemoteError
        raise error_cls(self.name, str(detail), status_code=resp.status_code)

    def _json_body(self, resp: httpx.Response) -> dict[str, Any]:
        try:
            body = resp.json()
        except ValueError as e:
            raise RemoteError(
                self.name, "Report server returned an unreadable response", status_code=resp.status_code
            ) from e
        if not isinstance(body, dict):
            raise RemoteError(
                self.name, "Report server returned an unreadable response", status_code=resp.status_code
            )
        return body

    async def health_check(self) -> bool:
        try:
            resp = await self._request("GET", "/daily-reports", params={"page_size": 1})
            return resp.is_success
        except RemoteError:
            return False

    # ------------------------------------------------------------------
    # Repository operations
    # ------------------------------------------------------------------

    async def load(self, day: date | str, project_name: str | None = None) -> ReportData | None:
        key = day_key(day)
        params = {"projectName": project_name} if project_name else None
        resp = await self._request("GET", f"/daily-reports/date/{key}", params=params)

        if resp.status_code == 404:
            self.logger.info("No remote report for %s", key)
            return None
        self._raise_for_status(resp, f"Failed to load report: {resp.reason_phrase}")

        try:
            report = ReportData.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise RemoteError(self.name, f"Report server returned an unreadable report: {e}") from e
        self.logger.info("Loaded remote report for %s (project=%s)", key, report.project_name)
        return report

    async def save(self, data: ReportData) -> dict[str, Any]:
        resp = await self._request("POST", "/daily-reports/save", json=data.to_payload())
        self._raise_for_status(resp, "Failed to save report")
        self.logger.info("Saved report %s / %s", data.project_name, data.report_date)
        return self._json_body(resp)

    async def submit(self, project_name: str, day: date | str) -> dict[str, Any]:
        body = SubmitRequest(project_name=project_name, report_date=day_key(day))
        resp = await self._request(
            "POST", "/daily-reports/submit", json=body.model_dump(mode="json", by_alias=True)
        )
        self._raise_for_status(resp, "Failed to submit report")
        self.logger.info("Submitted report %s / %s", project_name, body.report_date)
        return self._json_body(resp)
