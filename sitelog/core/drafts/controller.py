"""Report form controller.

Single owner of the report currently being edited. It keeps the in-memory
form, the local draft store and the remote report repository in step:

* the first date picked after start-up loads the remote report, falling back
  to the local draft, falling back to an empty form;
* every later switch to another day saves the outgoing day as a local draft
  and carries its resource totals forward into the new day;
* submission cleans the resource tables, saves and submits remotely, drops
  the local draft and seeds tomorrow's draft with carried-forward totals;
* an autosave timer silently writes the local draft every interval.

All of this runs on one event loop. The only awaits are remote calls and
exports, so the "last processed day" marker is always updated before the
controller yields.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sitelog.common.enums import DateChangeState, ExportFormat, ResourceCategory, WeatherPeriod
from sitelog.common.exceptions import ExportError, LocalStoreError, RemoteError
from sitelog.common.logging import get_logger
from sitelog.config import settings
from sitelog.core.drafts.autosave import AutosaveTimer
from sitelog.core.notifications.service import Notifier
from sitelog.core.reporting.dates import next_day, to_calendar_day
from sitelog.core.reporting.ledger import (
    RESOURCE_CATEGORIES,
    carry_forward,
    carry_forward_report,
    clean_report,
    new_row,
)
from sitelog.core.reporting.schemas import ExportSnapshot, ReportData, ResourceRow
from sitelog.core.reporting.validation import first_validation_error
from sitelog.integrations.exporter import ExportClient, ExportResult
from sitelog.integrations.local_drafts import LocalDraftStore
from sitelog.integrations.reports_api import ReportsAPIClient

logger = get_logger("drafts.controller")

UNIT_CATEGORIES = {ResourceCategory.MATERIALS, ResourceCategory.MACHINERY}

EXPORT_NOTICES: dict[ExportFormat, tuple[str, str, str]] = {
    # format: (success title, success description, failure description)
    ExportFormat.PDF: (
        "PDF Exported",
        "Your report has been exported as PDF successfully.",
        "Could not export PDF. Please try again.",
    ),
    ExportFormat.EXCEL: (
        "Excel Exported",
        "Your report has been exported as Excel successfully.",
        "Could not export Excel. Please try again.",
    ),
    ExportFormat.ZIP: (
        "Export Completed",
        "Your report has been exported as a ZIP file containing both PDF and Excel files.",
        "Could not export ZIP file. Please try again.",
    ),
}


class ReportFormController:
    def __init__(
        self,
        store: LocalDraftStore,
        remote: ReportsAPIClient,
        exporter: ExportClient | None = None,
        notifier: Notifier | None = None,
        autosave_interval: float | None = None,
    ) -> None:
        self.store = store
        self.remote = remote
        self.exporter = exporter or ExportClient()
        self.notifier = notifier or Notifier()
        self._autosave = AutosaveTimer(
            autosave_interval or settings.AUTOSAVE_INTERVAL_SECONDS,
            lambda: self.save_draft(silent=True),
        )

        self.report_date: date | None = None
        self._reset_fields()

        # UI state
        self.is_saving = False
        self.is_submitting = False
        self.is_exporting = False
        self.is_previewing = False
        self.preview: ExportResult | None = None
        self.show_preview = False

        self._state = DateChangeState.NO_DATE_SELECTED
        self._initial_load_started = False
        self._pending_day: date | None = None
        self._last_day: date | None = None
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._closed:
            raise RuntimeError("Controller has been closed")
        self._autosave.start()

    async def close(self) -> None:
        self._closed = True
        await self._autosave.stop()

    async def __aenter__(self) -> ReportFormController:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def autosave_running(self) -> bool:
        return self._autosave.running

    @property
    def state(self) -> DateChangeState:
        return self._state

    # ------------------------------------------------------------------
    # Form state
    # ------------------------------------------------------------------

    def _reset_weather(self) -> None:
        self.weather = settings.DEFAULT_WEATHER
        self.weather_period = WeatherPeriod.AM
        self.temperature = ""
        self.weather_am = ""
        self.weather_pm = ""

    def _reset_fields(self) -> None:
        self.project_name = ""
        self._reset_weather()
        self.activity_today = ""
        self.work_plan_next_day = ""
        self.management_team: list[ResourceRow] = []
        self.working_team: list[ResourceRow] = []
        self.materials: list[ResourceRow] = []
        self.machinery: list[ResourceRow] = []

    def get_report_data(self) -> ReportData:
        return ReportData(
            project_name=self.project_name,
            report_date=self.report_date,
            weather=self.weather,
            weather_period=self.weather_period,
            temperature=self.temperature,
            weather_am=self.weather_am,
            weather_pm=self.weather_pm,
            activity_today=self.activity_today,
            work_plan_next_day=self.work_plan_next_day,
            **{c.value: [r.model_copy() for r in self.rows(c)] for c in RESOURCE_CATEGORIES},
        )

    def fill_form(self, data: ReportData) -> None:
        """Install a loaded report. The selected date is left alone."""
        self.project_name = data.project_name
        self.weather = data.weather or settings.DEFAULT_WEATHER
        self.weather_period = data.weather_period
        self.temperature = data.temperature
        self.weather_am = data.weather_am
        self.weather_pm = data.weather_pm
        self.activity_today = data.activity_today
        self.work_plan_next_day = data.work_plan_next_day
        for c in RESOURCE_CATEGORIES:
            self.set_rows(c, [r.model_copy() for r in data.rows(c)])

    def clear_form(self) -> None:
        self._reset_fields()

    # ------------------------------------------------------------------
    # Resource rows
    # ------------------------------------------------------------------

    def rows(self, category: ResourceCategory | str) -> list[ResourceRow]:
        return getattr(self, ResourceCategory(category).value)

    def set_rows(self, category: ResourceCategory | str, rows: list[ResourceRow]) -> None:
        setattr(self, ResourceCategory(category).value, list(rows))

    def add_row(self, category: ResourceCategory | str) -> ResourceRow:
        category = ResourceCategory(category)
        row = new_row(with_unit=category in UNIT_CATEGORIES)
        self.set_rows(category, [*self.rows(category), row])
        return row

    def remove_row(self, category: ResourceCategory | str, row_id: str) -> bool:
        rows = self.rows(category)
        kept = [r for r in rows if r.id != row_id]
        self.set_rows(category, kept)
        return len(kept) != len(rows)

    def update_row(self, category: ResourceCategory | str, row_id: str, **fields: Any) -> ResourceRow:
        """Edit one row. ``accumulated`` is only changed when passed explicitly."""
        rows = self.rows(category)
        for idx, row in enumerate(rows):
            if row.id == row_id:
                updated = ResourceRow.model_validate({**row.model_dump(), **fields, "id": row.id})
                rows[idx] = updated
                return updated
        raise KeyError(f"No {ResourceCategory(category).value} row with id {row_id!r}")

    # ------------------------------------------------------------------
    # Date change protocol
    # ------------------------------------------------------------------

    async def set_report_date(self, value: date | datetime | str) -> None:
        day = to_calendar_day(value)
        previous = self._last_day
        if previous == day:
            return

        self._last_day = day

        if previous is None:
            self.report_date = day
            self._state = DateChangeState.FIRST_SELECTION
            if self._initial_load_started:
                return
            self._initial_load_started = True
            await self._load_first_selection(day)
            return

        self._switch_day(previous, day)

    async def _load_first_selection(self, day: date) -> None:
        data: ReportData | None = None
        source = "remote"
        # The form does not hold this day's content until the load resolves
        self._pending_day = day
        try:
            try:
                data = await self.remote.load(day, self.project_name or None)
            except RemoteError as e:
                logger.warning("Remote load for %s failed, falling back to local draft: %s", day, e)

            if data is None:
                source = "local"
                data = self._read_local(day)
        finally:
            self._pending_day = None

        if self._closed:
            logger.debug("Discarding load for %s: controller closed", day)
            return
        if self._last_day != day:
            logger.debug("Discarding load for %s: date changed to %s", day, self._last_day)
            return

        if data is None:
            logger.info("No report or draft for %s, starting empty", day)
            self.clear_form()
        else:
            logger.info("Loaded %s report for %s", source, day)
            self.fill_form(data)

    def _switch_day(self, previous: date, day: date) -> None:
        outgoing = self.get_report_data()
        if previous == self._pending_day:
            logger.info("Not saving draft for %s: its report never finished loading", previous)
        else:
            try:
                self.store.save(previous, outgoing)
            except LocalStoreError as e:
                logger.warning("Could not save draft for %s before switching: %s", previous, e)

        # The target day's own draft, if any, is overwritten by the carried totals
        for c in RESOURCE_CATEGORIES:
            self.set_rows(c, carry_forward(outgoing.rows(c)))
        self.activity_today = ""
        self.work_plan_next_day = ""
        self._reset_weather()

        self.report_date = day
        self._state = DateChangeState.DATE_SWITCH
        logger.info("Switched %s -> %s, carried forward resource totals", previous, day)

    def _read_local(self, day: date) -> ReportData | None:
        try:
            return self.store.load(day)
        except LocalStoreError as e:
            logger.warning("Local draft for %s unreadable: %s", day, e)
            return None

    # ------------------------------------------------------------------
    # Save / validate / clear
    # ------------------------------------------------------------------

    def save_draft(self, silent: bool = False) -> bool:
        if self.report_date is None:
            logger.debug("Draft not saved: no report date selected")
            if not silent:
                self.notifier.error("Save Failed", "Select a report date before saving.")
            return False
        if self.report_date == self._pending_day:
            logger.debug("Draft not saved: report for %s is still loading", self.report_date)
            if not silent:
                self.notifier.error("Save Failed", "The report is still loading. Please try again.")
            return False

        self.is_saving = True
        try:
            self.store.save(self.report_date, self.get_report_data())
        except LocalStoreError as e:
            logger.warning("Draft save for %s failed: %s", self.report_date, e)
            if not silent:
                self.notifier.error("Save Failed", "Could not save your draft. Please try again.")
            return False
        finally:
            self.is_saving = False

        if not silent:
            self.notifier.notify("Draft Saved", "Your report has been saved locally.")
        return True

    def validate_report(self) -> bool:
        error = first_validation_error(self.get_report_data())
        if error is None:
            return True
        self.notifier.error("Validation Error", error)
        return False

    def handle_clear(self) -> None:
        day = self.report_date
        self._reset_fields()
        if day is not None:
            try:
                self.store.remove(day)
            except LocalStoreError as e:
                logger.warning("Could not remove draft for %s: %s", day, e)
        self.notifier.notify("Data Cleared", "All form data has been cleared.")

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def handle_submit(self) -> bool:
        if self.is_submitting:
            logger.warning("Submit ignored: a submission is already in flight")
            return False
        if not self.validate_report():
            return False

        day = self.report_date
        self.is_submitting = True
        try:
            cleaned = clean_report(self.get_report_data())
            await self.remote.save(cleaned)
            await self.remote.submit(cleaned.project_name, day)
        except RemoteError as e:
            logger.error("Submission for %s failed: %s", day, e)
            if not self._closed:
                self.notifier.error(
                    "Submission Failed", str(e) or "Could not submit report. Please try again."
                )
            return False
        finally:
            self.is_submitting = False

        # Remote copy is canonical now; local cache work below is best-effort
        try:
            self.store.remove(day)
        except LocalStoreError as e:
            logger.warning("Could not remove submitted draft for %s: %s", day, e)

        tomorrow = next_day(day)
        try:
            self.store.save(tomorrow, carry_forward_report(cleaned, tomorrow))
        except LocalStoreError as e:
            logger.warning("Could not seed carry-forward draft for %s: %s", tomorrow, e)

        logger.info("Submitted %s for %s; seeded draft for %s", cleaned.project_name, day, tomorrow)
        if not self._closed:
            self.notifier.notify(
                "Report Submitted",
                "Your report has been submitted successfully. "
                "Tomorrow's report is ready with carried-forward totals.",
            )
        return True

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_snapshot(self) -> ExportSnapshot:
        cleaned = clean_report(self.get_report_data())
        return ExportSnapshot.model_validate(cleaned.model_dump())

    async def handle_export(self, fmt: ExportFormat | str) -> ExportResult | None:
        fmt = ExportFormat(fmt)
        if self.is_exporting:
            return None
        if not self.validate_report():
            return None

        success_title, success_text, failure_text = EXPORT_NOTICES[fmt]
        self.is_exporting = True
        try:
            result = await self.exporter.dispatch(self.export_snapshot(), fmt)
        except ExportError as e:
            logger.error("%s export failed: %s", fmt.value, e)
            self.notifier.error("Export Failed", failure_text)
            return None
        finally:
            self.is_exporting = False

        self.notifier.notify(success_title, success_text)
        return result

    async def handle_preview(self) -> ExportResult | None:
        if self.is_previewing:
            return None
        if not self.validate_report():
            return None

        self.is_previewing = True
        try:
            result = await self.exporter.dispatch(self.export_snapshot(), ExportFormat.PDF, preview=True)
        except ExportError as e:
            logger.error("Preview failed: %s", e)
            self.notifier.error("Preview Failed", "Could not generate preview. Please try again.")
            return None
        finally:
            self.is_previewing = False

        self.preview = result
        self.show_preview = True
        return result
