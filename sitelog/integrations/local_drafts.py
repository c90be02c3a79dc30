"""Local draft store.

Date-keyed cache of unsubmitted reports, the server-side counterpart of the
browser's localStorage. Values are stored as JSON strings under
``<prefix>YYYY-MM-DD`` keys. Missing keys never raise and repeated saves
overwrite silently.
"""

from __future__ import annotations

import json
import os
import tempfile
from abc import abstractmethod
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from sitelog.common.exceptions import LocalStoreError
from sitelog.config import settings
from sitelog.core.reporting.dates import day_key, to_calendar_day
from sitelog.core.reporting.schemas import ReportData
from sitelog.integrations.base import BaseIntegration


class LocalDraftStore(BaseIntegration):
    def __init__(self, name: str, prefix: str | None = None) -> None:
        super().__init__(name)
        self.prefix = settings.DRAFT_KEY_PREFIX if prefix is None else prefix

    # -- backend primitives ---------------------------------------------

    @abstractmethod
    def _get(self, key: str) -> str | None: ...

    @abstractmethod
    def _set(self, key: str, raw: str) -> None: ...

    @abstractmethod
    def _delete(self, key: str) -> None: ...

    @abstractmethod
    def _keys(self) -> list[str]: ...

    # -- public API -------------------------------------------------------

    def key_for(self, day: date | str) -> str:
        return f"{self.prefix}{day_key(day)}"

    def save(self, day: date | str, data: ReportData) -> None:
        key = self.key_for(day)
        self._set(key, data.model_dump_json(by_alias=True))
        self.logger.debug("Draft saved | key=%s", key)

    def load(self, day: date | str) -> ReportData | None:
        key = self.key_for(day)
        raw = self._get(key)
        if raw is None:
            return None
        try:
            return ReportData.model_validate_json(raw)
        except ValidationError as e:
            raise LocalStoreError(f"Draft '{key}' is unreadable: {e.error_count()} invalid field(s)") from e

    def remove(self, day: date | str) -> None:
        key = self.key_for(day)
        self._delete(key)
        self.logger.debug("Draft removed | key=%s", key)

    def days(self) -> list[date]:
        found = []
        for key in self._keys():
            if not key.startswith(self.prefix):
                continue
            try:
                found.append(to_calendar_day(key[len(self.prefix):]))
            except ValueError:
                self.logger.warning("Ignoring malformed draft key: %s", key)
        return sorted(found)


class MemoryDraftStore(LocalDraftStore):
    """Process-local store; used for tests and for ephemeral sessions."""

    def __init__(self, prefix: str | None = None) -> None:
        super().__init__("drafts.memory", prefix)
        self._items: dict[str, str] = {}

    async def health_check(self) -> bool:
        return True

    def _get(self, key: str) -> str | None:
        return self._items.get(key)

    def _set(self, key: str, raw: str) -> None:
        self._items[key] = raw

    def _delete(self, key: str) -> None:
        self._items.pop(key, None)

    def _keys(self) -> list[str]:
        return list(self._items)


class FileDraftStore(LocalDraftStore):
    """All drafts in one JSON document, replaced atomically on every write."""

    FILENAME = "drafts.json"

    def __init__(self, directory: str | Path | None = None, prefix: str | None = None) -> None:
        super().__init__("drafts.file", prefix)
        self.directory = Path(directory or settings.DRAFT_STORAGE_PATH)
        self.path = self.directory / self.FILENAME

    async def health_check(self) -> bool:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._read_document()
            return True
        except (OSError, LocalStoreError) as e:
            self.logger.error("Draft store health check failed: %s", e)
            return False

    def _read_document(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise LocalStoreError(f"Could not read {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise LocalStoreError(f"Could not read {self.path}: expected a JSON object")
        return document

    def _write_document(self, document: dict[str, str]) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".drafts-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, indent=2, sort_keys=True)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise LocalStoreError(f"Could not write {self.path}: {e}") from e

    def _get(self, key: str) -> str | None:
        return self._read_document().get(key)

    def _set(self, key: str, raw: str) -> None:
        document = self._read_document()
        document[key] = raw
        self._write_document(document)

    def _delete(self, key: str) -> None:
        document = self._read_document()
        if document.pop(key, None) is not None:
            self._write_document(document)

    def _keys(self) -> list[str]:
        return list(self._read_document())
