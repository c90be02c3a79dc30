import asyncio
from collections.abc import AsyncGenerator
from datetime import date
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sitelog.common.exceptions import RemoteError
from sitelog.core.drafts.controller import ReportFormController
from sitelog.core.notifications.service import Notifier
from sitelog.core.reporting.dates import day_key
from sitelog.core.reporting.schemas import ReportData, ResourceRow
from sitelog.db.base import Base
from sitelog.db.models import *  # noqa: F401,F403 - ensure all models loaded
from sitelog.integrations.exporter import ExportClient
from sitelog.integrations.local_drafts import MemoryDraftStore
from sitelog.integrations.reports_api import ReportsAPIClient


def make_row(description: str = "", prev: float = 0, today: float = 0, accumulated: float = 0, **kw) -> ResourceRow:
    return ResourceRow(description=description, prev=prev, today=today, accumulated=accumulated, **kw)


class FakeReportsAPI(ReportsAPIClient):
    """In-memory stand-in for the report server, with failure switches."""

    def __init__(self) -> None:
        super().__init__(base_url="http://reports.test/api")
        self.reports: dict[str, ReportData] = {}
        self.submitted: list[tuple[str, str]] = []
        self.calls: list[tuple[str, Any]] = []
        self.load_error: RemoteError | None = None
        self.save_error: RemoteError | None = None
        self.submit_error: RemoteError | None = None
        self.load_gate: asyncio.Event | None = None

    async def load(self, day: date | str, project_name: str | None = None) -> ReportData | None:
        key = day_key(day)
        self.calls.append(("load", key))
        if self.load_gate is not None:
            await self.load_gate.wait()
        if self.load_error:
            raise self.load_error
        return self.reports.get(key)

    async def save(self, data: ReportData) -> dict[str, Any]:
        self.calls.append(("save", data.report_date))
        if self.save_error:
            raise self.save_error
        self.reports[data.report_date] = data
        return {"message": "Report saved", "status": "saved"}

    async def submit(self, project_name: str, day: date | str) -> dict[str, Any]:
        key = day_key(day)
        self.calls.append(("submit", key))
        if self.submit_error:
            raise self.submit_error
        self.submitted.append((project_name, key))
        return {"message": "Report submitted", "status": "submitted"}

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


# ---------- Draft engine fixtures ----------


@pytest.fixture
def store():
    return MemoryDraftStore()


@pytest.fixture
def remote():
    return FakeReportsAPI()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def exporter():
    return ExportClient(base_url="mock://exporter")


@pytest.fixture
async def controller(store, remote, exporter, notifier):
    form = ReportFormController(store, remote, exporter, notifier, autosave_interval=30)
    yield form
    await form.close()


# ---------- Server of record fixtures ----------


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def asgi_app(db_session):
    from sitelog.api.deps import get_db
    from sitelog.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(asgi_app):
    transport = ASGITransport(app=asgi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def reports_api(asgi_app):
    """Real HTTP client wired to the in-process server of record."""
    return ReportsAPIClient(base_url="http://test/api", transport=ASGITransport(app=asgi_app))
