import pytest


def _payload(**overrides):
    body = {
        "projectName": "Site A",
        "reportDate": "2024-01-10",
        "weather": "Cloudy",
        "weatherPeriod": "PM",
        "temperature": "27",
        "activityToday": "Formwork for slab",
        "workPlanNextDay": "Pour slab",
        "managementTeam": [
            {"id": "pm-1", "description": "PM", "unit": "", "prev": 2, "today": 1, "accumulated": 3}
        ],
        "workingTeam": [],
        "materials": [],
        "machinery": [],
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_get_missing_report_is_404(client):
    response = await client.get("/api/daily-reports/date/2024-01-10")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_save_then_get_by_date(client):
    save = await client.post("/api/daily-reports/save", json=_payload())
    assert save.status_code == 200
    assert save.json()["status"] == "saved"

    response = await client.get("/api/daily-reports/date/2024-01-10", params={"projectName": "Site A"})
    assert response.status_code == 200
    data = response.json()
    assert data["projectName"] == "Site A"
    assert data["reportDate"] == "2024-01-10"
    assert data["weatherPeriod"] == "PM"
    assert data["managementTeam"][0]["accumulated"] == 3


@pytest.mark.asyncio
async def test_save_overwrites_same_project_and_day(client):
    first = await client.post("/api/daily-reports/save", json=_payload())
    second = await client.post(
        "/api/daily-reports/save", json=_payload(activityToday="Revised activity")
    )
    assert first.json()["id"] == second.json()["id"]

    response = await client.get("/api/daily-reports/date/2024-01-10")
    assert response.json()["activityToday"] == "Revised activity"


@pytest.mark.asyncio
async def test_timestamp_report_date_is_stored_as_calendar_day(client):
    await client.post("/api/daily-reports/save", json=_payload(reportDate="2024-01-10T09:30:00"))

    response = await client.get("/api/daily-reports/date/2024-01-10")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_save_requires_project_and_date(client):
    no_project = await client.post("/api/daily-reports/save", json=_payload(projectName="  "))
    assert no_project.status_code == 400

    no_date = await client.post("/api/daily-reports/save", json=_payload(reportDate=None))
    assert no_date.status_code == 400


@pytest.mark.asyncio
async def test_save_rejects_negative_counters(client):
    bad_row = {"id": "x", "description": "PM", "prev": -1, "today": 0, "accumulated": 0}
    response = await client.post("/api/daily-reports/save", json=_payload(managementTeam=[bad_row]))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_submit_flow(client):
    await client.post("/api/daily-reports/save", json=_payload())

    response = await client.post(
        "/api/daily-reports/submit", json={"projectName": "Site A", "date": "2024-01-10"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "submitted"
    assert data["submittedAt"] is not None

    again = await client.post(
        "/api/daily-reports/submit", json={"projectName": "Site A", "date": "2024-01-10"}
    )
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_submit_unknown_report_is_404(client):
    response = await client.post(
        "/api/daily-reports/submit", json={"projectName": "Nowhere", "date": "2024-01-10"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_reports_by_project(client):
    await client.post("/api/daily-reports/save", json=_payload(reportDate="2024-01-10"))
    await client.post("/api/daily-reports/save", json=_payload(reportDate="2024-01-11"))
    await client.post("/api/daily-reports/save", json=_payload(projectName="Site B"))

    response = await client.get("/api/daily-reports", params={"projectName": "Site A", "page_size": 1})
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["total_pages"] == 2
    assert data["items"][0]["reportDate"] == "2024-01-11"
    assert data["items"][0]["projectName"] == "Site A"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["service"] == "sitelog"
    assert "X-Request-Duration-Ms" in response.headers
