from datetime import date

import pytest
from factories import make_contract, make_proposal, make_slot, make_user
from httpx import AsyncClient

from plantao.domain.dashboard.service import duration_hours


@pytest.mark.parametrize(
    "label,hours",
    [("12h", 12), ("6 horas", 6), ("24", 24), ("plantão noturno", 0), ("", 0)],
)
def test_duration_hours_uses_the_leading_integer(label, hours):
    assert duration_hours(label) == hours


@pytest.mark.asyncio
async def test_dashboard_summary(client: AsyncClient, db, login_as) -> None:
    doctor = make_user(db)
    login_as(doctor)

    make_slot(db, doctor, date(2025, 6, 10), "08:00", "12:00")
    make_slot(db, doctor, date(2025, 6, 11), "08:00", "12:00")

    for day in (1, 5, 9, 20):
        make_proposal(db, doctor, date=date(2025, 7, day))
    make_proposal(db, doctor, date=date(2025, 7, 30), status="rejected")

    make_contract(db, doctor, date=date(2025, 8, 3))
    make_contract(db, doctor, date=date(2025, 8, 1))
    make_contract(db, doctor, date=date(2025, 8, 20))
    make_contract(db, doctor, date=date(2025, 5, 2), status="completed", duration="12h")
    make_contract(db, doctor, date=date(2025, 5, 20), status="completed", duration="6h")
    make_contract(db, doctor, date=date(2025, 4, 11), status="completed", duration="24h")
    make_contract(db, doctor, date=date(2025, 4, 12), status="canceled", duration="12h")

    response = await client.get("/dashboard")

    assert response.status_code == 200
    data = response.json()
    assert data["availableDays"] == 2
    assert data["newProposals"] == 4
    assert data["activeContracts"] == 3
    assert data["hoursWorked"] == 42
    assert [c["date"] for c in data["upcomingShifts"]] == ["2025-08-01", "2025-08-03"]
    assert [p["date"] for p in data["recentProposals"]] == [
        "2025-07-20",
        "2025-07-09",
        "2025-07-05",
    ]
    assert data["monthlyHours"] == [
        {"name": "Apr 2025", "hours": 24},
        {"name": "May 2025", "hours": 18},
    ]


@pytest.mark.asyncio
async def test_empty_dashboard(client: AsyncClient, db, login_as) -> None:
    login_as(make_user(db))

    data = (await client.get("/dashboard")).json()

    assert data["availableDays"] == 0
    assert data["hoursWorked"] == 0
    assert data["upcomingShifts"] == []
    assert data["monthlyHours"] == []
