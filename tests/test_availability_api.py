from datetime import date

import pytest
from factories import make_slot, make_user
from httpx import AsyncClient

from plantao.models import TimeSlot


@pytest.fixture
def doctor(db, login_as):
    user = make_user(db)
    login_as(user)
    return user


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient) -> None:
    response = await client.get("/availability")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_hospital_accounts_cannot_declare_availability(
    client: AsyncClient, db, login_as
) -> None:
    login_as(make_user(db, "hospital-1", user_type="hospital"))

    response = await client.get("/availability")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_conflict_scenario_across_days(client: AsyncClient, doctor) -> None:
    """08-12 accepted, 10-14 conflicts, 12-16 fits, next day is independent."""
    payload = {"startTime": "08:00", "endTime": "12:00", "specialties": ["Cardiologia"]}

    first = await client.post("/availability", json={**payload, "dates": ["2025-06-10"]})
    assert first.status_code == 200
    assert len(first.json()["created"]) == 1

    overlap = await client.post(
        "/availability",
        json={**payload, "dates": ["2025-06-10"], "startTime": "10:00", "endTime": "14:00"},
    )
    assert overlap.json()["created"] == []
    assert overlap.json()["skipped"][0]["date"] == "2025-06-10"

    adjacent = await client.post(
        "/availability",
        json={**payload, "dates": ["2025-06-10"], "startTime": "12:00", "endTime": "16:00"},
    )
    assert len(adjacent.json()["created"]) == 1

    other_day = await client.post(
        "/availability",
        json={**payload, "dates": ["2025-06-11"], "startTime": "10:00", "endTime": "14:00"},
    )
    assert len(other_day.json()["created"]) == 1

    slots = (await client.get("/availability")).json()
    assert [(s["date"], s["startTime"]) for s in slots] == [
        ("2025-06-10", "08:00"),
        ("2025-06-10", "12:00"),
        ("2025-06-11", "10:00"),
    ]


@pytest.mark.asyncio
async def test_batch_skips_only_conflicting_dates(client: AsyncClient, db, doctor) -> None:
    make_slot(db, doctor, date(2025, 6, 11), "07:00", "19:00")

    response = await client.post(
        "/availability",
        json={
            "dates": ["2025-06-12", "2025-06-10", "2025-06-11", "2025-06-10"],
            "startTime": "8:00",
            "endTime": "12:00",
            "specialties": ["Cardiologia", "Clínica Médica", "Cardiologia"],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert [s["date"] for s in data["created"]] == ["2025-06-10", "2025-06-12"]
    assert data["created"][0]["startTime"] == "08:00"
    assert data["created"][0]["specialties"] == ["Cardiologia", "Clínica Médica"]
    assert [s["date"] for s in data["skipped"]] == ["2025-06-11"]
    assert data["message"] == "2 time slot(s) added, 1 skipped"
    assert db.query(TimeSlot).count() == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,detail",
    [
        ({"dates": []}, "at least one date"),
        ({"specialties": []}, "at least one specialty"),
        ({"startTime": "14:00", "endTime": "08:00"}, "before end"),
        ({"startTime": "25:00"}, "Invalid time"),
    ],
)
async def test_invalid_batches_are_rejected_before_any_write(
    client: AsyncClient, db, doctor, overrides, detail
) -> None:
    payload = {
        "dates": ["2025-06-10"],
        "startTime": "08:00",
        "endTime": "12:00",
        "specialties": ["Pediatria"],
        **overrides,
    }

    response = await client.post("/availability", json=payload)

    assert response.status_code == 400
    assert detail in response.json()["detail"]
    assert db.query(TimeSlot).count() == 0


@pytest.mark.asyncio
async def test_update_ignores_the_slot_being_edited(client: AsyncClient, db, doctor) -> None:
    slot = make_slot(db, doctor, date(2025, 6, 10), "08:00", "12:00")

    response = await client.put(
        f"/availability/{slot.id}", json={"startTime": "09:00", "endTime": "13:00"}
    )

    assert response.status_code == 200
    assert response.json()["startTime"] == "09:00"
    assert response.json()["endTime"] == "13:00"


@pytest.mark.asyncio
async def test_update_into_another_slot_conflicts(client: AsyncClient, db, doctor) -> None:
    make_slot(db, doctor, date(2025, 6, 10), "08:00", "12:00")
    evening = make_slot(db, doctor, date(2025, 6, 10), "18:00", "22:00")

    response = await client.put(f"/availability/{evening.id}", json={"startTime": "11:00"})

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_doctors_cannot_touch_each_others_slots(client: AsyncClient, db, doctor) -> None:
    other = make_user(db, "doctor-2")
    slot = make_slot(db, other, date(2025, 6, 10), "08:00", "12:00")

    assert (await client.delete(f"/availability/{slot.id}")).status_code == 404
    assert (await client.put(f"/availability/{slot.id}", json={"endTime": "13:00"})).status_code == 404
    assert (await client.get("/availability")).json() == []


@pytest.mark.asyncio
async def test_delete_slot(client: AsyncClient, db, doctor) -> None:
    slot = make_slot(db, doctor, date(2025, 6, 10), "08:00", "12:00")

    response = await client.delete(f"/availability/{slot.id}")

    assert response.status_code == 200
    assert db.query(TimeSlot).count() == 0


@pytest.mark.asyncio
async def test_specialty_catalogue(client: AsyncClient, doctor) -> None:
    response = await client.get("/availability/specialties")

    assert response.status_code == 200
    assert "Cardiologia" in response.json()


@pytest.mark.asyncio
async def test_batch_is_not_saved_when_the_commit_fails(
    client: AsyncClient, db, doctor, failing_commit
) -> None:
    failing_commit(TimeSlot)

    response = await client.post(
        "/availability",
        json={
            "dates": ["2025-06-10", "2025-06-11", "2025-06-12"],
            "startTime": "08:00",
            "endTime": "12:00",
            "specialties": ["Pediatria"],
        },
    )

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to save availability"
    db.expire_all()
    assert db.query(TimeSlot).count() == 0
