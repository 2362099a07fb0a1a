from datetime import date

import pytest
from factories import make_proposal, make_user
from httpx import AsyncClient

from plantao.domain.proposals import service as proposal_service
from plantao.models import Contract, Proposal


@pytest.fixture
def doctor(db, login_as):
    user = make_user(db)
    login_as(user)
    return user


@pytest.mark.asyncio
async def test_list_filters_by_status_and_orders_by_date(client: AsyncClient, db, doctor) -> None:
    make_proposal(db, doctor, date=date(2025, 6, 20))
    make_proposal(db, doctor, date=date(2025, 6, 5))
    make_proposal(db, doctor, date=date(2025, 6, 1), status="rejected")
    make_proposal(db, make_user(db, "doctor-2"), date=date(2025, 6, 2))

    everything = (await client.get("/proposals")).json()
    pending = (await client.get("/proposals", params={"status": "pending"})).json()

    assert [p["date"] for p in everything] == ["2025-06-01", "2025-06-05", "2025-06-20"]
    assert [p["date"] for p in pending] == ["2025-06-05", "2025-06-20"]
    assert pending[0]["hospitalProfile"]["name"] == "Hospital São Lucas"


@pytest.mark.asyncio
async def test_unknown_status_filter_is_rejected(client: AsyncClient, doctor) -> None:
    response = await client.get("/proposals", params={"status": "archived"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_matching_returns_open_offers_of_the_specialty(
    client: AsyncClient, db, doctor
) -> None:
    open_offer = make_proposal(db, None)
    mine = make_proposal(db, doctor)
    make_proposal(db, None, specialty="Pediatria")
    make_proposal(db, make_user(db, "doctor-2"))
    make_proposal(db, None, status="accepted")

    response = await client.get("/proposals/matching", params={"specialty": "Cardiologia"})

    assert response.status_code == 200
    assert sorted(p["id"] for p in response.json()) == sorted([open_offer.id, mine.id])


@pytest.mark.asyncio
async def test_other_doctors_proposals_are_not_found(client: AsyncClient, db, doctor) -> None:
    theirs = make_proposal(db, make_user(db, "doctor-2"))

    assert (await client.get(f"/proposals/{theirs.id}")).status_code == 404
    assert (await client.post(f"/proposals/{theirs.id}/accept")).status_code == 404


@pytest.mark.asyncio
async def test_accept_creates_contract_with_copied_shift_fields(
    client: AsyncClient, db, doctor
) -> None:
    proposal = make_proposal(db, doctor)

    response = await client.post(f"/proposals/{proposal.id}/accept")

    assert response.status_code == 200
    contract = response.json()
    assert contract["proposalId"] == proposal.id
    assert contract["status"] == "upcoming"
    assert contract["attendance"] == "pending"
    assert contract["hospital"] == "Hospital São Lucas"
    assert contract["date"] == "2025-06-10"
    assert contract["duration"] == "12h"
    assert contract["value"] == 1800.0

    db.expire_all()
    assert db.get(Proposal, proposal.id).status == "accepted"
    assert db.query(Contract).count() == 1


@pytest.mark.asyncio
async def test_accepting_an_open_offer_assigns_it(client: AsyncClient, db, doctor) -> None:
    proposal = make_proposal(db, None)

    response = await client.post(f"/proposals/{proposal.id}/accept")

    assert response.status_code == 200
    db.expire_all()
    assert db.get(Proposal, proposal.id).doctor_id == doctor.id


@pytest.mark.asyncio
async def test_second_accept_is_a_conflict(client: AsyncClient, db, doctor) -> None:
    proposal = make_proposal(db, doctor)

    first = await client.post(f"/proposals/{proposal.id}/accept")
    second = await client.post(f"/proposals/{proposal.id}/accept")

    assert first.status_code == 200
    assert second.status_code == 409
    assert db.query(Contract).count() == 1


@pytest.mark.asyncio
async def test_reject_then_accept_is_a_conflict(client: AsyncClient, db, doctor) -> None:
    proposal = make_proposal(db, doctor)

    rejected = await client.post(f"/proposals/{proposal.id}/reject")
    accepted = await client.post(f"/proposals/{proposal.id}/accept")

    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"
    assert accepted.status_code == 409
    assert db.query(Contract).count() == 0


@pytest.mark.asyncio
async def test_rejected_open_offer_disappears_from_matching(
    client: AsyncClient, db, doctor
) -> None:
    proposal = make_proposal(db, None)

    await client.post(f"/proposals/{proposal.id}/reject")
    matching = await client.get("/proposals/matching", params={"specialty": "Cardiologia"})

    assert matching.json() == []


@pytest.mark.asyncio
async def test_hospital_publishes_a_proposal(client: AsyncClient, db, login_as) -> None:
    doctor = make_user(db)
    hospital = make_user(db, "hospital-1", user_type="hospital", full_name="Hospital Santa Clara")
    login_as(hospital)

    response = await client.post(
        "/proposals",
        json={
            "doctorId": doctor.id,
            "specialty": "Cardiologia",
            "date": "2025-07-01",
            "time": "7:00",
            "duration": "12h",
            "location": "Rua Augusta, 200",
            "latitude": -23.55,
            "longitude": -46.65,
            "value": 2000,
            "hospitalProfile": {"name": "Hospital Santa Clara", "specialties": ["Cardiologia"]},
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["hospital"] == "Hospital Santa Clara"
    assert data["hospitalId"] == "hospital-1"
    assert data["time"] == "07:00"
    assert data["doctorId"] == doctor.id


@pytest.mark.asyncio
async def test_doctors_cannot_publish_proposals(client: AsyncClient, doctor) -> None:
    response = await client.post(
        "/proposals",
        json={
            "specialty": "Cardiologia",
            "date": "2025-07-01",
            "time": "07:00",
            "duration": "12h",
            "location": "Rua Augusta, 200",
            "value": 2000,
        },
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_accept_keeps_proposal_pending_when_the_commit_fails(
    client: AsyncClient, db, doctor, failing_commit
) -> None:
    proposal = make_proposal(db, doctor)
    failing_commit(Contract)

    response = await client.post(f"/proposals/{proposal.id}/accept")

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to accept proposal"
    db.expire_all()
    assert db.get(Proposal, proposal.id).status == "pending"
    assert db.query(Contract).count() == 0


@pytest.mark.asyncio
async def test_accept_on_a_stale_read_loses_the_race(
    client: AsyncClient, db, doctor, monkeypatch
) -> None:
    # Another request rejected it after this one read it as pending
    proposal = make_proposal(db, doctor, status="rejected")
    monkeypatch.setattr(
        proposal_service, "ensure_proposal_transition", lambda current, target: None
    )

    response = await client.post(f"/proposals/{proposal.id}/accept")

    assert response.status_code == 409
    assert response.json()["detail"] == "Proposal is no longer pending"
    db.expire_all()
    assert db.get(Proposal, proposal.id).status == "rejected"
    assert db.query(Contract).count() == 0


@pytest.mark.asyncio
async def test_reject_on_a_stale_read_loses_the_race(
    client: AsyncClient, db, doctor, monkeypatch
) -> None:
    proposal = make_proposal(db, doctor, status="accepted")
    monkeypatch.setattr(
        proposal_service, "ensure_proposal_transition", lambda current, target: None
    )

    response = await client.post(f"/proposals/{proposal.id}/reject")

    assert response.status_code == 409
    db.expire_all()
    assert db.get(Proposal, proposal.id).status == "accepted"


@pytest.mark.asyncio
async def test_published_hospital_profile_is_escaped(client: AsyncClient, db, login_as) -> None:
    login_as(make_user(db, "hospital-1", user_type="hospital"))

    response = await client.post(
        "/proposals",
        json={
            "specialty": "Pediatria",
            "date": "2025-07-02",
            "time": "19:00",
            "duration": "12h",
            "location": "Rua Augusta, 200",
            "value": 1500,
            "hospitalProfile": {
                "name": "<b>Santa Clara</b>",
                "description": "<script>alert(1)</script>",
                "specialties": ["<i>Pediatria</i>"],
            },
        },
    )

    assert response.status_code == 201
    profile = response.json()["hospitalProfile"]
    assert profile["name"] == "&lt;b&gt;Santa Clara&lt;/b&gt;"
    assert "<script>" not in profile["description"]
    assert profile["specialties"] == ["&lt;i&gt;Pediatria&lt;/i&gt;"]


@pytest.mark.asyncio
async def test_blank_duration_is_rejected(client: AsyncClient, db, login_as) -> None:
    login_as(make_user(db, "hospital-1", user_type="hospital"))

    response = await client.post(
        "/proposals",
        json={
            "specialty": "Pediatria",
            "date": "2025-07-02",
            "time": "19:00",
            "duration": "   ",
            "location": "Rua Augusta, 200",
            "value": 1500,
        },
    )

    assert response.status_code == 400
    assert "duration" in response.json()["detail"]
    assert db.query(Proposal).count() == 0
