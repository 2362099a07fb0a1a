import pytest
from factories import JPEG_BYTES, PDF_BYTES, make_user
from httpx import AsyncClient

from plantao.domain.profile.documents import DOCUMENT_CATALOGUE, DocumentGroup
from plantao.models import DoctorProfile

REQUIRED = [
    *DOCUMENT_CATALOGUE[DocumentGroup.PERSONAL],
    *DOCUMENT_CATALOGUE[DocumentGroup.PROFESSIONAL],
]


@pytest.fixture
def doctor(db, login_as):
    user = make_user(db, full_name=None)
    login_as(user)
    return user


async def upload(client: AsyncClient, doc_type: str, content=PDF_BYTES, content_type="application/pdf"):
    return await client.post(
        f"/profile/documents/{doc_type}",
        files={"file": (f"{doc_type}.pdf", content, content_type)},
    )


@pytest.mark.asyncio
async def test_profile_is_null_until_first_write(client: AsyncClient, doctor) -> None:
    response = await client.get("/profile")

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_personal_section_is_validated_and_stored(client: AsyncClient, db, doctor) -> None:
    response = await client.put(
        "/profile/personal",
        json={
            "name": "Ana Souza",
            "email": "Ana@Example.com",
            "phone": "(11) 98765-4321",
            "cpf": "529.982.247-25",
            "birthdate": "1988-03-14",
            "gender": "female",
            "address": "Rua Harmonia, 45 - São Paulo",
        },
    )

    assert response.status_code == 200
    personal = response.json()["personal"]
    assert personal["cpf"] == "52998224725"
    assert personal["phone"] == "+5511987654321"
    assert personal["email"] == "ana@example.com"
    assert personal["birthdate"] == "1988-03-14"

    profile = (await client.get("/profile")).json()
    assert profile["personal"]["name"] == "Ana Souza"
    assert profile["professional"] == {}


@pytest.mark.asyncio
async def test_invalid_cpf_is_rejected(client: AsyncClient, db, doctor) -> None:
    response = await client.put("/profile/personal", json={"name": "Ana", "cpf": "111.111.111-11"})

    assert response.status_code == 422
    assert db.query(DoctorProfile).count() == 0


@pytest.mark.asyncio
async def test_sections_are_updated_independently(client: AsyncClient, doctor) -> None:
    await client.put(
        "/profile/professional",
        json={
            "crm": "123456-SP",
            "graduation": "USP",
            "graduationYear": 2012,
            "specialties": ["Cardiologia"],
            "serviceType": "plantonista",
            "experience": 10,
            "bio": "Cardiologista com foco em emergência",
        },
    )
    response = await client.put(
        "/profile/financial",
        json={"hourlyRate": 150.0, "bank": "001", "agency": "1234", "account": "56789-0", "pix": "ana@pix"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["professional"]["crm"] == "123456-SP"
    assert body["financial"]["hourlyRate"] == 150.0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path,payload",
    [
        ("/profile/professional", {"experience": -1}),
        ("/profile/financial", {"hourlyRate": -10}),
    ],
)
async def test_negative_numbers_are_rejected(client: AsyncClient, doctor, path, payload) -> None:
    response = await client.put(path, json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_photo_upload_returns_signed_url(client: AsyncClient, doctor, store) -> None:
    response = await client.post(
        "/profile/photo", files={"file": ("me.jpg", JPEG_BYTES, "image/jpeg")}
    )

    assert response.status_code == 200
    key = response.json()["key"]
    assert key.startswith(f"profile-photos/{doctor.firebase_uid}/")
    assert response.json()["url"].startswith("https://r2.test/")
    assert (await client.get("/profile")).json()["photoUrl"].startswith("https://r2.test/")


@pytest.mark.asyncio
async def test_photo_must_be_an_image(client: AsyncClient, doctor, store) -> None:
    response = await client.post(
        "/profile/photo", files={"file": ("me.pdf", PDF_BYTES, "application/pdf")}
    )

    assert response.status_code == 400
    assert store.objects == {}


@pytest.mark.asyncio
async def test_document_upload_checks_type_and_size(client: AsyncClient, doctor, store) -> None:
    too_big = b"0" * (5 * 1024 * 1024 + 1)

    assert (await upload(client, "rg", b"text", "text/plain")).status_code == 400
    assert (await upload(client, "rg", too_big)).status_code == 400
    assert (await upload(client, "passport")).status_code == 400
    assert store.objects == {}

    accepted = await upload(client, "rg")
    assert accepted.status_code == 200
    assert accepted.json()["key"].startswith(f"documents/{doctor.firebase_uid}/rg/")


@pytest.mark.asyncio
async def test_submit_lists_missing_required_documents(client: AsyncClient, doctor) -> None:
    await upload(client, "rg")

    response = await client.post("/profile/documents/submit")

    assert response.status_code == 400
    assert "proof_of_residence" in response.json()["detail"]
    assert "graduation_certificate" in response.json()["detail"]
    assert "rqe" not in response.json()["detail"]


@pytest.mark.asyncio
async def test_submit_succeeds_without_optional_specialist_documents(
    client: AsyncClient, doctor
) -> None:
    for doc_type in REQUIRED:
        assert (await upload(client, doc_type)).status_code == 200

    status = (await client.get("/profile/documents/status")).json()
    assert status["complete"] is True
    assert status["missing"] == {}

    response = await client.post("/profile/documents/submit")

    assert response.status_code == 200
    assert response.json()["submittedAt"] is not None


@pytest.mark.asyncio
async def test_document_status_groups_missing_documents(client: AsyncClient, doctor) -> None:
    await upload(client, "crm")

    status = (await client.get("/profile/documents/status")).json()

    assert status["uploaded"] == ["crm"]
    assert status["complete"] is False
    assert "crm" not in status["missing"]["professional"]
    assert status["missing"]["personal"] == ["rg", "cpf", "photo", "proof_of_residence"]
