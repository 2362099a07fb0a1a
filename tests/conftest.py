import os

# Must be set before the application modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"
os.environ.setdefault("FIREBASE_PROJECT_ID", "plantao-test")
os.environ["CHECKIN_RADIUS_METERS"] = "500"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import Depends  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from plantao.auth import get_current_user  # noqa: E402
from plantao.database import Base, SessionLocal, engine, get_db  # noqa: E402
from plantao.main import app as fastapi_app  # noqa: E402
from plantao.models import User  # noqa: E402
from plantao.services.identity_service import (  # noqa: E402
    IdentityProviderError,
    IdentitySession,
    get_identity_service,
)
from plantao.storage import StorageError, get_object_store  # noqa: E402


class FakeObjectStore:
    """In-memory stand-in for the R2 bucket"""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail = False

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageError(f"Upload failed for {key}")
        self.objects[key] = (data, content_type)
        return key

    def get_url(self, key: str, expiration: int = 3600) -> str:
        return f"https://r2.test/{key}?expires={expiration}"


class FakeIdentityService:
    """Records calls instead of talking to Firebase"""

    def __init__(self):
        self.accounts: dict[str, dict] = {}
        self.revoked: list[str] = []
        self.reset_requests: list[str] = []
        self.deleted: list[str] = []

    def create_account(self, email: str, password: str, display_name: str) -> str:
        if any(a["email"] == email for a in self.accounts.values()):
            raise IdentityProviderError("This email is already registered", 409)
        uid = f"uid-{len(self.accounts) + 1}"
        self.accounts[uid] = {"email": email, "password": password, "name": display_name}
        return uid

    def delete_account(self, uid: str) -> None:
        self.deleted.append(uid)
        self.accounts.pop(uid, None)

    def sign_out(self, uid: str) -> None:
        self.revoked.append(uid)

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        for uid, account in self.accounts.items():
            if account["email"] == email and account["password"] == password:
                return IdentitySession(
                    uid=uid, id_token=f"id-{uid}", refresh_token=f"refresh-{uid}", expires_in=3600
                )
        raise IdentityProviderError("Invalid email or password", 401)

    async def send_password_reset(self, email: str) -> None:
        self.reset_requests.append(email)


@pytest.fixture(autouse=True)
def reset_db():
    """Fresh schema for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store():
    return FakeObjectStore()


@pytest.fixture
def identity():
    return FakeIdentityService()


@pytest.fixture
def app(store, identity):
    fastapi_app.dependency_overrides[get_object_store] = lambda: store
    fastapi_app.dependency_overrides[get_identity_service] = lambda: identity
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def login_as(app):
    """Authenticate subsequent requests as ``user``, skipping token verification"""

    def _login(user: User):
        user_id = user.id

        def current_user(session: Session = Depends(get_db)) -> User:
            return session.get(User, user_id)

        app.dependency_overrides[get_current_user] = current_user

    return _login


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def failing_commit(monkeypatch):
    """Make ``Session.commit`` fail while a new row of ``model`` is pending"""

    def _fail(model):
        original = Session.commit

        def commit(self):
            if any(isinstance(obj, model) for obj in self.new):
                raise OperationalError("INSERT", {}, Exception("database is locked"))
            return original(self)

        monkeypatch.setattr(Session, "commit", commit)

    return _fail
