"""
Firebase identity provider.

Account creation and token revocation go through the Admin SDK; password
sign-in and the reset e-mail use the Identity Toolkit REST API, which the
Admin SDK does not expose.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import firebase_admin
import httpx
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin.exceptions import FirebaseError

from ..config import FIREBASE_PROJECT_ID, FIREBASE_WEB_API_KEY

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

# REST error codes that mean "wrong e-mail or password"
BAD_CREDENTIALS = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_EMAIL",
    "USER_DISABLED",
}


class IdentityProviderError(Exception):
    """Identity provider refused or failed a request"""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class IdentitySession:
    uid: str
    id_token: str
    refresh_token: str
    expires_in: int


def _init_firebase_app():
    try:
        return firebase_admin.get_app()
    except ValueError:
        logger.info("Initializing Firebase Admin SDK")

    try:
        cred = credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, {"projectId": FIREBASE_PROJECT_ID})
        logger.info("Firebase Admin initialized with default credentials")
    except (ValueError, OSError) as e:
        logger.warning(f"⚠️ Default credentials unavailable ({e}); using project ID only")
        app = firebase_admin.initialize_app(options={"projectId": FIREBASE_PROJECT_ID})
    return app


class FirebaseIdentityService:
    def __init__(
        self,
        api_key: str = FIREBASE_WEB_API_KEY,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self._app = None

    @property
    def app(self):
        if self._app is None:
            self._app = _init_firebase_app()
        return self._app

    def create_account(self, email: str, password: str, display_name: str) -> str:
        """Create the provider account; returns its uid"""
        try:
            record = firebase_auth.create_user(
                email=email, password=password, display_name=display_name, app=self.app
            )
        except firebase_auth.EmailAlreadyExistsError as e:
            raise IdentityProviderError("This email is already registered", 409) from e
        except (FirebaseError, ValueError) as e:
            logger.error(f"❌ Firebase account creation failed for {email}: {e}")
            raise IdentityProviderError("Failed to create account") from e

        logger.info(f"👤 Firebase account created: {record.uid}")
        return record.uid

    def delete_account(self, uid: str) -> None:
        try:
            firebase_auth.delete_user(uid, app=self.app)
        except FirebaseError as e:
            logger.error(f"❌ Failed to delete Firebase account {uid}: {e}")
            raise IdentityProviderError("Failed to delete account") from e

    def sign_out(self, uid: str) -> None:
        """Revoke every refresh token issued to the user"""
        try:
            firebase_auth.revoke_refresh_tokens(uid, app=self.app)
        except FirebaseError as e:
            logger.error(f"❌ Failed to revoke tokens for {uid}: {e}")
            raise IdentityProviderError("Failed to sign out") from e

    async def _post(self, endpoint: str, payload: dict) -> httpx.Response:
        if not self.api_key:
            raise IdentityProviderError("FIREBASE_WEB_API_KEY is not configured")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                return await client.post(
                    f"{IDENTITY_TOOLKIT_URL}/{endpoint}",
                    params={"key": self.api_key},
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Identity Toolkit request {endpoint} failed: {e}")
            raise IdentityProviderError("Identity provider unavailable") from e

    @staticmethod
    def _error_code(response: httpx.Response) -> str:
        try:
            message = response.json().get("error", {}).get("message", "")
        except ValueError:
            return ""
        # e.g. "TOO_MANY_ATTEMPTS_TRY_LATER : Access to this account..."
        return message.split(":")[0].strip()

    async def sign_in(self, email: str, password: str) -> IdentitySession:
        response = await self._post(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if response.status_code != 200:
            code = self._error_code(response)
            if code in BAD_CREDENTIALS:
                logger.info(f"🔒 Rejected sign-in for {email}: {code}")
                raise IdentityProviderError("Invalid email or password", 401)
            if code == "TOO_MANY_ATTEMPTS_TRY_LATER":
                raise IdentityProviderError("Too many attempts. Try again later.", 429)
            logger.error(f"❌ Sign-in failed for {email}: {response.status_code} {code}")
            raise IdentityProviderError("Failed to sign in")

        data = response.json()
        return IdentitySession(
            uid=data["localId"],
            id_token=data["idToken"],
            refresh_token=data["refreshToken"],
            expires_in=int(data.get("expiresIn", 3600)),
        )

    async def send_password_reset(self, email: str) -> None:
        response = await self._post(
            "accounts:sendOobCode", {"requestType": "PASSWORD_RESET", "email": email}
        )
        if response.status_code == 200:
            logger.info(f"📧 Password reset e-mail requested for {email}")
            return

        code = self._error_code(response)
        if code == "EMAIL_NOT_FOUND":
            # Not revealed to the caller
            logger.info(f"Password reset requested for unknown e-mail {email}")
            return
        logger.error(f"❌ Password reset failed for {email}: {response.status_code} {code}")
        raise IdentityProviderError("Failed to send password reset e-mail")


@lru_cache(maxsize=1)
def get_identity_service() -> FirebaseIdentityService:
    return FirebaseIdentityService()
