import base64
import json
import logging
import time
from typing import Optional

import httpx
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509 import load_pem_x509_certificate
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)

# Cache for Google's public keys
_cached_keys = None


async def get_google_public_keys():
    """Fetch Google's public keys for Firebase token verification"""
    global _cached_keys
    if _cached_keys:
        return _cached_keys

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(GOOGLE_CERTS_URL)
            if response.status_code == 200:
                _cached_keys = response.json()
                logger.info(f"✅ Fetched {len(_cached_keys)} Google public keys")
                return _cached_keys
            logger.error(f"❌ Failed to fetch Google public keys: HTTP {response.status_code}")
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching Google public keys: {str(e)}")
    return None


def _b64decode(segment: str) -> bytes:
    padding_len = 4 - len(segment) % 4
    return base64.urlsafe_b64decode(segment + ("=" * padding_len if padding_len != 4 else ""))


async def verify_firebase_token(token: str) -> dict:
    """
    Verify Firebase ID token with full signature verification.
    Uses Google's public keys to verify the JWT signature, then checks
    audience, issuer, expiry and issued-at claims.
    """
    global _cached_keys

    if not FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise HTTPException(status_code=500, detail="Firebase not configured")

    parts = token.split(".")
    if len(parts) != 3:
        raise HTTPException(status_code=401, detail="Invalid token format")

    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_b64decode(header_b64))
    except (ValueError, json.JSONDecodeError) as e:
        logger.error(f"❌ Failed to decode token header: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token header") from e

    kid = header.get("kid")
    if header.get("alg") != "RS256":
        raise HTTPException(status_code=401, detail="Invalid token algorithm")
    if not kid:
        raise HTTPException(status_code=401, detail="Token missing key ID")

    public_keys = await get_google_public_keys()
    if not public_keys or kid not in public_keys:
        logger.warning(f"⚠️ Key ID {kid} not found in public keys, invalidating cache and retrying")
        _cached_keys = None
        public_keys = await get_google_public_keys()
        if not public_keys or kid not in public_keys:
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    cert = load_pem_x509_certificate(public_keys[kid].encode(), default_backend())

    try:
        signature = _b64decode(signature_b64)
        cert.public_key().verify(
            signature,
            f"{header_b64}.{payload_b64}".encode(),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
    except Exception as e:
        logger.error(f"❌ Token signature verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token signature") from e

    try:
        payload = json.loads(_b64decode(payload_b64))
    except (ValueError, json.JSONDecodeError) as e:
        raise HTTPException(status_code=401, detail="Invalid token payload") from e

    if payload.get("aud") != FIREBASE_PROJECT_ID:
        logger.error("❌ Token audience mismatch")
        raise HTTPException(status_code=401, detail="Invalid token audience")

    if payload.get("iss") != f"https://securetoken.google.com/{FIREBASE_PROJECT_ID}":
        logger.error("❌ Token issuer mismatch")
        raise HTTPException(status_code=401, detail="Invalid token issuer")

    now = time.time()
    if payload.get("exp", 0) < now:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        )

    # Allow 60 seconds clock skew
    if payload.get("iat", 0) > now + 60:
        logger.warning("⚠️ Token issued in the future")
        raise HTTPException(status_code=401, detail="Invalid token")

    if "auth_time" not in payload:
        raise HTTPException(status_code=401, detail="Invalid token claims")

    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from Firebase token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    decoded_token = await verify_firebase_token(credentials.credentials)

    # Firebase ID tokens use 'sub' as the user ID claim
    firebase_uid = decoded_token.get("sub") or decoded_token.get("user_id")
    if not firebase_uid:
        logger.error(f"❌ Token missing user ID claim. Claims: {list(decoded_token.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = db.query(User).filter(User.firebase_uid == firebase_uid).first()
    if user:
        return user

    # Account exists at the identity provider but not locally yet
    logger.info(f"🆕 Creating local user for firebase_uid: {firebase_uid}")
    user = User(
        firebase_uid=firebase_uid,
        email=decoded_token.get("email") or f"{firebase_uid}@users.invalid",
        full_name=decoded_token.get("name"),
        user_type="doctor",
    )
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        logger.error(f"❌ Email {user.email} is already linked to another account")
        raise HTTPException(
            status_code=409,
            detail="This email is already registered. Please sign in with your existing account.",
        ) from e
    return user


async def get_current_doctor(user: User = Depends(get_current_user)) -> User:
    if user.user_type != "doctor":
        logger.warning(f"🚫 User {user.id} ({user.user_type}) attempted a doctor-only action")
        raise HTTPException(status_code=403, detail="Only doctor accounts can perform this action")
    return user


async def get_current_hospital(user: User = Depends(get_current_user)) -> User:
    if user.user_type != "hospital":
        logger.warning(f"🚫 User {user.id} ({user.user_type}) attempted a hospital-only action")
        raise HTTPException(
            status_code=403, detail="Only hospital accounts can perform this action"
        )
    return user
