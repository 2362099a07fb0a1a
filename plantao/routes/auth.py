import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import (
    AuthResponse,
    LoginRequest,
    PasswordResetRequest,
    RegisterRequest,
    SessionResponse,
    UserResponse,
)
from ..services.identity_service import (
    FirebaseIdentityService,
    IdentityProviderError,
    get_identity_service,
)
from ..utils.sanitization import sanitize_string

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

MIN_PASSWORD_LENGTH = 6

rate_limit_register = create_rate_limiter(limit=5, window_seconds=3600, key_prefix="register")
rate_limit_login = create_rate_limiter(limit=20, window_seconds=900, key_prefix="login")
rate_limit_password_reset = create_rate_limiter(
    limit=5, window_seconds=3600, key_prefix="password_reset"
)


def _session(session) -> SessionResponse:
    return SessionResponse(
        idToken=session.id_token,
        refreshToken=session.refresh_token,
        expiresIn=session.expires_in,
        uid=session.uid,
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    identity: FirebaseIdentityService = Depends(get_identity_service),
    _: None = Depends(rate_limit_register),
):
    """Create the identity-provider account and the local user, then sign in"""
    name = sanitize_string(data.name)
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    if len(data.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
        )
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status_code=409, detail="This email is already registered")

    try:
        uid = identity.create_account(data.email, data.password, name)
    except IdentityProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    user = User(firebase_uid=uid, email=data.email, full_name=name, user_type=data.userType)
    db.add(user)
    try:
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Failed to store user {data.email}, removing provider account {uid}: {e}")
        try:
            identity.delete_account(uid)
        except IdentityProviderError:
            logger.error(f"❌ Orphaned Firebase account {uid} needs manual cleanup")
        raise HTTPException(status_code=500, detail="Failed to create account") from e

    logger.info(f"✅ Registered {user.user_type} {user.id} ({user.email})")

    try:
        session = await identity.sign_in(data.email, data.password)
    except IdentityProviderError as e:
        logger.warning(f"⚠️ Account {user.id} created but automatic sign-in failed: {e.message}")
        return AuthResponse(user=UserResponse.model_validate(user))

    return AuthResponse(user=UserResponse.model_validate(user), session=_session(session))


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    identity: FirebaseIdentityService = Depends(get_identity_service),
    _: None = Depends(rate_limit_login),
):
    try:
        session = await identity.sign_in(data.email, data.password)
    except IdentityProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e

    user = db.query(User).filter(User.firebase_uid == session.uid).first()
    if not user:
        # Signed up elsewhere; mirror the lazy creation done for bearer tokens
        user = User(firebase_uid=session.uid, email=data.email, user_type="doctor")
        db.add(user)
        try:
            db.commit()
            db.refresh(user)
        except IntegrityError as e:
            db.rollback()
            raise HTTPException(
                status_code=409, detail="This email is already linked to another account"
            ) from e

    logger.info(f"🔑 User {user.id} signed in")
    return AuthResponse(user=UserResponse.model_validate(user), session=_session(session))


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_user),
    identity: FirebaseIdentityService = Depends(get_identity_service),
):
    """Revoke the user's refresh tokens"""
    try:
        identity.sign_out(current_user.firebase_uid)
    except IdentityProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    logger.info(f"👋 User {current_user.id} signed out")
    return {"message": "Signed out successfully"}


@router.post("/reset-password")
async def reset_password(
    data: PasswordResetRequest,
    identity: FirebaseIdentityService = Depends(get_identity_service),
    _: None = Depends(rate_limit_password_reset),
):
    try:
        await identity.send_password_reset(data.email)
    except IdentityProviderError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return {"message": "If an account exists for this email, a reset link has been sent."}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user
