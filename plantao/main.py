import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.availability import router as availability_router
from .domain.contracts import router as contracts_router
from .domain.dashboard import router as dashboard_router
from .domain.profile import router as profile_router
from .domain.proposals import router as proposals_router
from .routes.auth import router as auth_router
from .security_headers import SecurityHeadersMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        # Another worker may have created them first
        if "already exists" in str(e):
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Plantão API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry the raised ValueError itself
    return [
        {key: value for key, value in error.items() if key != "ctx"} for error in exc.errors()
    ]


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(availability_router)
app.include_router(proposals_router)
app.include_router(contracts_router)
app.include_router(profile_router)
app.include_router(dashboard_router)


@app.get("/")
def root():
    return {"message": "Plantão API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
