import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./plantao.db")

# Firebase Configuration
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")
# Web API key is needed for the Identity Toolkit REST endpoints (sign-in, password reset)
FIREBASE_WEB_API_KEY = os.getenv("FIREBASE_WEB_API_KEY")

# Cloudflare R2 Configuration
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "plantao")

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = int(os.getenv("PRESIGNED_URL_EXPIRATION", "3600"))

# Upload limits (5MB default for documents, photos and check-in frames)
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Check-in geolocation: maximum distance from the shift location, in meters
CHECKIN_RADIUS_METERS = float(os.getenv("CHECKIN_RADIUS_METERS", "500"))

# Frontend base URL for redirects and CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    f"{FRONTEND_URL},http://localhost:3000",
).split(",")

# Rate limiting is ENABLED by default; set RATE_LIMIT_ENABLED=false for local testing
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
