import os
from typing import List, Set

from dotenv import load_dotenv

# --- 1. Load Environment Variables ---
# Loads the .env file so os.getenv can find DATABASE_URL and friends
load_dotenv()

# --- 2. Database ---
DATABASE_URL = os.getenv("DATABASE_URL")

if DATABASE_URL is None:
    raise ValueError("DATABASE_URL is not set in the environment. Please create a .env file.")

# --- 3. Token Signing ---
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

# --- 4. CORS ---
DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


CORS_ORIGINS = _split_csv(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))


# --- 5. Values read per request ---
def get_admin_registration_keys() -> Set[str]:
    """
    Admin registration keys currently accepted.

    Several keys may be listed at once so a new key can be rolled out before
    the old one is withdrawn. An empty set disables admin registration.
    """
    return set(_split_csv(os.getenv("ADMIN_REGISTRATION_KEYS", "")))


def get_upload_dir() -> str:
    return os.getenv("UPLOAD_DIR", "uploads")


# --- 6. Server ---
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
