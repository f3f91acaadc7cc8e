import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower().strip() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", os.getenv("MONGO_URI", "")).strip()
# Postgres only: wrap the connection in TLS
DATABASE_SSL = _flag("DATABASE_SSL", "1")

# Connection attempt bound and idle-socket lifetime (seconds)
DB_CONNECT_TIMEOUT = float(os.getenv("DB_CONNECT_TIMEOUT", "5").strip() or "5")
DB_SOCKET_TIMEOUT = float(os.getenv("DB_SOCKET_TIMEOUT", "45").strip() or "45")

HOST = os.getenv("HOST", "0.0.0.0").strip()

# Tried in order; the first one that binds wins.
CANDIDATE_PORTS = (8000, 8080, 3000, 5000)

# Front-end; relative paths are taken from the project root, not the cwd.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
STATIC_DIR = str(PROJECT_ROOT / (os.getenv("STATIC_DIR", "public").strip() or "public"))
FORM_SUBMIT_ASSET = os.getenv("FORM_SUBMIT_ASSET", "form-submit.js").strip()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
