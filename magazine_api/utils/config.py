from pathlib import Path
import os
import secrets
import re
from dotenv import load_dotenv

ENV_PATH = Path(os.getenv("ENV_FILE") or Path(__file__).parent.parent / ".env")

load_dotenv(dotenv_path=ENV_PATH)


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("SECRET_KEY")

if not SECRET_KEY:
    SECRET_KEY = secrets.token_hex(32)
    existing = ENV_PATH.read_text() if ENV_PATH.exists() else ""

    if re.search(r"^\s*SECRET_KEY\s*=", existing, re.MULTILINE):
        new_contents = re.sub(
            r"^\s*SECRET_KEY\s*=.*$",
            f"SECRET_KEY={SECRET_KEY}",
            existing,
            flags=re.MULTILINE
        )
        ENV_PATH.write_text(new_contents)
        print("[config] SECRET_KEY was empty; updated with generated key")
    else:
        with ENV_PATH.open("a") as f:
            if existing and not existing.endswith("\n"):
                f.write("\n")
            f.write(f"SECRET_KEY={SECRET_KEY}\n")
        print("[config] SECRET_KEY was missing; new key generated and added to .env")

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24"))

APP_NAME = os.getenv("APP_NAME", "Magazine")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DB_PATH = Path(os.getenv("DB_PATH", "./data/magazine.db"))
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH}")
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "./uploads"))

SETUP_ENABLED = _env_bool("SETUP_ENABLED", True)
LOGIN_URL = os.getenv("LOGIN_URL", "/login")
