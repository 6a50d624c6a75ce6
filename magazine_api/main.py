import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI

from .utils import config

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logging.getLogger("passlib.handlers.bcrypt").setLevel(logging.ERROR)

from .db_init import database_location
from .routers.auth import router as auth_router
from .routers.auth import login_page_router
from .routers.setup import router as setup_router
from .utils.db_tools import with_db
from .utils.setup import is_setup_complete


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Report on startup whether the first-run wizard still has work to do.
    """
    with with_db() as db:
        done = is_setup_complete(db)

    if done:
        logging.info(f"[startup] Setup complete, database at {database_location()}")
        if config.SETUP_ENABLED:
            logging.warning("[startup] Setup wizard is still enabled; set SETUP_ENABLED=false")
    elif config.SETUP_ENABLED:
        logging.info("[startup] No admin yet. Open /setup to create one.")
    else:
        logging.warning("[startup] No admin yet and SETUP_ENABLED=false; nobody can sign in.")

    yield


app = FastAPI(lifespan=lifespan)

app.include_router(setup_router)
app.include_router(auth_router)
app.include_router(login_page_router)


@app.get("/health")
def health():
    return {"ok": True, "service": "Magazine API"}


_version_path = Path(__file__).with_name("version.json")
try:
    with open(_version_path, "r", encoding="utf-8") as f:
        _version_info = json.load(f)
except (OSError, ValueError):
    _version_info = {
        "app_name": "Magazine API",
        "version": "unknown",
        "build_name": "unknown",
        "build_time": 0,
    }


@app.get("/")
def read_root():
    with with_db() as db:
        done = is_setup_complete(db)
    return {**_version_info, "setup_complete": done}
