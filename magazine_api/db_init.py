from pathlib import Path
from typing import Optional

from .db import engine
from .models import Base


def sqlite_database_path() -> Optional[Path]:
    """
    Filesystem path of the database when it is a file-backed sqlite one.
    """
    url = engine.url
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


def database_location() -> str:
    path = sqlite_database_path()
    if path is not None:
        return str(path.resolve())
    return engine.url.render_as_string(hide_password=True)


def initialize_schema() -> None:
    """
    Create every table known to the models. Safe to call repeatedly.
    """
    path = sqlite_database_path()
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)
