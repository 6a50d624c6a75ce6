from contextlib import contextmanager
from ..db import get_db
from sqlalchemy.orm import Session


@contextmanager
def with_db() -> Session:
    """
    Open and close a DB session outside FastAPI's Depends().

        with with_db() as db:
            ...
    """
    db_gen = get_db()
    db = next(db_gen)
    try:
        yield db
    finally:
        db_gen.close()
