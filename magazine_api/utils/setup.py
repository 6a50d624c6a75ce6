"""
First-run setup: detect whether an administrator exists, validate the
wizard form, and create the schema, upload directory and first admin.
"""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..db_init import initialize_schema, sqlite_database_path
from ..models.admin import Admin
from .auth import hash_password
from .config import UPLOAD_DIR

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 8
UPLOAD_DIR_MODE = 0o755


class SetupAlreadyCompleted(ValueError):
    pass


def count_admins(db: Session) -> int:
    return db.execute(select(func.count()).select_from(Admin)).scalar_one()


def is_setup_complete(db: Session) -> bool:
    """
    Returns True once at least one admin exists.
    A missing table or unreadable database counts as not set up so the
    wizard can be run again.
    """
    path = sqlite_database_path()
    if path is not None and not path.exists():
        return False
    try:
        return count_admins(db) > 0
    except SQLAlchemyError as e:
        db.rollback()
        logging.warning(f"[setup] Could not count admins, treating as not set up: {e}")
        return False


def validate_setup_form(username: str, password: str, confirm_password: str) -> Optional[str]:
    """
    Return the first validation error for the wizard form, or None.
    The username is expected to be trimmed already.
    """
    if not username or not password:
        return "Username and password are required."
    if len(username) < MIN_USERNAME_LENGTH:
        return f"Username must be at least {MIN_USERNAME_LENGTH} characters."
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if password != confirm_password:
        return "Passwords do not match."
    return None


def ensure_upload_dir(path: Optional[Path] = None) -> Path:
    target = Path(path or UPLOAD_DIR)
    target.mkdir(mode=UPLOAD_DIR_MODE, parents=True, exist_ok=True)
    return target


def perform_setup(db: Session, username: str, password: str) -> Admin:
    initialize_schema()
    ensure_upload_dir()

    if count_admins(db) > 0:
        raise SetupAlreadyCompleted("Setup already completed")

    admin = Admin(username=username, password_hash=hash_password(password))
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise SetupAlreadyCompleted("Setup already completed")
    except SQLAlchemyError:
        db.rollback()
        raise

    logging.info(f"[setup] Created first admin '{username}'")
    return admin
