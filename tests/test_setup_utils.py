import os

import pytest

from magazine_api.db import SessionLocal
from magazine_api.db_init import initialize_schema
from magazine_api.utils import setup as setup_utils
from magazine_api.utils.setup import (
    SetupAlreadyCompleted,
    ensure_upload_dir,
    is_setup_complete,
    perform_setup,
    validate_setup_form,
)


def test_validation_accepts_minimum_lengths():
    assert validate_setup_form("abc", "12345678", "12345678") is None


def test_validation_reports_first_failure_only():
    assert validate_setup_form("ab", "short", "other") == "Username must be at least 3 characters."
    assert validate_setup_form("abc", "short", "other") == "Password must be at least 8 characters."


def test_validation_does_not_trim_password():
    assert validate_setup_form("abc", "password ", "password") == "Passwords do not match."


def test_ensure_upload_dir_is_idempotent(tmp_path):
    target = tmp_path / "nested" / "uploads"
    assert ensure_upload_dir(target) == target
    assert ensure_upload_dir(target) == target
    assert target.is_dir()


def test_setup_incomplete_without_database():
    db = SessionLocal()
    try:
        assert is_setup_complete(db) is False
    finally:
        db.close()


def test_setup_incomplete_with_empty_schema():
    initialize_schema()
    db = SessionLocal()
    try:
        assert is_setup_complete(db) is False
    finally:
        db.close()


def test_perform_setup_runs_once():
    db = SessionLocal()
    try:
        admin = perform_setup(db, "editor", "password1")
        assert admin.id is not None
        assert is_setup_complete(db) is True

        with pytest.raises(SetupAlreadyCompleted, match="Setup already completed"):
            perform_setup(db, "second", "password2")
    finally:
        db.close()


def test_ensure_upload_dir_mode(tmp_path):
    old_umask = os.umask(0o022)
    try:
        target = ensure_upload_dir(tmp_path / "uploads")
    finally:
        os.umask(old_umask)
    assert target.stat().st_mode & 0o777 == 0o755


def test_ensure_upload_dir_keeps_existing_files(tmp_path):
    target = tmp_path / "uploads"
    target.mkdir()
    (target / "cover.jpg").write_bytes(b"jpeg")

    ensure_upload_dir(target)

    assert (target / "cover.jpg").read_bytes() == b"jpeg"


def test_duplicate_username_race_is_already_completed(monkeypatch):
    db = SessionLocal()
    try:
        perform_setup(db, "editor", "password1")
        monkeypatch.setattr(setup_utils, "count_admins", lambda session: 0)

        with pytest.raises(SetupAlreadyCompleted):
            perform_setup(db, "editor", "password2")
        assert db.query(setup_utils.Admin).count() == 1
    finally:
        db.close()


def test_oversized_password_is_not_reported_as_completed():
    db = SessionLocal()
    try:
        with pytest.raises(ValueError) as exc_info:
            perform_setup(db, "editor", "x" * 5000)
        assert not isinstance(exc_info.value, SetupAlreadyCompleted)
        assert is_setup_complete(db) is False
    finally:
        db.close()
