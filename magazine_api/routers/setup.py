import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db
from ..db_init import database_location
from ..schemas.setup import SetupForm
from ..utils import config
from ..utils.setup import (
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
    SetupAlreadyCompleted,
    is_setup_complete,
    perform_setup,
    validate_setup_form,
)
from ..utils.templating import templates


def require_setup_enabled() -> None:
    if not config.SETUP_ENABLED:
        raise HTTPException(status_code=404, detail="Not Found")


router = APIRouter(prefix="/setup", tags=["Setup"], dependencies=[Depends(require_setup_enabled)])


def _render(request: Request, state: str, status_code: int = 200, **context) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "setup.html",
        {
            "state": state,
            "error": None,
            "username": "",
            "form_action": request.url.path,
            "login_url": config.LOGIN_URL,
            "database_location": database_location(),
            "min_username_length": MIN_USERNAME_LENGTH,
            "min_password_length": MIN_PASSWORD_LENGTH,
            **context,
        },
        status_code=status_code,
    )


@router.get("", response_class=HTMLResponse)
def setup_page(request: Request, db: Session = Depends(get_db)):
    if is_setup_complete(db):
        return _render(request, "configured")
    return _render(request, "form")


@router.post("", response_class=HTMLResponse)
def submit_setup(
        request: Request,
        form: SetupForm = Depends(SetupForm.as_form),
        db: Session = Depends(get_db),
):
    if is_setup_complete(db):
        return _render(request, "configured", status_code=409)

    error = validate_setup_form(form.username, form.password, form.confirm_password)
    if error:
        return _render(request, "form", status_code=400, error=error, username=form.username)

    try:
        perform_setup(db, form.username, form.password)
    except SetupAlreadyCompleted:
        return _render(request, "configured", status_code=409)
    except (ValueError, SQLAlchemyError, OSError) as e:
        logging.error(f"[setup] Setup failed: {e}")
        return _render(request, "form", status_code=500, error=f"Setup failed: {e}", username=form.username)

    return _render(request, "complete")


@router.get("/status", response_model=bool)
def setup_status(db: Session = Depends(get_db)) -> bool:
    """
    Returns True if initial setup has been completed, otherwise False.
    """
    return is_setup_complete(db)
