import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.admin import Admin
from ..schemas.admin import AdminOut, LoginRequest, PasswordChangeRequest, TokenResponse
from ..utils import config
from ..utils.auth import (
    TOKEN_COOKIE,
    authenticate_admin,
    get_current_admin,
    get_current_admin_optional,
    hash_password,
    verify_password,
)
from ..utils.jwt import create_access_token
from ..utils.rate_limit import client_ip, check_rate_limit, note_fail, note_success
from ..utils.setup import is_setup_complete
from ..utils.templating import templates

router = APIRouter(prefix="/auth", tags=["Authentication"])

login_page_router = APIRouter(tags=["Authentication"])


def _issue_token(user: Admin) -> str:
    return create_access_token({
        "sub": str(user.id),
        "username": user.username,
        "role": "admin",
    })


@router.post("/login", response_model=TokenResponse)
def login(request: Request, creds: LoginRequest, db: Session = Depends(get_db)):
    ip = client_ip(request)
    check_rate_limit(ip, creds.username)

    user = authenticate_admin(db, creds.username, creds.password)
    if not user:
        note_fail(ip, creds.username)
        logging.info(f"[auth] Failed login for '{creds.username}' from {ip}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    note_success(ip, creds.username)
    return TokenResponse(access_token=_issue_token(user))


@router.get("/me", response_model=AdminOut)
def me(admin: Admin = Depends(get_current_admin)):
    return admin


@router.post("/change-password")
def change_password(
        data: PasswordChangeRequest,
        admin: Admin = Depends(get_current_admin),
        db: Session = Depends(get_db),
):
    """
    Change the admin's password.
    - Verifies current password against stored hash.
    - Enforces minimum length of 8 characters for new password (via Pydantic model).
    """
    if not verify_password(data.current_password, admin.password_hash):
        raise HTTPException(status_code=401, detail="Incorrect current password")

    admin.password_hash = hash_password(data.new_password)
    db.add(admin)
    db.commit()
    logging.info(f"[auth] Password changed for '{admin.username}'")

    return {"message": "Password changed successfully."}


def _render_login(
        request: Request,
        status_code: int = 200,
        admin: Optional[Admin] = None,
        error: Optional[str] = None,
        username: str = "",
        headers: Optional[dict] = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "admin": admin,
            "error": error,
            "username": username,
            "form_action": request.url.path,
        },
        status_code=status_code,
        headers=headers,
    )


@login_page_router.get("/login", response_class=HTMLResponse, name="login_page")
def login_page(
        request: Request,
        admin: Optional[Admin] = Depends(get_current_admin_optional),
        db: Session = Depends(get_db),
):
    if admin is None and config.SETUP_ENABLED and not is_setup_complete(db):
        return RedirectResponse("/setup", status_code=status.HTTP_303_SEE_OTHER)
    return _render_login(request, admin=admin)


@login_page_router.post("/login", response_class=HTMLResponse)
def login_form(
        request: Request,
        username: str = Form(""),
        password: str = Form(""),
        db: Session = Depends(get_db),
):
    username = username.strip()
    ip = client_ip(request)
    try:
        check_rate_limit(ip, username)
    except HTTPException as e:
        return _render_login(request, status_code=e.status_code, error=e.detail, username=username, headers=e.headers)

    user = authenticate_admin(db, username, password) if username and password else None
    if not user:
        note_fail(ip, username)
        logging.info(f"[auth] Failed login for '{username}' from {ip}")
        return _render_login(request, status_code=401, error="Invalid username or password.", username=username)

    note_success(ip, username)
    response = RedirectResponse(request.url_for("login_page"), status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        TOKEN_COOKIE,
        _issue_token(user),
        max_age=config.ACCESS_TOKEN_EXPIRE_HOURS * 3600,
        httponly=True,
        samesite="lax",
    )
    return response


@login_page_router.post("/logout")
def logout(request: Request):
    response = RedirectResponse(request.url_for("login_page"), status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(TOKEN_COOKIE)
    return response
