from typing import Optional

from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..models.admin import Admin
from ..db import get_db
from .jwt import decode_access_token

TOKEN_COOKIE = "access_token"

security_optional = HTTPBearer(auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    # passlib rejects oversized or NUL-containing secrets with ValueError
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def authenticate_admin(db: Session, username: str, password: str) -> Optional[Admin]:
    """
    Return the admin matching the credentials, or None.
    """
    user = db.query(Admin).filter_by(username=username.strip()).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def _request_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE)


def get_current_admin(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
        db: Session = Depends(get_db)
) -> Admin:
    """
    Resolve the signed-in admin from a bearer header or the login page cookie.
    """
    token = _request_token(request, credentials)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})

    payload = decode_access_token(token)

    user_id = payload.get("sub")
    role = payload.get("role")

    if role != "admin":
        raise HTTPException(status_code=403, detail="Not an admin")

    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user ID")

    user = db.query(Admin).filter_by(id=int(user_id)).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    return user


def get_current_admin_optional(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
        db: Session = Depends(get_db)
) -> Optional[Admin]:
    """
    Return the Admin if a valid admin token is provided; otherwise None.
    Never raises for missing/invalid/unauthorized tokens.
    """
    token = _request_token(request, credentials)
    if not token:
        return None

    try:
        payload = decode_access_token(token)
    except HTTPException:
        return None

    user_id = payload.get("sub")
    role = payload.get("role")
    if role != "admin" or not user_id:
        return None

    return db.query(Admin).filter_by(id=int(user_id)).first()
