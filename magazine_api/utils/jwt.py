from datetime import datetime, timedelta, timezone
from typing import Any
from jose import jwt, JWTError
from fastapi import HTTPException

from .config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_HOURS


def create_access_token(payload: dict, expires_in: timedelta | None = None) -> str:
    to_encode = dict(payload)
    if "exp" not in to_encode:
        to_encode["exp"] = datetime.now(timezone.utc) + (
            expires_in or timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
        )
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
