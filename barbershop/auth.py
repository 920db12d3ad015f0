# barbershop/auth.py

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from .config import (
    SECRET_KEY, ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_PASSWORD_HASH, ADMIN_TOKEN_EXPIRE_MINUTES
)

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ADMIN_SCOPE = "admin"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="admin/login")


def create_access_token(data: dict, expires_minutes: int = ADMIN_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode["exp"] = expire
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


@lru_cache(maxsize=1)
def admin_password_hash() -> Optional[str]:
    if ADMIN_PASSWORD_HASH:
        return ADMIN_PASSWORD_HASH
    if ADMIN_PASSWORD:
        return hash_password(ADMIN_PASSWORD)
    logger.warning("No admin password configured; admin login is disabled")
    return None


def authenticate_admin(username: str, password: str) -> bool:
    hashed = admin_password_hash()
    if hashed is None or username != ADMIN_USERNAME:
        return False
    return verify_password(password, hashed)


def get_current_admin(token: str = Depends(oauth2_scheme)) -> str:
    credentials_error = HTTPException(
        status_code=401,
        detail="Invalid token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise credentials_error

    username = payload.get("sub")
    if username is None or payload.get("scope") != ADMIN_SCOPE:
        raise credentials_error
    if username != ADMIN_USERNAME:
        raise credentials_error

    return username
