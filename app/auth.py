"""Auth - bearer identity verification and role checks.

Tokens are issued by the external identity provider and signed with `SECRET_KEY`.
Claims used here: `sub` (user id) and `role` (`"admin"` grants admin access).
`create_access_token` mints tokens with the same secret for local development and tests;
production tokens never come from here.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from .settings import ADMIN_ROLE, AUTH_TOKEN_URL, JWT_ALGORITHM, SECRET_KEY

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=AUTH_TOKEN_URL)


class CurrentUser(BaseModel):
    uid: str
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a token locally (dev/test only). `data` must carry `sub`, optionally `role`."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)
    return encoded_jwt


def decode_token(token: str) -> CurrentUser:
    """Giải mã JWT; raise `JWTError` nếu token sai/hết hạn hoặc thiếu `sub`."""
    payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    user_id = payload.get("sub")
    if not user_id:
        raise JWTError("Token has no subject")
    role = payload.get("role")
    return CurrentUser(uid=str(user_id), role=role if isinstance(role, str) else None)


def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid auth token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        return decode_token(token)
    except JWTError as e:
        logger.warning(f"Token verification failed: {e}")
        raise credentials_exception


def require_admin(user: CurrentUser) -> None:
    if not user.is_admin:
        logger.warning(f"Admin access denied for uid={user.uid}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: admin only",
        )


def get_current_admin_user(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Kiểm tra nếu user hiện tại là admin"""
    require_admin(current_user)
    return current_user


def get_user_id_from_authorization_header(authorization: Optional[str]) -> Optional[str]:
    """Trích `user_id` từ header Authorization (Bearer token).

    Dùng cho các endpoint **cho phép anonymous** (không bắt buộc đăng nhập):
    - Trả về `None` nếu không có/không hợp lệ.
    - Không raise lỗi để tránh làm hỏng luồng anonymous.
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    try:
        return decode_token(parts[1]).uid
    except JWTError as e:
        logger.warning(f"Ignoring invalid optional token: {e}")
        return None


__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_current_admin_user",
    "require_admin",
    "get_user_id_from_authorization_header",
    "create_access_token",
    "decode_token",
]
