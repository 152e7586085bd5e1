from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt

from fastapi import Request

import os
import bcrypt
import logging

SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key_123")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Principal of an unauthenticated Internet Identity caller
ANONYMOUS_PRINCIPAL = "2vxsx-fae"

logger = logging.getLogger("gym_app")


def verify_password(plain_password, hashed_password):
    # bcrypt requires bytes for both
    if not plain_password or not hashed_password:
        return False
    pwd_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)

def get_password_hash(password):
    # bcrypt requires bytes, returns bytes. We store as string.
    pwd_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode('utf-8')

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def create_identity_token(principal: str) -> str:
    """Token standing for an Internet Identity delegation of `principal`."""
    return create_access_token({"sub": principal, "kind": "identity"})

def decode_identity_token(token: str) -> Optional[str]:
    """Return the principal carried by an identity token, or None if invalid."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info(f"AUTH: Identity token rejected: {e}")
        return None
    if payload.get("kind") != "identity":
        return None
    principal = payload.get("sub")
    if not principal or principal == ANONYMOUS_PRINCIPAL:
        return None
    return principal

def get_identity(request: Request) -> Optional[str]:
    """
    Identity handle of the request: the principal from the Authorization
    header or the access_token cookie. None when absent or invalid.
    """
    token = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.replace("Bearer ", "")
    else:
        token = request.cookies.get("access_token")

    if not token:
        return None
    return decode_identity_token(token)

