"""
Auth Routes - identity tokens for Internet Identity principals.

The dev identity provider hands out a token for any principal. It is only
mounted when ALLOW_DEV_IDENTITY is set; production deployments put a real
identity provider in front of the app and forward its token.
"""
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
import os
import logging

from auth import create_identity_token, ANONYMOUS_PRINCIPAL
from models import IdentityLoginRequest
from .deps import drop_session_cache

logger = logging.getLogger("gym_app")
router = APIRouter(tags=["Auth"])


def dev_identity_enabled() -> bool:
    return os.getenv("ALLOW_DEV_IDENTITY", "false").lower() in ("1", "true", "yes")


@router.post("/api/auth/identity")
async def issue_identity_token(body: IdentityLoginRequest, request: Request):
    if not dev_identity_enabled():
        raise HTTPException(status_code=404, detail="Identity provider not available")

    principal = body.principal.strip()
    if not principal or principal == ANONYMOUS_PRINCIPAL:
        raise HTTPException(status_code=400, detail="A non-anonymous principal is required")

    # Whatever the previous identity had cached must not reach this one
    drop_session_cache(request.session)
    token = create_identity_token(principal)
    logger.info(f"AUTH: Issued identity token for {principal}")

    response = JSONResponse(content={
        "access_token": token,
        "token_type": "bearer",
        "principal": principal
    })
    response.set_cookie(key="access_token", value=token, httponly=True)
    return response


@router.post("/api/auth/identity/logout")
async def identity_logout(request: Request):
    drop_session_cache(request.session)
    response = JSONResponse(content={"status": "logged_out"})
    response.delete_cookie("access_token")
    return response
