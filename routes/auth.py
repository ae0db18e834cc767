# routes/auth.py
from fastapi import APIRouter, Depends, Header, HTTPException
from typing import Dict, Any, Optional
import logging

from models.auth import Credentials, RefreshRequest
from services.errors import AuthError, EmailNotVerifiedError
from services.identity_service import identity_service
from services.profile_service import profile_service
from services.recorder_service import recorder_sessions

logger = logging.getLogger(__name__)

router = APIRouter()

VERIFY_FIRST = "Please verify your email before logging in."


async def get_current_account(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    """Resolve the bearer token to a verified account with a profile"""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")

    id_token = authorization.split(" ", 1)[1].strip()
    try:
        account = await identity_service.lookup(id_token)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)

    # Block access until email is verified
    if not account["email_verified"]:
        raise HTTPException(status_code=403, detail=VERIFY_FIRST)

    account["profile"] = await profile_service.ensure_profile(account)
    return account


@router.post("/signup")
async def signup(credentials: Credentials):
    try:
        return await identity_service.sign_up(credentials.email, credentials.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/login")
async def login(credentials: Credentials):
    try:
        session = await identity_service.sign_in(credentials.email, credentials.password)
    except EmailNotVerifiedError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)

    account = {
        "uid": session["uid"],
        "email": session["email"],
        "email_verified": session["email_verified"]
    }
    profile = await profile_service.ensure_profile(account)
    logger.info(f"User {session['uid']} logged in")
    return {**session, "profile": profile}


@router.post("/refresh")
async def refresh(body: RefreshRequest):
    """Trade the refresh token kept by the page for a new id token"""
    try:
        return await identity_service.refresh(body.refresh_token)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=e.message)


@router.post("/resend-verification")
async def resend_verification(credentials: Credentials):
    try:
        return await identity_service.resend_verification(credentials.email, credentials.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/logout")
async def logout(account: Dict[str, Any] = Depends(get_current_account)):
    recorder_sessions.discard(account["uid"])
    return {"success": True}


@router.get("/me")
async def me(account: Dict[str, Any] = Depends(get_current_account)):
    return {
        "uid": account["uid"],
        "email": account["email"],
        "profile": account["profile"]
    }
