# routes/profile.py
from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, Any

from models.auth import UsernameUpdate, PasswordChange
from routes.auth import get_current_account
from services.errors import JournalError
from services.profile_service import profile_service

router = APIRouter()


@router.get("/")
async def get_profile(account: Dict[str, Any] = Depends(get_current_account)):
    return {"email": account["email"], **account["profile"]}


@router.put("/username")
async def update_username(update: UsernameUpdate, account: Dict[str, Any] = Depends(get_current_account)):
    try:
        return await profile_service.update_username(account["profile"], update.username)
    except JournalError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/password")
async def change_password(change: PasswordChange, account: Dict[str, Any] = Depends(get_current_account)):
    try:
        return await profile_service.change_password(
            account,
            change.current_password,
            change.new_password,
            change.confirm_password
        )
    except JournalError as e:
        raise HTTPException(status_code=400, detail=e.message)
