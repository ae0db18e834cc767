# routes/journal.py
from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, Any

from models.journal_entry import JournalEntry, TranslateEntryRequest
from routes.auth import get_current_account
from services.entry_service import entry_service, present_entry
from services.errors import EntryNotFoundError, JournalError
from services.recorder_service import recorder_sessions
from services.translation_service import translation_targets

router = APIRouter()


@router.get("/")
async def list_entries(account: Dict[str, Any] = Depends(get_current_account)):
    uid = account["uid"]
    try:
        entries = await entry_service.list_entries(uid)
    except JournalError as e:
        raise HTTPException(status_code=500, detail=e.message)

    return {
        "entries": [
            {
                **present_entry(entry, recorder_sessions.translation_for(uid, entry["id"])),
                "translation_targets": translation_targets(entry["language"])
            }
            for entry in entries
        ]
    }


@router.post("/")
async def create_entry(entry: JournalEntry, account: Dict[str, Any] = Depends(get_current_account)):
    try:
        saved = await entry_service.save_entry(
            user_id=account["uid"],
            text=entry.text,
            title=entry.title,
            language=entry.language
        )
    except JournalError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {"success": True, "entry": present_entry(saved)}


@router.delete("/{entry_id}")
async def delete_entry(entry_id: str, account: Dict[str, Any] = Depends(get_current_account)):
    try:
        await entry_service.delete_entry(account["uid"], entry_id)
    except EntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except JournalError as e:
        raise HTTPException(status_code=500, detail=e.message)

    recorder_sessions.forget_entry(account["uid"], entry_id)
    return {"success": True}


@router.post("/{entry_id}/translate")
async def translate_entry(
    entry_id: str,
    request: TranslateEntryRequest,
    account: Dict[str, Any] = Depends(get_current_account)
):
    try:
        return await recorder_sessions.translate_entry(account["uid"], entry_id, request.target_lang)
    except EntryNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except JournalError as e:
        raise HTTPException(status_code=400, detail=e.message)
