# routes/recorder.py
"""
Recorder draft endpoints.

The browser page runs speech recognition and forwards each recognizer
event here:
1. /start/ when recording begins
2. /results/ for every 'result' event (final and interim results)
3. /error/ for 'error' events, /stop/ for 'end' events or a manual stop
4. /save/ to store the finalized transcript as a journal entry
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, Any

from models.recorder import RecognitionResults, RecognitionError, TitleUpdate, LanguageChange
from routes.auth import get_current_account
from services.entry_service import present_entry
from services.errors import JournalError, RecorderError
from services.recorder_service import recorder_sessions
from services.transcript_service import SpeechResult
from services.translation_service import get_supported_languages

router = APIRouter()


@router.get("/")
async def recorder_state(account: Dict[str, Any] = Depends(get_current_account)):
    draft = recorder_sessions.get(account["uid"])
    return {**draft.snapshot(), "languages": get_supported_languages()}


@router.post("/start")
async def start(account: Dict[str, Any] = Depends(get_current_account)):
    return recorder_sessions.start(account["uid"]).snapshot()


@router.post("/stop")
async def stop(account: Dict[str, Any] = Depends(get_current_account)):
    return recorder_sessions.stop(account["uid"]).snapshot()


@router.post("/results")
async def results(event: RecognitionResults, account: Dict[str, Any] = Depends(get_current_account)):
    speech_results = [SpeechResult(r.transcript, r.is_final) for r in event.results]
    draft = recorder_sessions.add_results(account["uid"], speech_results, event.result_index)
    return draft.snapshot()


@router.post("/error")
async def recognition_error(event: RecognitionError, account: Dict[str, Any] = Depends(get_current_account)):
    return recorder_sessions.report_error(account["uid"], event.error).snapshot()


@router.put("/title")
async def set_title(update: TitleUpdate, account: Dict[str, Any] = Depends(get_current_account)):
    return recorder_sessions.set_title(account["uid"], update.title).snapshot()


@router.post("/language")
async def change_language(change: LanguageChange, account: Dict[str, Any] = Depends(get_current_account)):
    uid = account["uid"]
    try:
        result = await recorder_sessions.change_language(uid, change.language, change.unsaved_action)
    except RecorderError as e:
        raise HTTPException(status_code=409, detail=e.message)

    saved = result["saved_entry"]
    return {
        **recorder_sessions.get(uid).snapshot(),
        "changed": result["changed"],
        "saved_entry": present_entry(saved) if saved else None
    }


@router.post("/save")
async def save(account: Dict[str, Any] = Depends(get_current_account)):
    try:
        entry = await recorder_sessions.save(account["uid"])
    except JournalError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return {"success": True, "entry": present_entry(entry)}
