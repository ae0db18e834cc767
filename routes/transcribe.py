from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Dict, Any, Optional

from routes.auth import get_current_account
from services.recorder_service import recorder_sessions
from services.whisper_service import transcribe_audio

router = APIRouter()


@router.post("/")
async def transcribe(
    file: UploadFile = File(...),
    language: Optional[str] = Form(None),
    account: Dict[str, Any] = Depends(get_current_account)
):
    """Transcribe a clip server-side and append it to the user's draft"""
    uid = account["uid"]
    language = language or recorder_sessions.get(uid).language
    result = await transcribe_audio(file, language)

    if result["success"]:
        draft = recorder_sessions.add_transcription(uid, result["text"])
    else:
        draft = recorder_sessions.get(uid)
        draft.error = result["error_message"]

    return {**result, "recorder": draft.snapshot()}
