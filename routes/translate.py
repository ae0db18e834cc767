from fastapi import APIRouter, Depends
from typing import Dict, Any

from models.text_input import TextInput
from routes.auth import get_current_account
from services.translation_service import translate_text, get_supported_languages

router = APIRouter()

@router.post("/")
async def translate(input: TextInput, account: Dict[str, Any] = Depends(get_current_account)):
    result = await translate_text(input.text, input.target_lang, input.source_lang)
    return result

@router.get("/")
def supported_languages():
    return {"languages": get_supported_languages()}
