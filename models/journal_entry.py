from typing import Optional
from pydantic import BaseModel, field_validator

from services.translation_service import validate_language_code


class JournalEntry(BaseModel):
    text: str
    title: Optional[str] = None
    language: str = "en-US"

    @field_validator("language")
    @classmethod
    def supported_language(cls, value: str) -> str:
        if not validate_language_code(value):
            raise ValueError(f"Unsupported language: {value}")
        return value


class TranslateEntryRequest(BaseModel):
    target_lang: str
