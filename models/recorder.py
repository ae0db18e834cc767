from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class SpeechResultIn(BaseModel):
    transcript: str
    is_final: bool = False


class RecognitionResults(BaseModel):
    """One recognizer 'result' event as forwarded by the browser"""
    result_index: int = Field(0, ge=0)
    results: List[SpeechResultIn]


class RecognitionError(BaseModel):
    error: str


class TitleUpdate(BaseModel):
    title: str


class LanguageChange(BaseModel):
    language: str
    unsaved_action: Optional[Literal["save", "discard"]] = None
