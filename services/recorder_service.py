# services/recorder_service.py
"""
Per-user recording drafts.

Speech recognition runs in the browser; the page forwards recognizer
events here so the draft (transcript, title, language, last error) and the
translations shown next to saved entries survive page reloads. Drafts are
kept in memory and are discarded on logout.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from services.entry_service import entry_service
from services.errors import RecorderError, JournalError
from services.transcript_service import TranscriptBuffer, SpeechResult
from services.translation_service import (
    DEFAULT_LANGUAGE,
    translate_text,
    validate_language_code,
    check_translation_target,
    language_name,
)

logger = logging.getLogger(__name__)

UNSAVED_PROMPT = "You have unsaved content. Do you want to save it before changing languages?"


@dataclass
class RecorderDraft:
    user_id: str
    language: str = DEFAULT_LANGUAGE
    is_recording: bool = False
    title: str = ""
    error: str = ""
    transcript: TranscriptBuffer = field(default_factory=TranscriptBuffer)
    # entry id -> {"lang": ..., "text": ...}
    translations: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "language": self.language,
            "is_recording": self.is_recording,
            "final_transcript": self.transcript.final,
            "interim_transcript": self.transcript.interim,
            "title": self.title,
            "error": self.error,
        }


class RecorderSessionManager:
    """Keeps one recording draft per signed-in user"""

    def __init__(self, entries=None):
        self.entries = entries or entry_service
        self.drafts: Dict[str, RecorderDraft] = {}

    def get(self, user_id: str) -> RecorderDraft:
        draft = self.drafts.get(user_id)
        if draft is None:
            draft = RecorderDraft(user_id=user_id)
            self.drafts[user_id] = draft
        return draft

    def discard(self, user_id: str) -> None:
        self.drafts.pop(user_id, None)

    def start(self, user_id: str) -> RecorderDraft:
        draft = self.get(user_id)
        draft.error = ""
        draft.transcript.clear()
        draft.is_recording = True
        return draft

    def stop(self, user_id: str) -> RecorderDraft:
        draft = self.get(user_id)
        draft.is_recording = False
        return draft

    def add_results(self, user_id: str, results: List[SpeechResult], result_index: int = 0) -> RecorderDraft:
        draft = self.get(user_id)
        draft.transcript.apply_results(results, result_index)
        return draft

    def add_transcription(self, user_id: str, text: str) -> RecorderDraft:
        """Append server-side transcribed audio as one final result"""
        draft = self.get(user_id)
        draft.transcript.append_final(text)
        return draft

    def report_error(self, user_id: str, code: str) -> RecorderDraft:
        draft = self.get(user_id)
        draft.error = f"Speech recognition error: {code}"
        draft.is_recording = False
        logger.info(f"Recognition error for user {user_id}: {code}")
        return draft

    def set_title(self, user_id: str, title: str) -> RecorderDraft:
        draft = self.get(user_id)
        draft.title = title
        return draft

    async def save(self, user_id: str) -> Dict[str, Any]:
        draft = self.get(user_id)
        try:
            entry = await self.entries.save_entry(
                user_id=user_id,
                text=draft.transcript.full_text(),
                title=draft.title,
                language=draft.language
            )
        except JournalError as e:
            draft.error = e.message
            raise

        draft.transcript.clear()
        draft.title = ""
        draft.error = ""
        return entry

    async def change_language(
        self,
        user_id: str,
        language: str,
        unsaved_action: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Switch the recognition language.

        A draft with unsaved text needs an explicit unsaved_action: "save"
        stores it first, "discard" drops it. Either way the transcript is
        cleared before switching.
        """
        draft = self.get(user_id)
        if draft.language == language:
            return {"changed": False, "saved_entry": None}

        if not validate_language_code(language):
            raise RecorderError(f"Unsupported language: {language}")

        if draft.is_recording:
            raise RecorderError("Stop recording before changing languages.")

        saved_entry = None
        if draft.transcript.has_content():
            if unsaved_action == "save":
                try:
                    saved_entry = await self.save(user_id)
                except JournalError:
                    # the failed save leaves its message on the draft
                    pass
            elif unsaved_action != "discard":
                raise RecorderError(UNSAVED_PROMPT)

        draft.transcript.clear()
        draft.language = language
        return {"changed": True, "saved_entry": saved_entry}

    async def translate_entry(self, user_id: str, entry_id: str, target_lang: str) -> Dict[str, Any]:
        """Translate a saved entry and cache the result for the entry list"""
        entry = await self.entries.get_entry(user_id, entry_id)
        check_translation_target(entry["language"], target_lang)

        result = await translate_text(entry["text"], target_lang, entry["language"])
        draft = self.get(user_id)

        if result["success"]:
            draft.translations[entry_id] = {
                "lang": target_lang,
                "name": language_name(target_lang),
                "text": result["translated_text"]
            }
        else:
            draft.error = result["error_message"]

        return result

    def translation_for(self, user_id: str, entry_id: str) -> Optional[Dict[str, str]]:
        draft = self.drafts.get(user_id)
        if draft is None:
            return None
        return draft.translations.get(entry_id)

    def forget_entry(self, user_id: str, entry_id: str) -> None:
        draft = self.drafts.get(user_id)
        if draft is not None:
            draft.translations.pop(entry_id, None)

# Global instance
recorder_sessions = RecorderSessionManager()
