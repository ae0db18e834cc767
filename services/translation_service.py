# services/translation_service.py
"""
Translation Service for saved journal entries

This service provides MyMemory translation API integration with structured
responses and logging for debugging translation issues.

Key Features:
- Structured response format for consistent data handling
- Recognition language codes (e.g. 'pt-PT') reduced to the primary subtag
- Optional contact email for the higher anonymous quota
- Error messages that can be shown to the user as-is
"""

import requests
import os
from dotenv import load_dotenv
from typing import Dict, Any, List, Optional
import logging

from services.errors import TranslationError

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

MYMEMORY_URL = "https://api.mymemory.translated.net/get"

# Recognition languages offered to the browser's speech recognizer
LANGUAGE_OPTIONS = [
    {"code": "en-US", "name": "English"},
    {"code": "pt-PT", "name": "Portuguese"},
    {"code": "es-ES", "name": "Spanish"},
    {"code": "fr-FR", "name": "French"},
    {"code": "de-DE", "name": "German"},
    {"code": "it-IT", "name": "Italian"},
]

DEFAULT_LANGUAGE = "en-US"


def primary_subtag(lang_code: str) -> str:
    """'pt-PT' -> 'pt'"""
    return lang_code.split("-")[0]


def _result(text: str, source: str, target: str, success: bool,
            error_message: Optional[str] = None) -> Dict[str, Any]:
    return {
        "translated_text": text,
        "source_language": source,
        "target_language": target,
        "success": success,
        "error_message": error_message
    }


async def translate_text(text: str, target_lang: str, source_lang: str = "en") -> Dict[str, Any]:
    """
    Translate text using the MyMemory API.

    Args:
        text (str): The text to translate (a saved transcript)
        target_lang (str): Target language code (e.g. 'es-ES' or 'es')
        source_lang (str): Source language code. MyMemory does not auto-detect.

    Returns:
        Dict[str, Any]: Structured response containing:
            - translated_text: The translated content ("" on failure)
            - source_language: Source language subtag used
            - target_language: Target language subtag used
            - success: Boolean indicating if translation succeeded
            - error_message: Error details if translation failed
    """
    source = primary_subtag(source_lang or DEFAULT_LANGUAGE)
    target = primary_subtag(target_lang or "")

    # Input validation
    if not text or not text.strip():
        logger.warning("Empty text provided for translation")
        return _result("", source, target, False, "No text provided for translation")

    if len(target.strip()) < 2:
        logger.error(f"Invalid target language code: {target_lang}")
        return _result("", source, target, False, "Invalid target language code provided")

    params = {
        "q": text,
        "langpair": f"{source}|{target}"
    }

    # Registering an email raises the daily quota
    contact = os.getenv("MYMEMORY_EMAIL")
    if contact:
        params["de"] = contact

    logger.info(f"Attempting translation {source}->{target} for text length: {len(text)}")

    try:
        response = requests.get(MYMEMORY_URL, params=params, timeout=10)
        data = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Translation request failed: {e}")
        return _result("", source, target, False, f"Translation failed: {e}")

    response_data = data.get("responseData")
    if response_data:
        translated = response_data.get("translatedText", "")
        logger.info(f"Translation successful: {len(translated)} characters")
        return _result(translated, source, target, True)

    logger.warning(f"Translation service returned status {data.get('responseStatus')}")
    return _result("", source, target, False, f"Translation error: {data.get('responseStatus')}")


def get_supported_languages() -> List[Dict[str, str]]:
    """Supported recognition languages, in display order"""
    return list(LANGUAGE_OPTIONS)


def language_name(lang_code: str) -> Optional[str]:
    for option in LANGUAGE_OPTIONS:
        if option["code"] == lang_code:
            return option["name"]
    return None


def validate_language_code(lang_code: str) -> bool:
    """True if lang_code is one of the supported recognition languages"""
    return language_name(lang_code) is not None


def translation_targets(entry_language: str) -> List[Dict[str, str]]:
    """Languages an entry can be translated into (all but its own)"""
    return [option for option in LANGUAGE_OPTIONS if option["code"] != entry_language]


def check_translation_target(entry_language: str, target_lang: str) -> None:
    if not validate_language_code(target_lang):
        raise TranslationError(f"Unsupported language: {target_lang}")
    if target_lang == entry_language:
        raise TranslationError("Entry is already in this language")
