# services/whisper_service.py
import openai
import os
import logging
from dotenv import load_dotenv
from typing import Optional

from services.translation_service import primary_subtag

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

_client = None


def get_client():
    """OpenAI client, created on first use so the app starts without a key"""
    global _client
    if _client is None:
        _client = openai.OpenAI(api_key=os.getenv("OPENAI_API_KEY"))
    return _client


async def transcribe_audio(file, language: Optional[str] = None):
    """
    Transcribe an uploaded audio clip with OpenAI's Whisper API.

    Used when the browser has no speech recognition of its own. language is
    a recognition language code such as 'pt-PT'; Whisper gets its primary
    subtag as a hint.
    """
    try:
        audio_content = await file.read()

        # Format: (filename, file_content, content_type)
        file_tuple = (file.filename or "audio.webm", audio_content, file.content_type)

        api_params = {
            "model": "whisper-1",
            "file": file_tuple,
            "response_format": "json"
        }

        if language:
            api_params["language"] = primary_subtag(language)

        response = get_client().audio.transcriptions.create(**api_params)
        transcribed_text = response.text.strip()
        logger.info(f"Transcribed {len(audio_content)} bytes into {len(transcribed_text)} characters")

        return {
            "text": transcribed_text,
            "language": language or "auto-detected",
            "success": True,
            "error_message": None
        }

    except Exception as e:
        logger.error(f"Transcription error: {e}")
        return {
            "text": "",
            "language": language or "unknown",
            "success": False,
            "error_message": f"Error during transcription: {e}"
        }
