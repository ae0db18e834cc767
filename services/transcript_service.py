# services/transcript_service.py
"""
Transcript assembly for dictated entries.

The browser's speech recognizer reports a growing list of results, each
either final or still in progress. Final results are tidied up
(capitalization, closing punctuation) and appended to the finalized
transcript; in-progress results only ever replace the interim text.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

SENTENCE_START = re.compile(r"([.!?]\s+)([a-z])")
SENTENCE_END = re.compile(r"[.!?]\Z")


def improve_capitalization(text: str) -> str:
    """Uppercase the first character and the first letter of each sentence"""
    improved = text[:1].upper() + text[1:]
    return SENTENCE_START.sub(lambda m: m.group(1) + m.group(2).upper(), improved)


def finalize_segment(text: str) -> str:
    """Capitalize a final result and close it with a period if needed"""
    improved = improve_capitalization(text)
    if not SENTENCE_END.search(improved):
        improved += "."
    return improved


@dataclass
class SpeechResult:
    transcript: str
    is_final: bool = False


class TranscriptBuffer:
    """Finalized and interim transcript text for one draft"""

    def __init__(self):
        self.final = ""
        self.interim = ""

    def clear(self) -> None:
        self.final = ""
        self.interim = ""

    def has_content(self) -> bool:
        return bool(self.final.strip() or self.interim.strip())

    def apply_results(self, results: List[SpeechResult], result_index: int = 0) -> None:
        """Process recognizer results starting at result_index"""
        current_interim = ""

        for result in results[result_index:]:
            if result.is_final:
                self.final += finalize_segment(result.transcript) + " "
                self.interim = ""
            else:
                current_interim += result.transcript

        if current_interim:
            self.interim = current_interim

    def append_final(self, text: Optional[str]) -> None:
        """Append a whole final result, e.g. from server-side transcription"""
        if text and text.strip():
            self.apply_results([SpeechResult(text.strip(), True)])

    def full_text(self) -> str:
        return self.final.strip()
