# services/entry_service.py
"""
Journal entries: saving transcripts, listing and deleting them.
"""

import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from services.database_service import database_service
from services.errors import EntryError, EntryNotFoundError

logger = logging.getLogger(__name__)

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTHS = ["January", "February", "March", "April", "May", "June", "July",
          "August", "September", "October", "November", "December"]


def default_title(now: datetime) -> str:
    """'Journal Entry 10/7/2026' (month/day/year, no zero padding)"""
    return f"Journal Entry {now.month}/{now.day}/{now.year}"


def format_date(date: datetime) -> str:
    """'Saturday, October 17, 2026'"""
    return f"{WEEKDAYS[date.weekday()]}, {MONTHS[date.month - 1]} {date.day}, {date.year}"


def format_time(date: datetime) -> str:
    """24 hour clock, e.g. '09:05'"""
    return date.strftime("%H:%M")


class EntryService:

    def __init__(self, database=None):
        self.database = database or database_service

    async def save_entry(
        self,
        user_id: str,
        text: str,
        language: str,
        title: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        transcript = (text or "").strip()
        if not transcript:
            raise EntryError("Please record something before saving.")

        now = now or datetime.now()
        title = (title or "").strip() or default_title(now)

        try:
            return await self.database.create_entry(
                user_id=user_id,
                title=title,
                text=transcript,
                language=language,
                timestamp=now
            )
        except Exception as e:
            logger.error(f"Saving entry for user {user_id} failed: {e}")
            raise EntryError(f"Failed to save entry: {e}") from e

    async def list_entries(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            entries = await self.database.list_user_entries(user_id)
        except Exception as e:
            logger.error(f"Loading entries for user {user_id} failed: {e}")
            raise EntryError(f"Error loading entries: {e}") from e

        return sorted(entries, key=lambda entry: entry["timestamp"], reverse=True)

    async def get_entry(self, user_id: str, entry_id: str) -> Dict[str, Any]:
        entry = await self.database.get_entry(entry_id, user_id)
        if entry is None:
            raise EntryNotFoundError("Entry not found")
        return entry

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        try:
            deleted = await self.database.delete_entry(entry_id, user_id)
        except Exception as e:
            logger.error(f"Deleting entry {entry_id} failed: {e}")
            raise EntryError(f"Failed to delete entry: {e}") from e

        if not deleted:
            raise EntryNotFoundError("Entry not found")


def present_entry(entry: Dict[str, Any], translation: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Entry as shown in the list: display date/time and cached translation"""
    timestamp = entry["timestamp"]
    return {
        "id": entry["id"],
        "title": entry["title"],
        "text": entry["text"],
        "language": entry["language"],
        "timestamp": timestamp.isoformat(),
        "date": format_date(timestamp),
        "time": format_time(timestamp),
        "translation": translation
    }

# Global instance
entry_service = EntryService()
