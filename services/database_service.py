# services/database_service.py
"""
Database service for storing journal entries, user profiles and the
username registry.
Uses the hosted Google Cloud SQL (MySQL) database configured in .env.
"""

import pymysql
import os
import logging
from typing import Dict, List, Optional, Any
from datetime import datetime
from dotenv import load_dotenv
import uuid

from services.errors import UsernameTakenError

load_dotenv()

logger = logging.getLogger(__name__)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS users (
        uid VARCHAR(128) PRIMARY KEY,
        username VARCHAR(255) NOT NULL,
        email VARCHAR(320) NOT NULL,
        email_verified BOOLEAN NOT NULL DEFAULT FALSE,
        created_at DATETIME NOT NULL
    ) CHARACTER SET utf8mb4
    """,
    """
    CREATE TABLE IF NOT EXISTS usernames (
        username VARCHAR(255) PRIMARY KEY,
        uid VARCHAR(128) NOT NULL,
        INDEX idx_usernames_uid (uid)
    ) CHARACTER SET utf8mb4
    """,
    """
    CREATE TABLE IF NOT EXISTS entries (
        entry_id VARCHAR(64) PRIMARY KEY,
        user_id VARCHAR(128) NOT NULL,
        title VARCHAR(512) NOT NULL,
        text MEDIUMTEXT NOT NULL,
        language VARCHAR(16) NOT NULL,
        timestamp DATETIME NOT NULL,
        INDEX idx_entries_user (user_id, timestamp)
    ) CHARACTER SET utf8mb4
    """,
]


class DatabaseService:
    """Handles all database operations for profiles and journal entries"""

    def __init__(self):
        self.db_config = {
            'host': os.getenv("GOOGLE_SQL_HOST"),
            'port': int(os.getenv("GOOGLE_SQL_PORT", "3306")),
            'user': os.getenv("GOOGLE_SQL_USER"),
            'password': os.getenv("GOOGLE_SQL_PASSWORD"),
            'database': os.getenv("GOOGLE_SQL_DATABASE"),
            'charset': 'utf8mb4',
            'connect_timeout': 10
        }

    def get_connection(self):
        """Create database connection"""
        return pymysql.connect(**self.db_config)

    def ensure_schema(self) -> None:
        """Create the tables if they do not exist yet"""
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                for statement in SCHEMA:
                    cursor.execute(statement)
            conn.commit()
            logger.info("Database schema ready")
        finally:
            conn.close()

    # ==================== PROFILES ====================

    async def get_profile(self, uid: str) -> Optional[Dict]:
        conn = self.get_connection()
        try:
            with conn.cursor(pymysql.cursors.DictCursor) as cursor:
                sql = "SELECT uid, username, email, email_verified, created_at FROM users WHERE uid = %s"
                cursor.execute(sql, (uid,))
                row = cursor.fetchone()
                if row:
                    row["email_verified"] = bool(row["email_verified"])
                return row
        finally:
            conn.close()

    async def create_profile(self, uid: str, profile: Dict[str, Any]) -> None:
        """Insert the profile and reserve its username in one transaction"""
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO users (uid, username, email, email_verified, created_at)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (uid, profile["username"], profile["email"],
                     profile["email_verified"], profile["created_at"])
                )
                try:
                    cursor.execute(
                        "INSERT INTO usernames (username, uid) VALUES (%s, %s)",
                        (profile["username"].lower(), uid)
                    )
                except pymysql.err.IntegrityError as e:
                    raise UsernameTakenError("Username is already taken") from e
            conn.commit()
            logger.info(f"Created profile for user {uid}")
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    async def mark_email_verified(self, uid: str) -> None:
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute("UPDATE users SET email_verified = TRUE WHERE uid = %s", (uid,))
            conn.commit()
        finally:
            conn.close()

    async def is_username_available(self, username: str) -> bool:
        """True when no registry row holds the lowercased username"""
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute("SELECT uid FROM usernames WHERE username = %s", (username.lower(),))
                return cursor.fetchone() is None
        finally:
            conn.close()

    async def change_username(self, uid: str, new_username: str, old_username: Optional[str]) -> bool:
        """
        Claim the new username for the user and release the old one.

        Returns False when another user holds the lowercased name. The
        registry row is locked for the duration of the transaction.
        """
        new_key = new_username.lower()
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                cursor.execute(
                    "SELECT uid FROM usernames WHERE username = %s FOR UPDATE", (new_key,)
                )
                holder = cursor.fetchone()
                if holder and holder[0] != uid:
                    conn.rollback()
                    return False

                cursor.execute("UPDATE users SET username = %s WHERE uid = %s", (new_username, uid))

                if old_username and old_username != new_username:
                    cursor.execute(
                        "DELETE FROM usernames WHERE username = %s AND uid = %s",
                        (old_username.lower(), uid)
                    )

                cursor.execute(
                    "INSERT INTO usernames (username, uid) VALUES (%s, %s) "
                    "ON DUPLICATE KEY UPDATE uid = VALUES(uid)",
                    (new_key, uid)
                )
            conn.commit()
            return True
        except pymysql.err.IntegrityError:
            conn.rollback()
            return False
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # ==================== JOURNAL ENTRIES ====================

    async def create_entry(
        self,
        user_id: str,
        title: str,
        text: str,
        language: str,
        timestamp: datetime
    ) -> Dict[str, Any]:
        """Save a transcript as a journal entry"""
        entry_id = f"entry-{uuid.uuid4()}"

        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                sql = """
                INSERT INTO entries (entry_id, user_id, title, text, language, timestamp)
                VALUES (%s, %s, %s, %s, %s, %s)
                """
                cursor.execute(sql, (entry_id, user_id, title, text, language, timestamp))
            conn.commit()
            logger.info(f"Created journal entry {entry_id} ({len(text)} chars)")
        finally:
            conn.close()

        return {
            "id": entry_id,
            "user_id": user_id,
            "title": title,
            "text": text,
            "language": language,
            "timestamp": timestamp
        }

    async def get_entry(self, entry_id: str, user_id: str) -> Optional[Dict]:
        conn = self.get_connection()
        try:
            with conn.cursor(pymysql.cursors.DictCursor) as cursor:
                sql = """
                SELECT entry_id AS id, user_id, title, text, language, timestamp
                FROM entries WHERE entry_id = %s AND user_id = %s
                """
                cursor.execute(sql, (entry_id, user_id))
                return cursor.fetchone()
        finally:
            conn.close()

    async def list_user_entries(self, user_id: str) -> List[Dict]:
        """Get all journal entries for a user, newest first"""
        conn = self.get_connection()
        try:
            with conn.cursor(pymysql.cursors.DictCursor) as cursor:
                sql = """
                SELECT entry_id AS id, user_id, title, text, language, timestamp
                FROM entries
                WHERE user_id = %s
                ORDER BY timestamp DESC
                """
                cursor.execute(sql, (user_id,))
                return list(cursor.fetchall())
        finally:
            conn.close()

    async def delete_entry(self, entry_id: str, user_id: str) -> bool:
        """Delete an entry owned by the user. False when nothing matched."""
        conn = self.get_connection()
        try:
            with conn.cursor() as cursor:
                deleted = cursor.execute(
                    "DELETE FROM entries WHERE entry_id = %s AND user_id = %s",
                    (entry_id, user_id)
                )
            conn.commit()
            if deleted:
                logger.info(f"Deleted journal entry {entry_id}")
            return bool(deleted)
        finally:
            conn.close()

# Global instance
database_service = DatabaseService()
