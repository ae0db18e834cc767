# services/profile_service.py
"""
User profiles: the display name and account metadata kept next to the
identity provider account, plus the username registry that keeps
usernames unique regardless of case.
"""

import logging
from datetime import datetime
from typing import Dict, Any, Iterator

from services.database_service import database_service
from services.identity_service import identity_service, IdentityError
from services.errors import ProfileError, UsernameTakenError

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def default_username(email: str, uid: str, uid_chars: int = 5) -> str:
    """<email local part>_<first uid_chars characters of the uid>"""
    return f"{email.split('@')[0]}_{uid[:uid_chars]}"


def username_candidates(email: str, uid: str) -> Iterator[str]:
    """Default username first, then longer uid prefixes, then numbered"""
    for uid_chars in (5, 8, len(uid)):
        yield default_username(email, uid, uid_chars)
    for n in range(2, 10):
        yield f"{default_username(email, uid, len(uid))}_{n}"


class ProfileService:

    def __init__(self, database=None, identity=None):
        self.database = database or database_service
        self.identity = identity or identity_service

    async def ensure_profile(self, account: Dict[str, Any]) -> Dict[str, Any]:
        """Return the user's profile, creating it on first login"""
        uid = account["uid"]
        profile = await self.database.get_profile(uid)

        if profile is None:
            return await self._create_profile(account)

        # Only ever flips false -> true
        if not profile["email_verified"] and account["email_verified"]:
            await self.database.mark_email_verified(uid)
            profile["email_verified"] = True

        return profile

    async def _create_profile(self, account: Dict[str, Any]) -> Dict[str, Any]:
        """Create the profile under the first default username nobody holds"""
        uid = account["uid"]
        tried = set()

        for username in username_candidates(account["email"], uid):
            if username.lower() in tried:
                continue
            tried.add(username.lower())

            profile = {
                "uid": uid,
                "username": username,
                "email": account["email"],
                "email_verified": account["email_verified"],
                "created_at": datetime.now()
            }
            try:
                await self.database.create_profile(uid, profile)
            except UsernameTakenError:
                logger.info(f"Default username taken for user {uid}, trying another")
                continue
            return profile

        raise ProfileError("Could not create a profile: no free default username")

    async def is_username_available(self, profile: Dict[str, Any], username: str) -> bool:
        if username == profile.get("username"):
            return True
        return await self.database.is_username_available(username)

    async def update_username(self, profile: Dict[str, Any], username: str) -> Dict[str, Any]:
        if not username.strip() or len(username) < MIN_USERNAME_LENGTH:
            raise ProfileError("Username must be at least 3 characters long")

        if not await self.is_username_available(profile, username):
            raise ProfileError("Username is already taken")

        claimed = await self.database.change_username(profile["uid"], username, profile.get("username"))
        if not claimed:
            raise ProfileError("Username is already taken")

        logger.info(f"User {profile['uid']} changed username")
        return {
            "success": True,
            "message": "Username updated successfully",
            "profile": {**profile, "username": username}
        }

    async def change_password(
        self,
        account: Dict[str, Any],
        current_password: str,
        new_password: str,
        confirm_password: str
    ) -> Dict[str, Any]:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ProfileError("Password must be at least 6 characters long")

        if new_password != confirm_password:
            raise ProfileError("Passwords do not match")

        try:
            session = await self.identity.reauthenticate(account["email"], current_password)
        except IdentityError as e:
            if e.code in ("INVALID_PASSWORD", "INVALID_LOGIN_CREDENTIALS"):
                raise ProfileError("Current password is incorrect") from e
            raise

        updated = await self.identity.update_password(session["id_token"], new_password)
        logger.info(f"User {account['uid']} changed password")
        return {
            "success": True,
            "message": "Password updated successfully",
            "id_token": updated["id_token"],
            "refresh_token": updated.get("refresh_token")
        }

# Global instance
profile_service = ProfileService()
