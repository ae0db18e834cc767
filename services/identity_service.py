# services/identity_service.py
"""
Identity provider client (Firebase Authentication REST API).

Accounts, passwords and email verification live entirely in the identity
provider. This module only signs users in and out of it and resolves the
bearer tokens the browser sends back on every request.
"""

import requests
import os
import logging
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from services.errors import AuthError, EmailNotVerifiedError

logger = logging.getLogger(__name__)

load_dotenv()

IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1/accounts"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"

VERIFY_EMAIL_SENT = "Verification email sent! Please check your inbox."
SIGNUP_SUCCESS = (
    "Verification email sent! Please check your inbox and verify your email "
    "before logging in."
)
VERIFY_BEFORE_LOGIN = (
    "Please verify your email before logging in. A new verification email has been sent."
)
RESEND_MISSING_FIELDS = "Please enter your email and password first."
RESEND_FAILED = "Could not resend verification email. Please check your credentials."

# Provider error codes mapped to readable messages
ERROR_MESSAGES = {
    "EMAIL_EXISTS": "An account with this email already exists.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "WEAK_PASSWORD": "Password should be at least 6 characters.",
    "MISSING_PASSWORD": "Please enter your password.",
    "EMAIL_NOT_FOUND": "No account found with this email.",
    "INVALID_PASSWORD": "Incorrect password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "USER_DISABLED": "This account has been disabled.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
    "INVALID_ID_TOKEN": "Your session is no longer valid. Please log in again.",
    "TOKEN_EXPIRED": "Your session has expired. Please log in again.",
    "USER_NOT_FOUND": "Your account no longer exists.",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "Please log in again before changing your password.",
    "INVALID_REFRESH_TOKEN": "Your session is no longer valid. Please log in again.",
    "MISSING_REFRESH_TOKEN": "Your session is no longer valid. Please log in again.",
}


class IdentityError(AuthError):
    """Error returned by the identity provider, with its raw code"""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


def _error_from_response(response) -> IdentityError:
    """Build an IdentityError from a provider error payload"""
    try:
        raw = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return IdentityError("UNKNOWN", f"Authentication service error (code: {response.status_code})")

    # Codes may carry a detail suffix, e.g. "WEAK_PASSWORD : Password should be..."
    code = raw.split(" ")[0].strip()
    return IdentityError(code, ERROR_MESSAGES.get(code, raw))


class IdentityService:
    """Thin wrapper over the identity provider's account endpoints"""

    def __init__(self, api_key: Optional[str] = None, timeout: int = 10):
        self.api_key = api_key or os.getenv("FIREBASE_API_KEY")
        self.timeout = timeout

    def _call(self, action: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._post(f"{IDENTITY_URL}:{action}", action, json=payload)

    def _post(self, url: str, action: str, **body) -> Dict[str, Any]:
        if not self.api_key:
            logger.error("Identity provider API key not found in environment variables")
            raise AuthError("Authentication service not configured properly")

        try:
            response = requests.post(
                url,
                params={"key": self.api_key},
                timeout=self.timeout,
                **body
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Identity provider request {action} failed: {e}")
            raise AuthError("Cannot reach the authentication service - please try again") from e

        if response.status_code != 200:
            error = _error_from_response(response)
            logger.warning(f"Identity provider rejected {action}: {error.code}")
            raise error

        return response.json()

    @staticmethod
    def _session(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id_token": data["idToken"],
            "refresh_token": data.get("refreshToken"),
            "uid": data["localId"],
            "email": data.get("email"),
        }

    async def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        """Create an account and send the verification email"""
        data = self._call("signUp", {
            "email": email,
            "password": password,
            "returnSecureToken": True
        })
        await self.send_verification(data["idToken"])
        logger.info(f"Created account {data['localId']}")
        return {"success": True, "message": SIGNUP_SUCCESS}

    async def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """
        Sign in with email and password.

        Unverified accounts get a fresh verification email and are refused.
        """
        session = await self.reauthenticate(email, password)
        account = await self.lookup(session["id_token"])

        if not account["email_verified"]:
            await self.send_verification(session["id_token"])
            raise EmailNotVerifiedError(VERIFY_BEFORE_LOGIN)

        session["email_verified"] = True
        return session

    async def reauthenticate(self, email: str, password: str) -> Dict[str, Any]:
        """Check credentials without any verification gate"""
        data = self._call("signInWithPassword", {
            "email": email,
            "password": password,
            "returnSecureToken": True
        })
        return self._session(data)

    async def resend_verification(self, email: str, password: str) -> Dict[str, Any]:
        if not email or not password:
            raise AuthError(RESEND_MISSING_FIELDS)

        try:
            session = await self.reauthenticate(email, password)
            await self.send_verification(session["id_token"])
        except AuthError as e:
            logger.info(f"Resending verification failed: {e.message}")
            raise AuthError(RESEND_FAILED) from e

        return {"success": True, "message": VERIFY_EMAIL_SENT}

    async def send_verification(self, id_token: str) -> None:
        self._call("sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": id_token})

    async def lookup(self, id_token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the account it belongs to"""
        data = self._call("lookup", {"idToken": id_token})
        users = data.get("users") or []
        if not users:
            raise IdentityError("USER_NOT_FOUND", ERROR_MESSAGES["USER_NOT_FOUND"])

        user = users[0]
        return {
            "uid": user["localId"],
            "email": user.get("email"),
            "email_verified": bool(user.get("emailVerified", False)),
            "id_token": id_token,
        }

    async def update_password(self, id_token: str, new_password: str) -> Dict[str, Any]:
        data = self._call("update", {
            "idToken": id_token,
            "password": new_password,
            "returnSecureToken": True
        })
        return self._session(data)

    async def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """Exchange a refresh token for a fresh id token"""
        if not refresh_token:
            raise IdentityError("MISSING_REFRESH_TOKEN", ERROR_MESSAGES["MISSING_REFRESH_TOKEN"])

        # The token endpoint takes form fields and answers in snake_case
        data = self._post(SECURE_TOKEN_URL, "token", data={
            "grant_type": "refresh_token",
            "refresh_token": refresh_token
        })
        return {
            "id_token": data["id_token"],
            "refresh_token": data.get("refresh_token", refresh_token),
            "uid": data["user_id"],
        }

# Global instance
identity_service = IdentityService()
