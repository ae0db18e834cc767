"""
Pytest configuration and fixtures for the journal service tests.

The hosted database and the identity provider are replaced with in-memory
fakes that implement the same async methods as the real services.
"""

import copy
import uuid

import pytest

from services.identity_service import IdentityError, ERROR_MESSAGES, SIGNUP_SUCCESS, VERIFY_BEFORE_LOGIN
from services.errors import AuthError, EmailNotVerifiedError, UsernameTakenError


class FakeDatabase:
    def __init__(self):
        self.users = {}
        self.usernames = {}
        self.entries = {}
        self.fail_with = None

    def _maybe_fail(self):
        if self.fail_with:
            raise self.fail_with

    async def get_profile(self, uid):
        profile = self.users.get(uid)
        return copy.deepcopy(profile) if profile else None

    async def create_profile(self, uid, profile):
        if profile["username"].lower() in self.usernames:
            raise UsernameTakenError("Username is already taken")
        self.users[uid] = dict(profile)
        self.usernames[profile["username"].lower()] = uid

    async def mark_email_verified(self, uid):
        self.users[uid]["email_verified"] = True

    async def is_username_available(self, username):
        return username.lower() not in self.usernames

    async def change_username(self, uid, new_username, old_username):
        holder = self.usernames.get(new_username.lower())
        if holder and holder != uid:
            return False
        self.users[uid]["username"] = new_username
        if old_username and old_username != new_username:
            self.usernames.pop(old_username.lower(), None)
        self.usernames[new_username.lower()] = uid
        return True

    async def create_entry(self, user_id, title, text, language, timestamp):
        self._maybe_fail()
        entry = {
            "id": f"entry-{uuid.uuid4()}",
            "user_id": user_id,
            "title": title,
            "text": text,
            "language": language,
            "timestamp": timestamp,
        }
        self.entries[entry["id"]] = entry
        return dict(entry)

    async def get_entry(self, entry_id, user_id):
        entry = self.entries.get(entry_id)
        if entry and entry["user_id"] == user_id:
            return dict(entry)
        return None

    async def list_user_entries(self, user_id):
        self._maybe_fail()
        return [dict(e) for e in self.entries.values() if e["user_id"] == user_id]

    async def delete_entry(self, entry_id, user_id):
        self._maybe_fail()
        entry = self.entries.get(entry_id)
        if entry and entry["user_id"] == user_id:
            del self.entries[entry_id]
            return True
        return False


class FakeIdentity:
    """Accounts keyed by email; tokens are 'token-<uid>'"""

    def __init__(self):
        self.accounts = {}
        self.verification_emails = []

    def add_account(self, email, password, verified=True, uid=None):
        uid = uid or uuid.uuid4().hex
        self.accounts[email] = {"uid": uid, "email": email, "password": password, "verified": verified}
        return f"token-{uid}"

    def _by_token(self, id_token):
        for account in self.accounts.values():
            if id_token == f"token-{account['uid']}":
                return account
        raise IdentityError("INVALID_ID_TOKEN", ERROR_MESSAGES["INVALID_ID_TOKEN"])

    async def sign_up(self, email, password):
        if email in self.accounts:
            raise IdentityError("EMAIL_EXISTS", ERROR_MESSAGES["EMAIL_EXISTS"])
        self.add_account(email, password, verified=False)
        self.verification_emails.append(email)
        return {"success": True, "message": SIGNUP_SUCCESS}

    async def reauthenticate(self, email, password):
        account = self.accounts.get(email)
        if not account or account["password"] != password:
            raise IdentityError("INVALID_LOGIN_CREDENTIALS", ERROR_MESSAGES["INVALID_LOGIN_CREDENTIALS"])
        return {"id_token": f"token-{account['uid']}", "refresh_token": f"refresh-{account['uid']}",
                "uid": account["uid"], "email": email}

    async def sign_in(self, email, password):
        session = await self.reauthenticate(email, password)
        if not self.accounts[email]["verified"]:
            self.verification_emails.append(email)
            raise EmailNotVerifiedError(VERIFY_BEFORE_LOGIN)
        session["email_verified"] = True
        return session

    async def resend_verification(self, email, password):
        if not email or not password:
            raise AuthError("Please enter your email and password first.")
        try:
            await self.reauthenticate(email, password)
        except AuthError as e:
            raise AuthError("Could not resend verification email. Please check your credentials.") from e
        self.verification_emails.append(email)
        return {"success": True, "message": "Verification email sent! Please check your inbox."}

    async def lookup(self, id_token):
        account = self._by_token(id_token)
        return {"uid": account["uid"], "email": account["email"],
                "email_verified": account["verified"], "id_token": id_token}

    async def update_password(self, id_token, new_password):
        account = self._by_token(id_token)
        account["password"] = new_password
        return {"id_token": id_token, "refresh_token": f"refresh-{account['uid']}",
                "uid": account["uid"], "email": account["email"]}

    async def refresh(self, refresh_token):
        for account in self.accounts.values():
            if refresh_token == f"refresh-{account['uid']}":
                return {"id_token": f"token-{account['uid']}", "refresh_token": refresh_token,
                        "uid": account["uid"]}
        raise IdentityError("INVALID_REFRESH_TOKEN", ERROR_MESSAGES["INVALID_REFRESH_TOKEN"])


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_identity():
    return FakeIdentity()


@pytest.fixture
def app_client(monkeypatch, fake_db, fake_identity):
    """TestClient with every service wired to the fakes"""
    from fastapi.testclient import TestClient

    import main
    import routes.auth
    from services.entry_service import entry_service
    from services.profile_service import profile_service
    from services.recorder_service import recorder_sessions

    monkeypatch.setattr(routes.auth, "identity_service", fake_identity)
    monkeypatch.setattr(profile_service, "database", fake_db)
    monkeypatch.setattr(profile_service, "identity", fake_identity)
    monkeypatch.setattr(entry_service, "database", fake_db)
    monkeypatch.setattr(recorder_sessions, "drafts", {})

    # startup events are not run without the context manager, so no schema init
    return TestClient(main.app)


@pytest.fixture
def auth_headers(fake_identity):
    token = fake_identity.add_account("ana@example.com", "secret123", uid="uid-ana-0001")
    return {"Authorization": f"Bearer {token}"}
