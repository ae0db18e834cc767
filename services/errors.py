# services/errors.py
"""
Exception hierarchy for the journal services.

Every exception carries the message that is shown to the user as-is.
"""


class JournalError(Exception):
    """Base exception for all journal service errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthError(JournalError):
    """Identity provider rejected the request."""
    pass


class EmailNotVerifiedError(AuthError):
    """Account exists but its email address is not verified yet."""
    pass


class ProfileError(JournalError):
    """Invalid username or password change."""
    pass


class EntryError(JournalError):
    """Saving, loading or deleting entries failed."""
    pass


class EntryNotFoundError(EntryError):
    pass


class RecorderError(JournalError):
    """Recorder draft cannot perform the requested transition."""
    pass


class TranslationError(JournalError):
    """Translation request could not be made."""
    pass


class UsernameTakenError(ProfileError):
    """Another user already holds the lowercased username."""
    pass
