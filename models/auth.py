from pydantic import BaseModel


class Credentials(BaseModel):
    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class UsernameUpdate(BaseModel):
    username: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str
    confirm_password: str
