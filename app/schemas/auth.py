from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class LoginRequest(BaseModel):
    # Either the username or the email address
    username: str
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str
