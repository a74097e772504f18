# app/schemas/auth.py
from typing import Optional

from pydantic import BaseModel, Field


class CredentialsIn(BaseModel):
    # Plain, uncapped strings: any credential problem must surface as the same 401 from the authorizer.
    email: str = ""
    password: str = ""
    callback_url: Optional[str] = Field(default=None, max_length=2048)


class SessionUserOut(BaseModel):
    id: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None


class SessionOut(BaseModel):
    user: Optional[SessionUserOut] = None
    expires: Optional[str] = None


class SignInOut(BaseModel):
    ok: bool = True
    url: str = "/"
    user: SessionUserOut


class ProviderOut(BaseModel):
    id: str
    name: str
    type: str
    signinUrl: str
    callbackUrl: str


class MessageOut(BaseModel):
    message: str
