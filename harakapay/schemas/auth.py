"""Sign-in, registration and password schemas."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


class LoginRequest(BaseModel):
    """Payload for password sign-in attempts."""

    email: EmailStr
    password: str


class SessionRead(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[int] = None
    user_id: str
    email: Optional[str] = None


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    """Parent self-registration.

    ``pin`` is the six-digit code parents sign in with; longer passwords are
    accepted as they are. Without an email the account is keyed on the phone
    number.
    """

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str
    email: Optional[EmailStr] = None
    pin: str = Field(min_length=6)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("pin")
    @classmethod
    def check_pin(cls, value: str) -> str:
        if len(value) == 6 and not (value.isascii() and value.isdigit()):
            raise ValueError("PIN must contain only digits")
        return value


class RegistrationRead(BaseModel):
    user_id: Optional[str] = None
    email: str
    phone: str
    confirmation_required: bool
    profile_created: bool = False
    session: Optional[SessionRead] = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class MessageRead(BaseModel):
    detail: str
