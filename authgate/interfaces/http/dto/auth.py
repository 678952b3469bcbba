from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CredentialsFormDTO(BaseModel):
    """Fields posted by the login and signup forms."""

    model_config = ConfigDict(str_strip_whitespace=False, extra="ignore")

    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=1024)


class LoginFormDTO(CredentialsFormDTO):
    pass


class SignupFormDTO(CredentialsFormDTO):
    pass
