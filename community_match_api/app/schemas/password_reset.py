"""
Pydantic models for the password reset flow.
"""

from typing import Optional

from pydantic import BaseModel, Field, validator


class PasswordResetRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["jana@example.com"])


class PasswordResetIssued(BaseModel):
    """Response to a reset request.

    ``reset_code`` is only present when the code could not be emailed,
    since the caller has no other way to obtain it.
    """

    message: str
    email: str
    reset_code: Optional[str] = Field(None, alias="resetCode")

    model_config = {"populate_by_name": True}


class PasswordResetConfirm(BaseModel):
    email: Optional[str] = None
    reset_code: Optional[str] = Field(None, alias="resetCode", examples=["482913"])
    new_password: Optional[str] = Field(None, alias="newPassword")

    model_config = {"populate_by_name": True}

    @validator("reset_code", pre=True)
    def coerce_code(cls, v):
        # Clients sometimes send the six digits as a JSON number.
        return str(v) if isinstance(v, int) else v
