"""
Auth form schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class SigninRequest(BaseModel):
    # No bounds here: any bad credential must surface as a 401 from the service.
    email: str = ""
    password: str = ""
