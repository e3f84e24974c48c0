"""Pydantic request/response schemas for sb_identity."""

from pydantic import Field

from src.sb_common.response import CamelModel


class SessionRequest(CamelModel):
    phone_number: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class SessionResponse(CamelModel):
    normalized_identity: str
    first_name: str
    last_name: str
