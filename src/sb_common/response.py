"""Response models shared by every context.

Success bodies are plain payload models (see ``CamelModel``); errors use
the envelope below:
{
    "code": 4004,
    "kind": "DuplicateAcceptance",
    "message": "You have already accepted this wager",
    "data": null,
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Payload base: snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel):
    code: int = 0
    kind: str | None = None
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def error_response(code: int, kind: str, message: str) -> ApiResponse:
    return ApiResponse(code=code, kind=kind, message=message, data=None)
