"""Domain models for sb_identity - pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.sb_common.formatting import display_name


@dataclass
class Identity:
    identity: str  # E.164 phone number
    first_name: str
    last_name: str
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return display_name(self.first_name, self.last_name)
