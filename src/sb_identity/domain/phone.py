"""Phone-number identity tokens.

The canonical identity is the E.164 form of the user's phone number
(e.g. +12015550123). National-format input is parsed against the
configured default region.
"""

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumberFormat

from config.settings import settings
from src.sb_common.errors import InvalidIdentityError


def _parse(raw: str, region: str | None) -> phonenumbers.PhoneNumber:
    return phonenumbers.parse(raw, region or settings.DEFAULT_PHONE_REGION)


def normalize_phone(raw: str, region: str | None = None) -> str:
    """Return the E.164 identity token for *raw*, or raise InvalidIdentityError."""
    try:
        parsed = _parse(raw, region)
    except NumberParseException as exc:
        raise InvalidIdentityError() from exc
    if not phonenumbers.is_valid_number(parsed):
        raise InvalidIdentityError()
    return phonenumbers.format_number(parsed, PhoneNumberFormat.E164)


def is_valid_phone(raw: str, region: str | None = None) -> bool:
    try:
        return phonenumbers.is_valid_number(_parse(raw, region))
    except NumberParseException:
        return False


def format_for_display(e164: str) -> str:
    """+12015550123 -> '(201) 555-0123'. Unparseable input is returned as-is."""
    try:
        parsed = phonenumbers.parse(e164, None)
    except NumberParseException:
        return e164
    return phonenumbers.format_number(parsed, PhoneNumberFormat.NATIONAL)
