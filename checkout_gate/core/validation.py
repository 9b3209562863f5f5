"""
Contact Field Validation
------------------------
Pure checks for the three buyer contact fields. Called on every form read and on
every submit, so they stay cheap and side-effect free.

Names: Latin or Cyrillic letters only (no digits, spaces or punctuation).
Phone: no letters at all; after dropping spaces and hyphens, "+" and at least 12 digits.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from checkout_gate.core import messages

FIELD_FIRST_NAME = "firstName"
FIELD_LAST_NAME = "lastName"
FIELD_PHONE = "phone"

# Fixed evaluation order; the first failing field wins ties
FIELD_ORDER = (FIELD_FIRST_NAME, FIELD_LAST_NAME, FIELD_PHONE)

NAME_RE = re.compile(r"[A-Za-zА-Яа-яЁё]+")
PHONE_RE = re.compile(r"\+[0-9]{12,}")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-]")


@dataclass(frozen=True)
class ValidationVerdict:
    isValid: bool
    error: Optional[str] = None


VALID = ValidationVerdict(isValid=True)


def validate_name(text: str) -> ValidationVerdict:
    if text and NAME_RE.fullmatch(text):
        return VALID
    return ValidationVerdict(isValid=False, error=messages.NAME_LETTERS_ONLY)


def _has_letters(text: str) -> bool:
    return any(ch.isalpha() for ch in text)


def validate_phone(text: str) -> ValidationVerdict:
    text = text or ""
    if _has_letters(text):
        return ValidationVerdict(isValid=False, error=messages.PHONE_HAS_LETTERS)

    clean = PHONE_SEPARATORS_RE.sub("", text)
    if PHONE_RE.fullmatch(clean):
        return VALID
    return ValidationVerdict(isValid=False, error=messages.PHONE_PATTERN)


VALIDATORS = {
    FIELD_FIRST_NAME: validate_name,
    FIELD_LAST_NAME: validate_name,
    FIELD_PHONE: validate_phone,
}


def field_verdicts(first_name: str, last_name: str, phone: str) -> List[Tuple[str, ValidationVerdict]]:
    values = {FIELD_FIRST_NAME: first_name, FIELD_LAST_NAME: last_name, FIELD_PHONE: phone}
    return [(name, VALIDATORS[name](values[name])) for name in FIELD_ORDER]


def first_error(first_name: str, last_name: str, phone: str) -> Optional[Tuple[str, str]]:
    """(field, message) of the first invalid field, or None when all three pass."""
    for name, verdict in field_verdicts(first_name, last_name, phone):
        if not verdict.isValid:
            return name, verdict.error
    return None


def display_error(value: str, verdict: ValidationVerdict, attempted_submit: bool) -> Optional[str]:
    # Empty untouched fields stay quiet until the buyer has tried to continue once.
    if (attempted_submit or value) and not verdict.isValid:
        return verdict.error
    return None
