"""Format checks for claimed identity numbers.

A claimed number that fails its validator is never looked up in the
document text at all.
"""

import re

PAN_RE = re.compile(r"[A-Z]{5}[0-9]{4}[A-Z]")
# Grouped "dddd dddd dddd" is one spelling; any whitespace is dropped first
AADHAAR_RE = re.compile(r"[0-9]{12}")
_WHITESPACE_RE = re.compile(r"\s+")


def validate_pan(value: str) -> bool:
    """True iff *value* is exactly five letters, four digits, one letter.

    Case-sensitive; callers upper-case user input first.
    """
    if not isinstance(value, str):
        return False
    return PAN_RE.fullmatch(value) is not None


def validate_aadhaar(value: str) -> bool:
    """True iff *value* holds exactly 12 ASCII digits once whitespace is removed."""
    if not isinstance(value, str):
        return False
    return AADHAAR_RE.fullmatch(_WHITESPACE_RE.sub("", value)) is not None
