"""Secondary field extraction from already-verified card text.

Each document type owns a table of named patterns.  Within a field the
patterns are tried top to bottom and the first hit wins; a field listed
as not applicable is always reported as ``"N/A"``.  Adding a field or a
document type means adding rows here, not branches in the engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from models.identity import NOT_APPLICABLE, NOT_FOUND, IdType
from models.text_normalizer import DATE_TOKEN_RE


@dataclass(frozen=True)
class FieldPattern:
    """One way of finding one auxiliary field."""
    field: str
    pattern: re.Pattern
    group: int = 1
    clean: Optional[Callable[[str], str]] = None

    def search(self, raw_text: str) -> Optional[str]:
        m = self.pattern.search(raw_text)
        if m is None:
            return None
        value = m.group(self.group).strip()
        if self.clean is not None:
            value = self.clean(value)
        return value or None


def _collapse_spaces(value: str) -> str:
    return " ".join(value.split())


def _canonical_date(value: str) -> str:
    m = DATE_TOKEN_RE.search(value)
    return f"{m.group(1)}/{m.group(2)}/{m.group(3)}" if m else value


_I = re.IGNORECASE

# ------------------------------------------------------------- patterns ---

PAN_PATTERNS: Tuple[FieldPattern, ...] = (
    # Label and value usually sit on separate lines on PAN cards
    FieldPattern("father_name", re.compile(
        r"Father['’]?s?\s*Name[ \t]*[:\-]?[ \t]*\n?[ \t]*([^\n]+)", _I), clean=_collapse_spaces),
    FieldPattern("father_name", re.compile(
        r"\bS[ \t]*/[ \t]*O\b[ \t]*[:\-]?[ \t]*\n?[ \t]*([^\n]+)", _I), clean=_collapse_spaces),
    FieldPattern("issue_date", re.compile(
        r"(?:Date\s+of\s+Issue|Issue\s+Date|\bDOI\b)\s*[:\-]?\s*"
        r"([0-9]{2}[ \t/\-][0-9]{2}[ \t/\-][0-9]{4})", _I), clean=_canonical_date),
)

AADHAAR_PATTERNS: Tuple[FieldPattern, ...] = (
    FieldPattern("gender", re.compile(r"\b(Male|Female|Other)\b", _I),
                 clean=str.title),
    FieldPattern("mobile", re.compile(r"\b([6-9][0-9]{9})\b")),
    FieldPattern("address", re.compile(
        r"\bAddress[ \t]*[:\-]?[ \t]*\n?[ \t]*([^\n]+)", _I), clean=_collapse_spaces),
)

PATTERN_TABLE: Dict[IdType, Tuple[FieldPattern, ...]] = {
    IdType.PAN: PAN_PATTERNS,
    IdType.AADHAAR: AADHAAR_PATTERNS,
}

# Fields reported for every document; those without patterns are N/A.
AUXILIARY_FIELDS: Dict[IdType, Tuple[str, ...]] = {
    IdType.PAN: ("father_name", "issue_date", "gender", "mobile", "address"),
    IdType.AADHAAR: ("gender", "mobile", "address", "father_name"),
}


def _applicable_fields(patterns: Sequence[FieldPattern]) -> Tuple[str, ...]:
    seen = []
    for p in patterns:
        if p.field not in seen:
            seen.append(p.field)
    return tuple(seen)


def extract_auxiliary_fields(id_type: IdType, raw_text: str) -> Dict[str, str]:
    """Best-effort extraction; absent values become ``"Not Found"``."""
    id_type = IdType(id_type)
    patterns = PATTERN_TABLE.get(id_type, ())
    applicable = _applicable_fields(patterns)

    out: Dict[str, str] = {}
    for name in AUXILIARY_FIELDS.get(id_type, applicable):
        if name not in applicable:
            out[name] = NOT_APPLICABLE
            continue
        value = None
        for p in patterns:
            if p.field != name:
                continue
            value = p.search(raw_text or "")
            if value:
                break
        out[name] = value or NOT_FOUND
    return out
