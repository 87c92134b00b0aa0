"""Value types passed into and out of the verification core."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Tuple

from models.text_normalizer import split_lines


NOT_FOUND = "Not Found"
NOT_APPLICABLE = "N/A"


class IdType(str, Enum):
    PAN = "pan"
    AADHAAR = "aadhaar"


class VerificationStatus(str, Enum):
    SUCCESS = "SUCCESS"
    MISMATCH = "MISMATCH"


@dataclass(frozen=True)
class ClaimedIdentity:
    """What the user says is printed on the card."""
    name: str
    date_of_birth: date
    id_type: IdType
    id_number: str


@dataclass(frozen=True)
class RecognizedDocument:
    """Raw text recovered from one card image.  Read-only evidence."""
    raw_text: str

    @property
    def lines(self) -> List[str]:
        return split_lines(self.raw_text)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of one verification call.

    ``mismatched_fields`` keeps evaluation order (name, DOB, ID number)
    and never holds duplicates.  ``extracted_fields`` is read-only.
    """
    status: VerificationStatus
    mismatched_fields: Tuple[str, ...] = ()
    extracted_fields: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not isinstance(self.extracted_fields, MappingProxyType):
            object.__setattr__(self, "extracted_fields",
                               MappingProxyType(dict(self.extracted_fields)))
        object.__setattr__(self, "mismatched_fields",
                           tuple(self.mismatched_fields))

    @property
    def is_success(self) -> bool:
        return self.status is VerificationStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "mismatched_fields": list(self.mismatched_fields),
            "extracted_fields": dict(self.extracted_fields),
        }
