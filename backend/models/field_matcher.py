"""Field matching — decides whether a claimed field is printed on the card.

Free-text lookups (names, and PAN numbers as a fallback) go through a
line-matching strategy chosen by configuration:

    EXACT_LINE   normalised claim equals a whole normalised line
    SUBSTRING    normalised claim occurs inside a normalised line
    APPROXIMATE  best normalised line is within an edit-distance ratio

Aadhaar numbers have two lookup modes of their own (full number or last
four digits).  Every ``match_*`` function returns a ``FieldMatch`` and
never raises for a missing or malformed claim.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Type

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from models.field_validator import validate_aadhaar, validate_pan
from models.identity import NOT_FOUND, IdType
from models.text_normalizer import DateCandidate, format_claimed_date, normalize

logger = logging.getLogger(__name__)

DEFAULT_APPROXIMATE_THRESHOLD = 0.3

_STRICT_AADHAAR_LINE_RE = re.compile(r"[0-9]{12}|[0-9]{4} [0-9]{4} [0-9]{4}")
_LAST_FOUR_RE = re.compile(r"[0-9]{4}")
_WHITESPACE_RE = re.compile(r"\s+")


class MatchStrategy(str, Enum):
    EXACT_LINE = "exact_line"
    SUBSTRING = "substring"
    APPROXIMATE = "approximate"


class AadhaarMode(str, Enum):
    FULL_NUMBER = "full_number"
    LAST_FOUR = "last_four"


@dataclass(frozen=True)
class FieldMatch:
    matched: bool
    display: str

    @classmethod
    def found(cls, display: str) -> "FieldMatch":
        return cls(True, display)

    @classmethod
    def missing(cls) -> "FieldMatch":
        return cls(False, NOT_FOUND)


# ------------------------------------------------------------ strategies ---

class LineMatchStrategy(ABC):
    """Looks for a normalised target among normalised document lines."""

    name: MatchStrategy

    def matches(self, target: str, lines: Iterable[str]) -> bool:
        token = normalize(target)
        if not token:
            return False
        candidates = [n for n in (normalize(line) for line in lines) if n]
        if not candidates:
            return False
        return self._matches(token, candidates)

    @abstractmethod
    def _matches(self, token: str, candidates: List[str]) -> bool:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ExactLineStrategy(LineMatchStrategy):
    """Strict: a line must consist of the claim and nothing else."""

    name = MatchStrategy.EXACT_LINE

    def _matches(self, token: str, candidates: List[str]) -> bool:
        return token in candidates


class SubstringStrategy(LineMatchStrategy):
    """Lenient: the claim may sit inside a longer line."""

    name = MatchStrategy.SUBSTRING

    def _matches(self, token: str, candidates: List[str]) -> bool:
        return any(token in line for line in candidates)


class ApproximateStrategy(LineMatchStrategy):
    """Edit-distance search tolerant of OCR confusions such as 0/O.

    ``threshold`` is the largest accepted normalised Levenshtein distance
    (0.0 = identical, 1.0 = nothing in common).
    """

    name = MatchStrategy.APPROXIMATE

    def __init__(self, threshold: float = DEFAULT_APPROXIMATE_THRESHOLD):
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self.threshold = threshold

    def _matches(self, token: str, candidates: List[str]) -> bool:
        best = process.extractOne(
            token,
            candidates,
            scorer=Levenshtein.normalized_distance,
            score_cutoff=self.threshold,
        )
        if best is None:
            return False
        logger.debug("Approximate match %r ~ %r (distance %.3f)",
                     token, best[0], best[1])
        return True

    def __repr__(self) -> str:
        return f"ApproximateStrategy(threshold={self.threshold})"


STRATEGY_REGISTRY: Dict[MatchStrategy, Type[LineMatchStrategy]] = {
    MatchStrategy.EXACT_LINE: ExactLineStrategy,
    MatchStrategy.SUBSTRING: SubstringStrategy,
    MatchStrategy.APPROXIMATE: ApproximateStrategy,
}


def get_strategy(strategy, threshold: float = DEFAULT_APPROXIMATE_THRESHOLD) -> LineMatchStrategy:
    """Build a strategy from a ``MatchStrategy`` (or its string value)."""
    if isinstance(strategy, LineMatchStrategy):
        return strategy
    key = MatchStrategy(strategy)
    if key is MatchStrategy.APPROXIMATE:
        return ApproximateStrategy(threshold)
    return STRATEGY_REGISTRY[key]()


# ------------------------------------------------------- field matchers ---

def match_name(claimed_name: str, lines: Sequence[str],
               strategy: Optional[LineMatchStrategy] = None) -> FieldMatch:
    strategy = strategy or ExactLineStrategy()
    if strategy.matches(claimed_name, lines):
        return FieldMatch.found(claimed_name.strip())
    return FieldMatch.missing()


def match_date_of_birth(claimed_dob: date,
                        candidates: Sequence[DateCandidate]) -> FieldMatch:
    """Exact comparison of canonical dates; no tolerance for a wrong digit."""
    expected = format_claimed_date(claimed_dob)
    if expected and any(c.canonical == expected for c in candidates):
        return FieldMatch.found(expected)
    return FieldMatch.missing()


def match_pan(claimed: str, text: str, lines: Sequence[str],
              strategy: Optional[LineMatchStrategy] = None) -> FieldMatch:
    pan = (claimed or "").strip().upper()
    if not validate_pan(pan):
        logger.info("Claimed PAN failed format validation")
        return FieldMatch.missing()
    strategy = strategy or ExactLineStrategy()
    if normalize(pan) in normalize(text) or strategy.matches(pan, lines):
        return FieldMatch.found(pan)
    return FieldMatch.missing()


def match_aadhaar_full(claimed: str, text: str) -> FieldMatch:
    if not validate_aadhaar(claimed or ""):
        logger.info("Claimed Aadhaar number failed format validation")
        return FieldMatch.missing()
    digits = _WHITESPACE_RE.sub("", claimed)
    if digits in normalize(text):
        return FieldMatch.found(claimed.strip())
    return FieldMatch.missing()


def mask_aadhaar(last_four: str) -> str:
    return f"XXXX XXXX {last_four}"


def match_aadhaar_last_four(claimed: str, lines: Sequence[str]) -> FieldMatch:
    """Compare the last four digits against lines that are *only* an Aadhaar.

    Lines carrying anything besides the number (labels, phone numbers,
    longer digit runs) are ignored.
    """
    last_four = (claimed or "").strip()
    if not _LAST_FOUR_RE.fullmatch(last_four):
        logger.info("Aadhaar last-four claim is not exactly four digits")
        return FieldMatch.missing()
    for line in lines:
        stripped = line.strip()
        if _STRICT_AADHAAR_LINE_RE.fullmatch(stripped) and stripped[-4:] == last_four:
            return FieldMatch.found(mask_aadhaar(last_four))
    return FieldMatch.missing()


def match_id_number(id_type: IdType, claimed_number: str, text: str,
                    lines: Sequence[str],
                    strategy: Optional[LineMatchStrategy] = None,
                    aadhaar_mode: AadhaarMode = AadhaarMode.FULL_NUMBER) -> FieldMatch:
    id_type = IdType(id_type)
    if id_type is IdType.PAN:
        return match_pan(claimed_number, text, lines, strategy)
    if AadhaarMode(aadhaar_mode) is AadhaarMode.LAST_FOUR:
        return match_aadhaar_last_four(claimed_number, lines)
    return match_aadhaar_full(claimed_number, text)
