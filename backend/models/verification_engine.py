"""Verification engine — claimed identity vs. recognised card text.

Runs the field matchers in a fixed order (name, date of birth, ID
number) and assembles a ``VerificationResult``:

    IDLE -> RUNNING -> SUCCESS    no mandatory field mismatched
                    -> MISMATCH   at least one mandatory field mismatched

Auxiliary fields are extracted only on SUCCESS.  The engine keeps no
state between calls; every ``verify`` builds a fresh run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from models.auxiliary_extractor import extract_auxiliary_fields
from models.errors import InputMissing
from models.field_matcher import (
    DEFAULT_APPROXIMATE_THRESHOLD,
    AadhaarMode,
    FieldMatch,
    MatchStrategy,
    get_strategy,
    match_date_of_birth,
    match_id_number,
    match_name,
)
from models.identity import (
    ClaimedIdentity,
    IdType,
    RecognizedDocument,
    VerificationResult,
    VerificationStatus,
)
from models.text_normalizer import extract_dates

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------- config ---

@dataclass(frozen=True)
class VerificationConfig:
    """Matching policy for one verification."""
    name_strategy: MatchStrategy = MatchStrategy.EXACT_LINE
    # Line strategy for the PAN fallback lookup; None = same as names
    id_line_strategy: Optional[MatchStrategy] = None
    approximate_threshold: float = DEFAULT_APPROXIMATE_THRESHOLD
    aadhaar_mode: AadhaarMode = AadhaarMode.FULL_NUMBER

    def __post_init__(self):
        object.__setattr__(self, "name_strategy", MatchStrategy(self.name_strategy))
        object.__setattr__(self, "aadhaar_mode", AadhaarMode(self.aadhaar_mode))
        if self.id_line_strategy is not None:
            object.__setattr__(self, "id_line_strategy",
                               MatchStrategy(self.id_line_strategy))
        if not 0.0 <= self.approximate_threshold <= 1.0:
            raise ValueError("approximate_threshold must be within [0, 1]")


# ------------------------------------------------------------------ run ---

class RunState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    MISMATCH = "MISMATCH"


MISMATCH_LABELS = {
    "name": "Name",
    "dob": "DOB",
    IdType.PAN: "PAN",
    IdType.AADHAAR: "Aadhaar",
}


class VerificationRun:
    """A single evaluation of one claim against one document."""

    def __init__(self, claim: ClaimedIdentity, document: RecognizedDocument,
                 config: VerificationConfig):
        self.claim = claim
        self.document = document
        self.config = config
        self.state = RunState.IDLE
        self._mismatched: List[str] = []
        self._extracted: Dict[str, str] = {}

    def _record(self, key: str, label: str, outcome: FieldMatch) -> None:
        self._extracted[key] = outcome.display
        if not outcome.matched and label not in self._mismatched:
            self._mismatched.append(label)
        logger.debug("Field %s matched=%s", key, outcome.matched)

    def execute(self) -> VerificationResult:
        if self.state is not RunState.IDLE:
            raise RuntimeError("a verification run can only be executed once")
        self.state = RunState.RUNNING

        cfg = self.config
        claim = self.claim
        raw_text = self.document.raw_text
        lines = self.document.lines

        name_strategy = get_strategy(cfg.name_strategy, cfg.approximate_threshold)
        id_strategy = get_strategy(cfg.id_line_strategy or cfg.name_strategy,
                                   cfg.approximate_threshold)
        id_type = IdType(claim.id_type)

        self._record("name", MISMATCH_LABELS["name"],
                     match_name(claim.name, lines, name_strategy))
        self._record("dob", MISMATCH_LABELS["dob"],
                     match_date_of_birth(claim.date_of_birth, extract_dates(raw_text)))
        self._record(id_type.value, MISMATCH_LABELS[id_type],
                     match_id_number(id_type, claim.id_number, raw_text, lines,
                                     id_strategy, cfg.aadhaar_mode))

        if self._mismatched:
            self.state = RunState.MISMATCH
            status = VerificationStatus.MISMATCH
        else:
            self.state = RunState.SUCCESS
            status = VerificationStatus.SUCCESS
            for key, value in extract_auxiliary_fields(id_type, raw_text).items():
                self._extracted.setdefault(key, value)

        logger.info("Verification finished: %s (mismatched=%s)",
                    status.value, self._mismatched)
        return VerificationResult(
            status=status,
            mismatched_fields=tuple(self._mismatched),
            extracted_fields=dict(self._extracted),
        )


# --------------------------------------------------------------- engine ---

class VerificationEngine:
    """Stateless entry point; safe to share between threads."""

    def __init__(self, config: Optional[VerificationConfig] = None):
        self.config = config or VerificationConfig()

    def verify(self, claim: ClaimedIdentity, raw_text: Optional[str]) -> VerificationResult:
        if raw_text is None or not raw_text.strip():
            raise InputMissing("No document text supplied")
        run = VerificationRun(claim, RecognizedDocument(raw_text), self.config)
        return run.execute()


def verify_identity(claim: ClaimedIdentity, raw_text: Optional[str],
                    config: Optional[VerificationConfig] = None) -> VerificationResult:
    return VerificationEngine(config).verify(claim, raw_text)
