"""
ID document verification service.

Translates API payloads into core types, applies the deployment's
matching policy (overridable per request) and shapes the response the
frontend renders: status, mismatch list and extracted-field table.
"""

import logging
import os
from typing import Any, Dict, Optional

from models.field_matcher import AadhaarMode, MatchStrategy
from models.id_card_ocr_model import verify_id_card
from models.identity import ClaimedIdentity, IdType, VerificationResult
from models.text_recognizer import ImageInput
from models.verification_engine import VerificationConfig, verify_identity
from schemas.verify_schemas import ClaimSchema, MatchOptionsSchema

logger = logging.getLogger("idverify.verify")

# ── Configuration ──────────────────────────────────────────────────────────────
NAME_MATCH_STRATEGY = MatchStrategy(os.getenv("NAME_MATCH_STRATEGY", "exact_line"))
APPROXIMATE_THRESHOLD = float(os.getenv("APPROXIMATE_THRESHOLD", "0.3"))
AADHAAR_MATCH_MODE = AadhaarMode(os.getenv("AADHAAR_MATCH_MODE", "full_number"))

DEFAULT_CONFIG = VerificationConfig(
    name_strategy=NAME_MATCH_STRATEGY,
    approximate_threshold=APPROXIMATE_THRESHOLD,
    aadhaar_mode=AADHAAR_MATCH_MODE,
)


def build_config(options: Optional[MatchOptionsSchema] = None) -> VerificationConfig:
    """Server defaults with any per-request overrides applied."""
    if options is None:
        return DEFAULT_CONFIG
    return VerificationConfig(
        name_strategy=options.name_strategy or DEFAULT_CONFIG.name_strategy,
        id_line_strategy=DEFAULT_CONFIG.id_line_strategy,
        approximate_threshold=(
            options.approximate_threshold
            if options.approximate_threshold is not None
            else DEFAULT_CONFIG.approximate_threshold
        ),
        aadhaar_mode=options.aadhaar_mode or DEFAULT_CONFIG.aadhaar_mode,
    )


def build_claim(payload: ClaimSchema) -> ClaimedIdentity:
    return ClaimedIdentity(
        name=payload.name.strip(),
        date_of_birth=payload.date_of_birth,
        id_type=IdType(payload.id_type),
        id_number=payload.id_number.strip(),
    )


def _response(result: VerificationResult, claim: ClaimedIdentity,
              config: VerificationConfig, raw_text: Optional[str] = None) -> Dict[str, Any]:
    body = result.to_dict()
    body["name_strategy"] = config.name_strategy.value
    # Aadhaar lookups differ per mode, so the one used is always reported
    body["aadhaar_mode"] = (
        config.aadhaar_mode.value if claim.id_type is IdType.AADHAAR else None
    )
    if raw_text is not None:
        body["raw_text"] = raw_text
    return body


def verify_text_submission(payload, raw_text: Optional[str]) -> Dict[str, Any]:
    """Verify a claim against text the caller has already recognised.

    Raises InputMissing when *raw_text* is blank.
    """
    claim = build_claim(payload)
    config = build_config(payload)
    logger.info("Text verification: id_type=%s strategy=%s",
                claim.id_type.value, config.name_strategy.value)
    result = verify_identity(claim, raw_text, config)
    return _response(result, claim, config)


def verify_image_submission(image: ImageInput, payload) -> Dict[str, Any]:
    """OCR the card image and verify the claim against its text.

    Raises InputMissing for an absent image and RecognitionFailure when
    the recognition engine cannot read it.
    """
    claim = build_claim(payload)
    config = build_config(payload)
    logger.info("Image verification: id_type=%s strategy=%s",
                claim.id_type.value, config.name_strategy.value)
    result, raw_text = verify_id_card(image, claim, config)
    return _response(result, claim, config, raw_text)


def current_config() -> Dict[str, Any]:
    return {
        "name_strategy": DEFAULT_CONFIG.name_strategy.value,
        "approximate_threshold": DEFAULT_CONFIG.approximate_threshold,
        "aadhaar_mode": DEFAULT_CONFIG.aadhaar_mode.value,
    }
