"""ID card OCR model — bridge between an uploaded image and the engine.

Exposes:
    get_recognizer()
    recognize_card(image)
    verify_id_card(image, claim, config)

Called by services/verification_service.py and by verify_document.py.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Optional, Tuple

from models.identity import ClaimedIdentity, VerificationResult
from models.text_recognizer import ImageInput, TextRecognizer, TextRecognizerConfig
from models.verification_engine import VerificationConfig, VerificationEngine

logger = logging.getLogger(__name__)


# Singleton recognizer (lazy-loaded)
_recognizer: Optional[TextRecognizer] = None
_recognizer_lock = threading.Lock()


def recognizer_config_from_env() -> TextRecognizerConfig:
    languages = [l.strip() for l in os.getenv("OCR_LANGUAGES", "en").split(",") if l.strip()]
    return TextRecognizerConfig(
        languages=languages or ["en"],
        gpu=os.getenv("OCR_GPU", "false").lower() in ("1", "true", "yes"),
        min_confidence=float(os.getenv("OCR_MIN_CONFIDENCE", "0.10")),
    )


def get_recognizer(cfg: Optional[TextRecognizerConfig] = None) -> TextRecognizer:
    global _recognizer
    if _recognizer is None:
        with _recognizer_lock:
            if _recognizer is None:
                _recognizer = TextRecognizer(cfg or recognizer_config_from_env())
    return _recognizer


def recognize_card(image: ImageInput) -> str:
    """Raw text of the card; raises InputMissing / RecognitionFailure."""
    return get_recognizer().recognize(image)


def verify_id_card(
    image: ImageInput,
    claim: ClaimedIdentity,
    config: Optional[VerificationConfig] = None,
) -> Tuple[VerificationResult, str]:
    """Run OCR on the card image and verify *claim* against the text.

    Returns the result together with the recognised text so callers can
    show it for troubleshooting.
    """
    raw_text = recognize_card(image)
    logger.debug("OCR text:\n%s", raw_text)
    result = VerificationEngine(config).verify(claim, raw_text)
    return result, raw_text
