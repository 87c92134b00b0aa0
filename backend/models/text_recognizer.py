"""Text recognition — EasyOCR wrapper producing raw card text.

The verification core only ever sees the string returned by
``TextRecognizer.recognize``.  Anything that prevents a usable string
(undecodable image, engine error, nothing legible) is raised as
``RecognitionFailure`` rather than returned as empty text.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from models.errors import InputMissing, RecognitionFailure

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, str, np.ndarray]


# ---------------------------------------------------------------- config ---

@dataclass
class TextRecognizerConfig:
    """Tunable parameters for the recognition module."""
    languages: List[str] = field(default_factory=lambda: ["en"])
    gpu: bool = False
    # Detections below this confidence are dropped
    min_confidence: float = 0.10
    # Boxes whose vertical centres differ by less than this fraction of
    # the box height are joined onto one output line
    line_merge_ratio: float = 0.5


# ---------------------------------------------------------------- result ---

@dataclass
class RecognizedBox:
    text: str = ""
    confidence: float = 0.0
    polygon: Optional[List[List[int]]] = None

    @property
    def top(self) -> float:
        return min(p[1] for p in self.polygon) if self.polygon else 0.0

    @property
    def bottom(self) -> float:
        return max(p[1] for p in self.polygon) if self.polygon else 0.0

    @property
    def left(self) -> float:
        return min(p[0] for p in self.polygon) if self.polygon else 0.0


# -------------------------------------------------------------- helpers ---

def decode_image(image: ImageInput) -> np.ndarray:
    """Load *image* (raw bytes, a file path or a BGR array) as BGR."""
    if image is None:
        raise InputMissing("No image supplied")
    if isinstance(image, np.ndarray):
        if image.size == 0:
            raise InputMissing("Empty image array")
        return image
    if isinstance(image, (bytes, bytearray)):
        if not image:
            raise InputMissing("Empty image upload")
        buf = np.frombuffer(bytes(image), dtype=np.uint8)
        img = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    else:
        if not os.path.isfile(str(image)):
            raise InputMissing(f"Image file not found: {image}")
        img = cv2.imread(str(image))
    if img is None:
        raise RecognitionFailure("Image could not be decoded")
    return img


def boxes_to_text(boxes: Sequence[RecognizedBox], merge_ratio: float = 0.5) -> str:
    """Rebuild reading order: group boxes into rows, rows left to right."""
    rows: List[Tuple[float, float, List[RecognizedBox]]] = []
    for box in sorted(boxes, key=lambda b: (b.top, b.left)):
        centre = (box.top + box.bottom) / 2.0
        height = max(1.0, box.bottom - box.top)
        if rows:
            row_centre, row_height, members = rows[-1]
            if abs(centre - row_centre) < merge_ratio * max(height, row_height):
                members.append(box)
                continue
        rows.append((centre, height, [box]))
    return "\n".join(
        " ".join(b.text for b in sorted(members, key=lambda b: b.left))
        for _, _, members in rows
    )


# ------------------------------------------------------------ recognizer ---

class TextRecognizer:
    """Thin wrapper around EasyOCR.  One reader per process."""

    def __init__(self, cfg: Optional[TextRecognizerConfig] = None):
        self.cfg = cfg or TextRecognizerConfig()
        self._reader = None
        self._lock = threading.Lock()

    def _get_reader(self):
        if self._reader is None:
            with self._lock:
                if self._reader is None:
                    import easyocr
                    logger.info("Loading EasyOCR reader (languages=%s, gpu=%s)",
                                self.cfg.languages, self.cfg.gpu)
                    self._reader = easyocr.Reader(self.cfg.languages, gpu=self.cfg.gpu)
        return self._reader

    def read_boxes(self, image: np.ndarray) -> List[RecognizedBox]:
        reader = self._get_reader()
        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        try:
            raw = reader.readtext(rgb)
        except Exception as exc:
            raise RecognitionFailure(f"OCR engine error: {exc}") from exc
        out: List[RecognizedBox] = []
        for (polygon, text, conf) in raw:
            if conf < self.cfg.min_confidence:
                continue
            pts = [[int(p[0]), int(p[1])] for p in polygon]
            out.append(RecognizedBox(text=text, confidence=float(conf), polygon=pts))
        return out

    def recognize(self, image: ImageInput) -> str:
        """Return the card text, one printed row per line."""
        img = decode_image(image)
        boxes = self.read_boxes(img)
        text = boxes_to_text(boxes, self.cfg.line_merge_ratio)
        if not text.strip():
            raise RecognitionFailure("No text recognised in image")
        logger.debug("Recognised %d boxes, %d characters", len(boxes), len(text))
        return text
