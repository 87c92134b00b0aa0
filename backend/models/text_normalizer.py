"""Text canonicalisation shared by every field matcher.

Two separate canonical forms are produced here:

* ``normalize`` collapses free text (names, ID numbers) to a lower-case
  ``[a-z0-9]`` token.
* ``extract_dates`` / ``format_claimed_date`` produce ``DD/MM/YYYY``
  strings.  Dates are kept apart from ``normalize`` so the separators
  between day, month and year are never collapsed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union


_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

# DD<sep>MM<sep>YYYY where <sep> is a space or tab, "/" or "-"; never a line break
DATE_TOKEN_RE = re.compile(r"\b([0-9]{2})[ \t/\-]([0-9]{2})[ \t/\-]([0-9]{4})\b")


# ---------------------------------------------------------------- types ---

@dataclass(frozen=True)
class DateCandidate:
    """A date-like token found in recognised text."""
    raw: str            # substring as it appears in the source text
    canonical: str      # DD/MM/YYYY
    position: int       # offset of ``raw`` in the source text


# ----------------------------------------------------------- normalizer ---

def normalize(text: Optional[str]) -> str:
    """Lowercase and drop everything that is not an ASCII letter or digit."""
    if not text:
        return ""
    return _NON_ALNUM_RE.sub("", text.lower()).strip()


def split_lines(raw_text: Optional[str]) -> List[str]:
    """Split recognised text into its physical lines (blank ones included)."""
    if not raw_text:
        return []
    return raw_text.splitlines()


# -------------------------------------------------------- date handling ---

def extract_dates(raw_text: Optional[str]) -> List[DateCandidate]:
    """Return every date-like token in order of appearance.

    Duplicates are kept: a card can print the same date twice, and a
    birth date may coincide with another printed date.
    """
    if not raw_text:
        return []
    return [
        DateCandidate(
            raw=m.group(0),
            canonical=f"{m.group(1)}/{m.group(2)}/{m.group(3)}",
            position=m.start(),
        )
        for m in DATE_TOKEN_RE.finditer(raw_text)
    ]


def format_claimed_date(value: Union[date, datetime, str, None]) -> str:
    """Render a claimed date of birth as ``DD/MM/YYYY``.

    Accepts a ``date``/``datetime`` or an ISO ``YYYY-MM-DD`` string (the
    shape an HTML date input submits).  Returns ``""`` for empty input.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        value = date.fromisoformat(value.strip()[:10])
    return value.strftime("%d/%m/%Y")
