"""Split pasted text into individual email units."""

from __future__ import annotations

import re

# Blank-line runs and single line breaks both delimit units.
_UNIT_BOUNDARY = re.compile(r"\n{2,}|\r?\n")


def split_emails(raw: str | None) -> list[str]:
    """Return the trimmed, non-empty email units found in ``raw``, in order."""
    if not raw:
        return []
    return [unit for unit in (part.strip() for part in _UNIT_BOUNDARY.split(raw)) if unit]
