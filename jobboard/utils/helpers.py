"""Helper utilities."""

import re
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for storage."""
    # Remove special characters
    sanitized = re.sub(r"[^\w\s.-]", "", filename)
    # Replace spaces with underscores
    sanitized = re.sub(r"\s+", "_", sanitized)
    return sanitized[:255]  # Limit length


def normalize_uuid(value: Optional[str]) -> Optional[str]:
    """Re-hyphenate a compacted 32-character id into 8-4-4-4-12 form.

    Bank transfer memos usually lose punctuation, so everything that is not a
    letter or digit is dropped first. Returns ``None`` unless exactly 32
    characters remain.
    """
    if not value:
        return None
    raw = _NON_ALNUM.sub("", value)
    if len(raw) != 32:
        return None
    return f"{raw[:8]}-{raw[8:12]}-{raw[12:16]}-{raw[16:20]}-{raw[20:]}"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards in user-supplied search text."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
