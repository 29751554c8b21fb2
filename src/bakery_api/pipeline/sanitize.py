"""
bakery_api.pipeline.sanitize

Blanket free-text sanitization applied before any guard or validator.

Responsibilities:
- Strip HTML-significant angle brackets and control characters from strings.
- Walk nested mappings/lists so every string value is treated the same way.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

# Tab, LF and CR survive; multi-line descriptions are legitimate input.
_UNSAFE = re.compile(r"[<>\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_text(value: str) -> str:
    # Removal happens before trimming so the result never exposes new removable characters.
    return _UNSAFE.sub("", value).strip()


def sanitize_value(value: Any) -> Any:
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, Mapping):
        return sanitize(value)
    if isinstance(value, list):
        return [sanitize_value(v) for v in value]
    return value


def sanitize(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return a sanitized copy of `data`; the input is left untouched.

    Idempotent: sanitize(sanitize(x)) == sanitize(x).
    """

    return {key: sanitize_value(value) for key, value in data.items()}
