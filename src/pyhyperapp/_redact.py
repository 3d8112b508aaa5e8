"""Helpers for safe debug logging of request and response bodies."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"authorization", "cookie", "set-cookie", "password", "token"})


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a copy of *value* with secrets masked and long strings cut."""
    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(k): "<redacted>" if str(k).lower() in _SENSITIVE_KEYS else redact_for_log(v, max_string=max_string)
            for k, v in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string) for v in value]

    return value


def redact_body(text: str, *, max_string: int = 256) -> str:
    """Redact a JSON body given as text; non-JSON text is only truncated."""
    try:
        decoded = json.loads(text)
    except ValueError:
        return redact_for_log(text, max_string=max_string)
    return json.dumps(redact_for_log(decoded, max_string=max_string), ensure_ascii=False)
