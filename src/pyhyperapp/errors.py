"""Conversion of arbitrary failures into one display string."""

from __future__ import annotations

from collections.abc import Mapping

from pyhyperapp._constants import MSG_UNEXPECTED_ERROR


def _text_field(error: object, name: str) -> str | None:
    if isinstance(error, Mapping):
        value = error.get(name)
    else:
        value = getattr(error, name, None)
    if isinstance(value, str) and value:
        return value
    return None


def error_message(error: object) -> str:
    """Return the message to show for *error*.

    Preference order: a non-empty ``details`` string (attribute or mapping
    key), then a non-empty ``message`` string, then ``str()`` of an
    exception, then a fixed fallback.
    """
    for name in ("details", "message"):
        text = _text_field(error, name)
        if text is not None:
            return text

    if isinstance(error, BaseException):
        text = str(error)
        if text:
            return text

    return MSG_UNEXPECTED_ERROR
