"""Splitting and trimming of raw serial text."""

from __future__ import annotations

from typing import Optional, Tuple

_DELIMITERS = "\r\n"


def pop_serial_frame(buffer: str) -> Optional[Tuple[str, str]]:
    """Split off the first CR/LF terminated frame.

    Returns ``(frame, rest)`` with all contiguous delimiters consumed,
    or ``None`` when the buffer holds no delimiter yet.
    """
    positions = [pos for pos in (buffer.find(d) for d in _DELIMITERS) if pos >= 0]
    if not positions:
        return None
    index = min(positions)
    return buffer[:index], buffer[index:].lstrip(_DELIMITERS)


def _keep_suffix(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[len(value) - max_len:]


def append_raw(existing: str, chunk: str, max_len: int) -> str:
    """Append a chunk, keeping at most the last ``max_len`` characters."""
    return _keep_suffix(existing + chunk, max_len)


def sanitize_inline(raw: str, max_len: int) -> str:
    """Escape line breaks, trim, and keep at most the last ``max_len`` characters."""
    value = raw.replace("\r", "\\r").replace("\n", "\\n").strip()
    return _keep_suffix(value, max_len)