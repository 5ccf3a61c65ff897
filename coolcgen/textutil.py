"""Small text helpers used when dumping trees."""

from __future__ import annotations

_MAX_PAD = 80

_ESCAPES = {
    ord("\\"): "\\\\",
    ord('"'): '\\"',
    ord("\n"): "\\n",
    ord("\t"): "\\t",
    ord("\b"): "\\b",
    ord("\f"): "\\f",
}


def pad(n: int) -> str:
    """Return ``n`` spaces, capped at 80; nothing for non-positive ``n``."""
    if n <= 0:
        return ""
    return " " * min(n, _MAX_PAD)


def escape_string(text: str | bytes) -> str:
    """Escape ``text`` so that it reads as a quoted string literal."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    parts = []
    for byte in data:
        if byte in _ESCAPES:
            parts.append(_ESCAPES[byte])
        elif 0x20 <= byte < 0x7F:
            parts.append(chr(byte))
        else:
            parts.append(f"\\{byte:03o}")
    return "".join(parts)