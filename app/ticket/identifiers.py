# app/ticket/identifiers.py
import re

# decimal literals (with exponent) and hex, the forms a number field accepts
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")
_LEADING_INT = re.compile(r"[+-]?\d+")

BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


def fits_bigint(value: int) -> bool:
    return BIGINT_MIN <= value <= BIGINT_MAX


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(text: str) -> int:
    """Multiply-shift (x31) hash over UTF-16 code units, as a non-negative int."""
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _int32((h << 5) - h + unit)
    return abs(h)


def is_numeric(text: str) -> bool:
    """Decimal (``12``, ``-3.5``, ``1e3``) or hex (``0x1A``) number text.

    Binary and octal prefixes are not treated as numbers and get hashed.
    """
    text = text.strip()
    return bool(_DECIMAL.fullmatch(text) or _HEX.fullmatch(text))


def parse_ticket_id(raw: str | int) -> int:
    """Turn a user supplied ticket identifier into the stored integer key.

    Numbers keep their leading integer digits, so ``12.9`` and ``1e3`` become
    12 and 1; hex is read as hex. Anything else is hashed, which can collide,
    so callers must check for an existing ticket first.
    """
    if isinstance(raw, int):
        value = raw
    else:
        text = (raw or "").strip()
        if not text:
            raise ValueError("Ticket ID is required and cannot be empty")
        if _HEX.fullmatch(text):
            value = int(text, 16)
        elif is_numeric(text):
            match = _LEADING_INT.match(text)
            if match is None:
                raise ValueError(f"Ticket ID {text!r} has no whole number part")
            value = int(match.group())
        else:
            return string_hash(text)

    if not fits_bigint(value):
        raise ValueError(f"Ticket ID {value} is out of range")
    return value


__all__ = ["BIGINT_MIN", "BIGINT_MAX", "fits_bigint", "string_hash", "is_numeric", "parse_ticket_id"]
