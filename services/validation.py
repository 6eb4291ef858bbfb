import re

_ID_RE = re.compile(r'^[a-zA-Z0-9_-]+$')
_NUMERIC_ID_RE = re.compile(r'^[0-9]+$')
_PATH_RE = re.compile(r'^[a-zA-Z0-9/._-]+$')
_LEADING_INT_RE = re.compile(r'\s*([+-]?\d+)')


def sanitize_string(value, max_len=500):
    """Strip angle brackets and surrounding whitespace, then truncate."""
    if not isinstance(value, str):
        return ''
    return value.replace('<', '').replace('>', '').strip()[:max_len]


def validate_string(value, max_len):
    """Trimmed string if it is 1..max_len chars long, else None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed or len(trimmed) > max_len:
        return None
    return trimmed


def is_valid_id(value):
    return isinstance(value, str) and bool(_ID_RE.match(value))


def is_numeric_id(value):
    return isinstance(value, str) and bool(_NUMERIC_ID_RE.match(value))


def is_valid_path(value):
    if not isinstance(value, str) or not _PATH_RE.match(value):
        return False
    return '..' not in value.split('/')


def clamp_int(value, default, lo, hi):
    """Read the leading integer of ``value`` (``default`` if there is none) and clamp to [lo, hi].

    Trailing junk is ignored, so ``"20abc"`` reads as 20.
    """
    match = _LEADING_INT_RE.match(str(value)) if value is not None else None
    n = int(match.group(1)) if match else default
    if n == 0:
        n = default
    return max(lo, min(hi, n))
