# app/core/security.py
"""
Input sanitization and content-safety checks.

Used twice: by the request middleware on inbound paths/query strings, and by
the repository on every upstream field right before it is written. The
persistence side never trusts upstream text verbatim.
"""
from __future__ import annotations

import re
import unicodedata

from app.core.exceptions import DataQualityError

MAX_ID_LENGTH = 30
MAX_NAME_LENGTH = 50
MAX_GP_NAME_LENGTH = 100

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")
_ID_DISALLOWED = re.compile(r"[^a-z0-9_-]")

SEASON_RE = re.compile(r"\d{4}")
ROUND_RE = re.compile(r"\d{1,2}")
# letters, then letters/space/apostrophe/hyphen ("Kimi", "de la Rosa", "O'Ward")
NAME_RE = re.compile(r"[^\W\d_](?:[^\W\d_]|[ '\-])*")

SQL_COMMENT = re.compile(r"(;|--|/\*|\*/)")

UNSAFE_PATTERNS = [
    # markup / script injection
    re.compile(r"<\s*/?\s*(script|iframe|object|embed|svg)\b", re.I),
    re.compile(r"(javascript|vbscript)\s*:", re.I),
    re.compile(r"\bon(load|error|click|mouseover)\s*=", re.I),
    # SQL
    SQL_COMMENT,
    re.compile(r"'\s*(or|and)\s+.*(=|like)", re.I),
    re.compile(r"\bunion(\s+(all|distinct))?\s+select\b", re.I),
    re.compile(r"\b(drop|create|alter|truncate)\s+(table|database|schema)\b", re.I),
    re.compile(r"\b(insert\s+into|delete\s+from|update\s+\w+\s+set)\b", re.I),
    # path traversal
    re.compile(r"(\.\./|\.\.\\|%2e%2e)", re.I),
    # shell
    re.compile(r"(\$\(|`|\|\||&&|\|\s*\w)"),
]

# Request paths carry glob patterns such as "/cache/keys/*", which read as SQL comments
REQUEST_UNSAFE_PATTERNS = [p for p in UNSAFE_PATTERNS if p is not SQL_COMMENT]


def clean_text(value, max_length: int) -> str:
    """Strip control characters, collapse whitespace, trim and cap length."""
    if value is None:
        return ""
    text = unicodedata.normalize("NFC", str(value))
    text = _CONTROL_CHARS.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text[:max_length].rstrip()


def sanitize_identifier(value) -> str:
    """Lowercase slug restricted to ``[a-z0-9_-]``, at most 30 chars."""
    text = clean_text(value, 200).lower()
    return _ID_DISALLOWED.sub("", text)[:MAX_ID_LENGTH]


def is_safe_text(value: str | None, patterns=UNSAFE_PATTERNS) -> bool:
    if not value:
        return True
    return not any(p.search(value) for p in patterns)


def require_safe(field: str, value: str) -> str:
    if not is_safe_text(value):
        raise DataQualityError(f"{field} failed content-safety check: {value!r}")
    return value


def require_match(field: str, pattern: re.Pattern, value: str) -> str:
    if not pattern.fullmatch(value or ""):
        raise DataQualityError(f"{field} has invalid format: {value!r}")
    return value


def sanitize_name(field: str, value) -> str:
    name = require_safe(field, clean_text(value, MAX_NAME_LENGTH))
    return require_match(field, NAME_RE, name)


def sanitize_driver_id(value) -> str:
    raw = clean_text(value, 200)
    require_safe("driverId", raw)
    driver_id = sanitize_identifier(raw)
    if not driver_id:
        raise DataQualityError(f"driverId is empty after sanitization: {value!r}")
    return driver_id


def sanitize_season(value) -> str:
    return require_match("season", SEASON_RE, clean_text(value, 10))


def sanitize_round(value) -> str:
    return require_match("round", ROUND_RE, clean_text(value, 10))


def sanitize_gp_name(value) -> str:
    name = require_safe("gpName", clean_text(value, MAX_GP_NAME_LENGTH))
    if not name:
        raise DataQualityError("gpName is empty")
    return name
