from __future__ import annotations

import re

_NAME_PATTERNS: dict[str, re.Pattern[str]] = {
    "maps_account": re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]+$"),
    "resource_group": re.compile(r"^[-\w._()]{1,90}$", re.ASCII),
}

_NAME_HINTS = {
    "maps_account": (
        "First character must be alphanumeric. Subsequent character(s) must be any "
        "combination of alphanumeric, underscore (_), period (.), or hyphen (-)."
    ),
    "resource_group": (
        "may only contain alphanumeric characters, dash, underscores, parentheses and "
        "periods, and must be 1-90 characters long"
    ),
}


def validate_name(kind: str, value: str | None) -> bool:
    if not value:
        return False
    pat = _NAME_PATTERNS[kind]
    if not pat.fullmatch(value):
        return False
    if kind == "resource_group" and value.endswith("."):
        return False
    return True


def name_hint(kind: str) -> str:
    return _NAME_HINTS[kind]
