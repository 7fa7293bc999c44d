from __future__ import annotations

from collections.abc import Mapping
from typing import Any

MAX_TAGS = 50
MAX_TAG_KEY_LENGTH = 512
MAX_TAG_VALUE_LENGTH = 256


def expand(tags: Mapping[str, Any] | None) -> dict[str, str]:
    if not tags:
        return {}
    return {str(k): str(v) for k, v in tags.items() if v is not None}


def flatten(tags: Mapping[str, str | None] | None) -> dict[str, str]:
    if not tags:
        return {}
    return {k: v if v is not None else "" for k, v in tags.items()}


def validate(tags: Mapping[str, Any] | None) -> list[str]:
    errors: list[str] = []
    if not tags:
        return errors
    if len(tags) > MAX_TAGS:
        errors.append(f"a maximum of {MAX_TAGS} tags can be applied to each ARM resource")
    for key, value in tags.items():
        if len(key) > MAX_TAG_KEY_LENGTH:
            errors.append(
                f"the maximum length for a tag key is {MAX_TAG_KEY_LENGTH} characters: {key!r}"
            )
        if value is not None and len(str(value)) > MAX_TAG_VALUE_LENGTH:
            errors.append(
                f"the maximum length for a tag value is {MAX_TAG_VALUE_LENGTH} characters: "
                f"{key!r} is {len(str(value))} characters"
            )
    return errors
