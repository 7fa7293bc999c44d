from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Attribute:
    name: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    sensitive: bool = False


def required(*, force_new: bool = False, **kwargs: Any) -> Any:
    return Field(..., json_schema_extra={"force_new": force_new}, **kwargs)


def optional(default_factory: Any = None, **kwargs: Any) -> Any:
    if default_factory is not None:
        return Field(default_factory=default_factory, **kwargs)
    return Field(default=None, **kwargs)


def computed(*, sensitive: bool = False) -> Any:
    return Field(default=None, json_schema_extra={"computed": True, "sensitive": sensitive})


def schema_of(model: type[BaseModel]) -> dict[str, Attribute]:
    attrs: dict[str, Attribute] = {}
    for name, info in model.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        is_computed = bool(extra.get("computed", False))
        is_required = info.is_required()
        attrs[name] = Attribute(
            name=name,
            required=is_required,
            optional=not is_required and not is_computed,
            computed=is_computed,
            force_new=bool(extra.get("force_new", False)),
            sensitive=bool(extra.get("sensitive", False)),
        )
    return attrs
