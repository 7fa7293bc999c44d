from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from azprovider.core.exceptions import ValidationException
from azprovider.core.logging import REDACTED
from azprovider.sdk.schema import Attribute, schema_of

M = TypeVar("M", bound=BaseModel)


class ResourceData(Generic[M]):
    """Declarative record for one resource instance as exchanged with the host."""

    def __init__(
        self,
        model: type[M],
        values: Mapping[str, Any] | None = None,
        *,
        id: str = "",
        is_new_resource: bool = False,
        timeouts: Mapping[str, float] | None = None,
    ) -> None:
        self._model = model
        self._schema: dict[str, Attribute] = schema_of(model)
        self._values: dict[str, Any] = {}
        self._id = id
        self._is_new = is_new_resource
        self.timeouts: dict[str, float] = dict(timeouts or {})
        for key, value in (values or {}).items():
            self.set(key, value)

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, value: str) -> None:
        self._id = value

    def discard(self) -> None:
        """Forget the remote object: the host drops a record without an id."""
        self._id = ""
        self._values.clear()

    def is_new_resource(self) -> bool:
        return self._is_new

    def mark_new_resource(self, value: bool = True) -> None:
        self._is_new = value

    @property
    def schema(self) -> dict[str, Attribute]:
        return self._schema

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._schema:
            raise KeyError(f"{key!r} is not an attribute of {self._model.__name__}")
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key not in self._schema:
            raise KeyError(f"{key!r} is not an attribute of {self._model.__name__}")
        self._values[key] = value

    def desired(self) -> M:
        config = {
            k: v
            for k, v in self._values.items()
            if not self._schema[k].computed and v is not None
        }
        try:
            return self._model.model_validate(config)
        except ValidationError as err:
            problems = [
                f"{'.'.join(str(p) for p in e['loc']) or '<root>'}: {e['msg']}"
                for e in err.errors()
            ]
            raise ValidationException(
                f"invalid {self._model.__name__} configuration: " + "; ".join(problems),
                details={"errors": problems},
                cause=err,
            ) from err

    def state(self) -> dict[str, Any]:
        return dict(self._values)

    def redacted(self) -> dict[str, Any]:
        return {
            k: (REDACTED if self._schema[k].sensitive and v else v)
            for k, v in self._values.items()
        }

    def __repr__(self) -> str:
        return f"ResourceData(id={self._id!r}, values={self.redacted()!r})"
