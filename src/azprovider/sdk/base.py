from __future__ import annotations

import abc
import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from pydantic import BaseModel

from azprovider.core.config import Settings, get_settings
from azprovider.sdk.data import ResourceData
from azprovider.sdk.deadline import Deadline
from azprovider.sdk.schema import Attribute, schema_of

if TYPE_CHECKING:
    from azprovider.arm.clients import Clients

M = TypeVar("M", bound=BaseModel)

Operation = Literal["create", "read", "update", "delete"]
OPERATIONS: tuple[Operation, ...] = ("create", "read", "update", "delete")


@dataclass(frozen=True)
class ResourceTimeouts:
    create: float = 30 * 60.0
    read: float = 5 * 60.0
    update: float = 30 * 60.0
    delete: float = 30 * 60.0

    def default(self, operation: Operation) -> float:
        return float(getattr(self, operation))


@dataclass
class ProviderMeta:
    clients: Clients
    stop_event: asyncio.Event = field(default_factory=asyncio.Event)
    settings: Settings = field(default_factory=get_settings)


class ResourceHandler(abc.ABC, Generic[M]):
    """One resource type: its schema model, default timeouts and lifecycle bodies."""

    type_name: str
    model: type[M]
    timeouts: ResourceTimeouts = ResourceTimeouts()

    def schema(self) -> dict[str, Attribute]:
        return schema_of(self.model)

    def new_data(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        id: str = "",
        is_new_resource: bool = False,
        timeouts: Mapping[str, float] | None = None,
    ) -> ResourceData[M]:
        return ResourceData(
            self.model, values, id=id, is_new_resource=is_new_resource, timeouts=timeouts
        )

    def timeout_for(self, operation: Operation, d: ResourceData[M], meta: ProviderMeta) -> float:
        if operation in d.timeouts:
            return float(d.timeouts[operation])
        override = meta.settings.timeouts.override(operation)
        if override is not None:
            return override
        return self.timeouts.default(operation)

    def deadline(self, operation: Operation, d: ResourceData[M], meta: ProviderMeta) -> Deadline:
        return Deadline(
            f"{self.type_name}.{operation}",
            self.timeout_for(operation, d, meta),
            meta.stop_event,
        )

    def deadline_for_create_update(self, d: ResourceData[M], meta: ProviderMeta) -> Deadline:
        return self.deadline("create" if d.is_new_resource() else "update", d, meta)

    @abc.abstractmethod
    async def create(self, d: ResourceData[M], meta: ProviderMeta) -> None: ...

    @abc.abstractmethod
    async def read(self, d: ResourceData[M], meta: ProviderMeta) -> None: ...

    @abc.abstractmethod
    async def update(self, d: ResourceData[M], meta: ProviderMeta) -> None: ...

    @abc.abstractmethod
    async def delete(self, d: ResourceData[M], meta: ProviderMeta) -> None: ...

    @abc.abstractmethod
    def import_state(self, resource_id: str) -> ResourceData[M]:
        """Validate an id supplied for import and return a record carrying it."""
        ...
