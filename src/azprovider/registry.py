from __future__ import annotations

import importlib
from typing import Any

from azprovider.core.logging import get_logger
from azprovider.sdk import ResourceHandler

logger = get_logger(__name__)

_RESOURCES: dict[str, ResourceHandler[Any]] = {}
_LOADED = False

BUILTIN_RESOURCES: list[tuple[str, str]] = [
    ("azprovider.resources.maps_account", "MapsAccountResource"),
]


def register(resource: ResourceHandler[Any]) -> None:
    if resource.type_name in _RESOURCES:
        logger.warning("resource type re-registered", type_name=resource.type_name)
    _RESOURCES[resource.type_name] = resource


def list_resources() -> list[ResourceHandler[Any]]:
    return list(_RESOURCES.values())


def get_resource(type_name: str) -> ResourceHandler[Any] | None:
    return _RESOURCES.get(type_name)


def _import_resource(module_path: str, class_name: str) -> ResourceHandler[Any]:
    mod = importlib.import_module(module_path)
    cls = getattr(mod, class_name)
    if not isinstance(cls, type) or not issubclass(cls, ResourceHandler):
        raise TypeError(f"{module_path}.{class_name} is not a ResourceHandler")
    return cls()


def ensure_resources_loaded() -> None:
    global _LOADED
    if _LOADED:
        return
    for module_path, class_name in BUILTIN_RESOURCES:
        resource = _import_resource(module_path, class_name)
        register(resource)
        logger.debug("registered resource", type_name=resource.type_name)
    _LOADED = True


def reset() -> None:
    global _LOADED
    _RESOURCES.clear()
    _LOADED = False


__all__ = [
    "BUILTIN_RESOURCES",
    "ensure_resources_loaded",
    "get_resource",
    "list_resources",
    "register",
    "reset",
]
