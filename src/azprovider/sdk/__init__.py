from __future__ import annotations

from .base import OPERATIONS, Operation, ProviderMeta, ResourceHandler, ResourceTimeouts
from .data import ResourceData
from .deadline import Deadline
from .schema import Attribute, computed, optional, required, schema_of

__all__ = [
    "OPERATIONS",
    "Attribute",
    "Deadline",
    "Operation",
    "ProviderMeta",
    "ResourceData",
    "ResourceHandler",
    "ResourceTimeouts",
    "computed",
    "optional",
    "required",
    "schema_of",
]
