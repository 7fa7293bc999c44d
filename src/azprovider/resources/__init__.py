from __future__ import annotations

from .maps_account import MapsAccountModel, MapsAccountResource

__all__ = ["MapsAccountModel", "MapsAccountResource"]
