"""Source adapters: turn uploaded plan files into raw contracts."""

from .base import SourceAdapter
from .factory import EXTENSION_ADAPTERS, get_adapter, list_adapters
from .mpxj_adapter import MpxjAdapter
from .mspdi_adapter import MspdiAdapter

__all__ = [
    "SourceAdapter",
    "MspdiAdapter",
    "MpxjAdapter",
    "EXTENSION_ADAPTERS",
    "get_adapter",
    "list_adapters",
]
