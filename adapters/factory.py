"""Factory for selecting a source adapter."""

from pathlib import PureWindowsPath
from typing import Dict, Optional, Type

from contracts import ValidationError

from .base import SourceAdapter
from .mpxj_adapter import MpxjAdapter
from .mspdi_adapter import MspdiAdapter


# Registry of available adapters
ADAPTERS: Dict[str, Type[SourceAdapter]] = {
    "mspdi": MspdiAdapter,
    "xml": MspdiAdapter,
    "mpxj": MpxjAdapter,
    "mpp": MpxjAdapter,
}

# Aliases share a class with a canonical name
ALIASES = ("xml", "mpp")


def _extension_map() -> Dict[str, str]:
    """File suffix to adapter name, from each adapter's own extensions."""
    mapping: Dict[str, str] = {}
    for name, adapter_class in ADAPTERS.items():
        if name in ALIASES:
            continue
        for suffix in adapter_class().extensions:
            mapping[suffix.lower()] = name
    return mapping


# File suffix to adapter mapping for auto-detection
EXTENSION_ADAPTERS: Dict[str, str] = _extension_map()


def get_adapter(
    file_name: Optional[str] = None,
    adapter_name: Optional[str] = None,
) -> SourceAdapter:
    """Get a source adapter instance.

    Args:
        file_name: Uploaded file name - its suffix selects the adapter
        adapter_name: Explicit adapter name (mspdi, mpxj); wins over file_name

    Returns:
        SourceAdapter instance

    Raises:
        ValidationError: If no adapter matches

    Examples:
        get_adapter("Plan.mpp")            # MpxjAdapter
        get_adapter("Plan.xml")            # MspdiAdapter
        get_adapter(adapter_name="mspdi")  # MspdiAdapter
    """
    if adapter_name:
        adapter_key = adapter_name.lower()
        if adapter_key not in ADAPTERS:
            raise ValidationError(
                f"Unknown adapter: {adapter_name}. "
                f"Available: {list(ADAPTERS.keys())}"
            )
        return ADAPTERS[adapter_key]()

    suffix = PureWindowsPath(file_name or "").suffix.lower()
    if suffix in EXTENSION_ADAPTERS:
        return ADAPTERS[EXTENSION_ADAPTERS[suffix]]()

    raise ValidationError(
        f"Unsupported file type: {suffix or '(none)'}. "
        f"Supported: {sorted(EXTENSION_ADAPTERS.keys())}"
    )


def list_adapters() -> Dict[str, bool]:
    """List all adapters and their availability.

    Returns:
        Dict mapping adapter name to availability status
    """
    result = {}
    for name, adapter_class in ADAPTERS.items():
        if name in ALIASES:
            continue
        result[name] = adapter_class().is_available()
    return result
