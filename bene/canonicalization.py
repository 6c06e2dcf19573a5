"""
Bene Canonical JSON

Stable byte representation of configuration objects (campaign constants,
build requests, variant descriptors) so that semantically identical inputs
hash identically.
"""

import json
from typing import Any, Dict, List, Union


def canonicalize(obj: Any) -> bytes:
    """
    Convert an object to canonical JSON bytes.

    Rules:
    - Object keys sorted lexicographically
    - No whitespace between tokens
    - UTF-8 encoding
    - Byte strings rendered as lowercase hex
    - Floats rejected (every amount is an exact integer)
    - Arrays preserve order
    """
    canonical = _canonicalize_value(obj)
    return json.dumps(canonical, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def canonicalize_str(obj: Any) -> str:
    """Return canonical JSON as string."""
    return canonicalize(obj).decode('utf-8')


def _canonicalize_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    elif isinstance(value, float):
        raise ValueError("Cannot canonicalize float: amounts must be integers")
    elif isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    elif isinstance(value, dict):
        return _canonicalize_object(value)
    elif isinstance(value, (list, tuple)):
        return _canonicalize_array(value)
    else:
        raise ValueError(f"Cannot canonicalize type: {type(value)}")


def _canonicalize_object(obj: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _canonicalize_value(obj[k]) for k in sorted(obj.keys())}


def _canonicalize_array(arr: Union[List, tuple]) -> List:
    return [_canonicalize_value(item) for item in arr]
