"""
Canonical JSON serialization and fingerprint helpers.

Provides a single canonical JSON policy and a SHA-256 fingerprint so that view
snapshots handed to external persistence serialize and compare stably. This
module is zero-IO and uses only the Python standard library.

Notes:
    - Canonical JSON:
        - sort_keys=True
        - separators=(",", ":")
        - ensure_ascii=False
    - Fingerprints are computed over the UTF-8 encoded canonical JSON string.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

__all__ = [
    "json_dumps_canonical",
    "json_loads",
    "fingerprint",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sort_keys=True, compact separators,
        and ensure_ascii=False.

    Notes:
        This function assumes the input is JSON-serializable and does not perform
        coercion of unsupported types.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def json_loads(s: str) -> Any:
    """Deserialize a JSON string using the stdlib json module (no custom hooks)."""
    return json.loads(s)


def fingerprint(data: Mapping[str, Any]) -> str:
    """
    Compute a stable SHA-256 hex digest of a mapping's canonical JSON.

    Examples:
        >>> from schemaview.core.serde import fingerprint
        >>> fingerprint({"a": 1, "b": 2}) == fingerprint({"b": 2, "a": 1})
        True
    """
    h = hashlib.sha256()
    h.update(json_dumps_canonical(dict(data)).encode("utf-8"))
    return h.hexdigest()
