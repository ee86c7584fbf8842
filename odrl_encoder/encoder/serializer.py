"""
JSON serialization helpers for encoded policy documents.

``to_json_string`` / ``to_json_pretty`` keep the encoder's key order, which
is what goes on the wire. ``canonicalize_json`` and ``structural_fingerprint``
sort keys at every level so that documents can be compared by content.
"""

import hashlib
import json
from typing import Any

from odrl_encoder.domain.vocabulary import ID


def to_json_string(document: dict[str, Any]) -> str:
    """
    Serialize a document as compact JSON, preserving key order.

    Example:
        >>> to_json_string({"@id": "p-1", "@type": "odrl:Set"})
        '{"@id":"p-1","@type":"odrl:Set"}'
    """
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def to_json_pretty(document: dict[str, Any]) -> str:
    """Serialize a document as indented JSON, preserving key order."""
    return json.dumps(document, indent=2, ensure_ascii=False)


def canonicalize_json(obj: Any) -> dict | list | Any:
    """
    Produce a canonical representation of a JSON value.

    - All dictionary keys are sorted
    - Nested structures are recursively canonicalized
    - List order is preserved (rule and constraint order is observable)

    Example:
        >>> canonicalize_json({"z": 1, "a": {"c": 2, "b": 3}})
        {'a': {'b': 3, 'c': 2}, 'z': 1}
    """
    if isinstance(obj, dict):
        return {k: canonicalize_json(v) for k, v in sorted(obj.items())}

    elif isinstance(obj, list):
        return [canonicalize_json(item) for item in obj]

    else:
        return obj


def structural_fingerprint(document: dict[str, Any]) -> str:
    """
    SHA-256 hex digest of a document's structure.

    The top-level ``@id`` is excluded because it is freshly generated on
    every encode; two encodes of equal policies share a fingerprint.
    """
    content = {k: v for k, v in document.items() if k != ID}
    canonical = json.dumps(
        canonicalize_json(content), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
