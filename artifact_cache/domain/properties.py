"""Helpers for key/value properties attached to remote files."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .exceptions import ValidationError


def parse_property_pairs(values: Sequence[str]) -> Dict[str, str]:
    """Turn a flat ``[k1, v1, k2, v2]`` list into an ordered mapping."""
    if len(values) % 2:
        raise ValidationError(f"Invalid properties list: {' '.join(values)}")
    return {values[i]: values[i + 1] for i in range(0, len(values), 2)}


def parse_property_args(values: Optional[Iterable[str]]) -> Dict[str, str]:
    """Parse repeated ``key=value`` command line arguments."""
    result: Dict[str, str] = {}
    for raw in values or []:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip():
            raise ValidationError(f"Invalid property '{raw}', expected key=value")
        result[key.strip()] = value
    return result


def merge_properties(identity: Mapping[str, str], informational: Mapping[str, str]) -> Dict[str, str]:
    """Properties attached on upload. Identity values win on key clashes."""
    merged = {key: str(value) for key, value in informational.items()}
    merged.update({key: str(value) for key, value in identity.items()})
    return merged


def format_properties(properties: Mapping[str, str]) -> str:
    return ";".join(f"{key}={value}" for key, value in properties.items())


def matches_properties(file_properties: Mapping[str, List[str]], wanted: Mapping[str, str]) -> bool:
    """Permissive filter: a file lacking a wanted key still matches.

    Artifacts uploaded before a property existed stay selectable. A file that
    carries the key must carry the wanted value among its values.
    """
    for key, value in wanted.items():
        present = file_properties.get(key)
        if present is None:
            continue
        if str(value) not in present:
            return False
    return True
