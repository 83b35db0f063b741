#!/usr/bin/env python3
"""
Name Classifier
===============
Decides whether a name value is disclaimed by the feature's own ``not:name``
tag, generic (a category word rather than a proper name), or acceptable.

Generic detection combines two heuristics:

1. Raw tag match: the name is just a structural tag key or its value,
   e.g. ``shop=bakery`` named "Bakery" or "Shop".
2. Known generic word: the name matches a pattern from the
   GenericWordRegistry (e.g. "restaurant", "parking").
"""

from dataclasses import dataclass
from typing import Mapping, Sequence, Optional

from namelint.settings import get_setting


def _load_generic_keys() -> tuple:
    keys = get_setting("validation.generic_keys")
    if not keys:
        raise ValueError("validation.generic_keys must be set in app.yaml")
    return tuple(keys)


GENERIC_KEYS = _load_generic_keys()


@dataclass(frozen=True)
class NameVerdict:
    """Classification of a single name value."""
    disclaimed: bool = False
    generic: bool = False

    @property
    def is_suspicious(self) -> bool:
        return self.disclaimed or self.generic


def is_disclaimed(value: str, not_names: Sequence[str]) -> bool:
    """True if the value is listed verbatim in not:name."""
    return any(not_name and value == not_name for not_name in not_names)


def name_matches_raw_tag(lowercase_name: str,
                         tags: Mapping[str, str],
                         keys: Sequence[str] = GENERIC_KEYS) -> bool:
    """Test if the name is just the key or tag value (e.g. "park")."""
    for key in keys:
        val = tags.get(key)
        if not val:
            continue
        val = val.lower()
        if (key == lowercase_name or
                val == lowercase_name or
                key.replace('_', ' ') == lowercase_name or
                val.replace('_', ' ') == lowercase_name):
            return True
    return False


def is_generic_name(name: str,
                    tags: Mapping[str, str],
                    registry=None,
                    keys: Sequence[str] = GENERIC_KEYS) -> bool:
    name = name.lower()
    if name_matches_raw_tag(name, tags, keys):
        return True
    return registry is not None and registry.is_known_generic(name)


def classify(value: str,
             tags: Mapping[str, str],
             not_names: Sequence[str],
             registry=None,
             keys: Optional[Sequence[str]] = None) -> NameVerdict:
    """
    Classify one name value.

    Both checks are evaluated; deciding which one wins is up to the caller.

    Args:
        value: The name tag's value
        tags: The feature's full tag mapping
        not_names: Entries of the feature's not:name tag
        registry: GenericWordRegistry, or None to use only the raw tag match
        keys: Structural tag keys for the raw tag match

    Returns:
        NameVerdict
    """
    return NameVerdict(
        disclaimed=is_disclaimed(value, not_names),
        generic=is_generic_name(value, tags, registry, keys or GENERIC_KEYS),
    )
