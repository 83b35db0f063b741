#!/usr/bin/env python3
"""
Tag Helpers
===========
Reading name-bearing tags from a feature's tag mapping.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Iterable

from namelint.settings import get_setting

# "name" or "name:<lang>" where <lang> is letters, underscore or hyphen
NAME_KEY_RE = re.compile(r'name(?::([a-zA-Z_-]+))?')

NOT_NAME_KEY = 'not:name'


def _load_wikidata_keys() -> tuple:
    keys = get_setting("validation.wikidata_keys")
    if not keys:
        raise ValueError("validation.wikidata_keys must be set in app.yaml")
    return tuple(keys)


WIKIDATA_KEYS = _load_wikidata_keys()


@dataclass(frozen=True)
class NameEntry:
    """A name-bearing tag, e.g. ``name:fr=Le Bar``."""
    key: str
    lang_code: Optional[str]
    value: str


def extract_names(tags: Mapping[str, str]) -> List[NameEntry]:
    """All name tags in the mapping's key order."""
    entries = []
    for key, value in tags.items():
        m = NAME_KEY_RE.fullmatch(key)
        if not m:
            continue
        entries.append(NameEntry(key=key, lang_code=m.group(1), value=value))
    return entries


def not_names(tags: Mapping[str, str]) -> List[str]:
    """Values listed in ``not:name`` (semicolon separated)."""
    return (tags.get(NOT_NAME_KEY) or '').split(';')


def has_wikidata(tags: Mapping[str, str], keys: Iterable[str] = WIKIDATA_KEYS) -> bool:
    """True if the feature links to a known brand or entity."""
    return any(tags.get(key) for key in keys)


def remove_tag(tags: Mapping[str, str], key: str) -> Dict[str, str]:
    """Copy of ``tags`` without ``key``."""
    return {k: v for k, v in tags.items() if k != key}


def parse_tag_args(pairs: Iterable[str]) -> Dict[str, str]:
    """
    Parse ``key=value`` strings into a tag mapping.

    Raises:
        ValueError: If a pair has no '=' or an empty key
    """
    tags = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid tag '{pair}' (expected key=value)")
        tags[key] = value
    return tags
