#!/usr/bin/env python3
"""
Preset Matching
===============
Resolves a human-readable feature type ("Bakery", "Road") for messages.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from namelint.classifier import GENERIC_KEYS
from namelint.settings import load_strings


@dataclass(frozen=True)
class Preset:
    """A matched feature type."""
    id: str
    name: str


def _humanize(value: str) -> str:
    return value.replace('_', ' ').strip().title()


class PresetMatcher:
    """
    Matches an entity to a preset using its structural tags.

    Checks ``key/value`` then bare ``key`` in the presets table of
    strings.yaml, falling back to the humanized tag value.
    """

    def __init__(self, presets: Optional[dict] = None, keys: Sequence[str] = GENERIC_KEYS):
        if presets is None:
            presets = load_strings().get('presets') or {}
        self._presets = presets
        self._keys = tuple(keys)

    def match(self, entity, graph=None) -> Preset:
        tags = entity.tags
        for key in self._keys:
            value = tags.get(key)
            if not value:
                continue
            preset_id = f"{key}/{value}"
            if preset_id in self._presets:
                return Preset(id=preset_id, name=self._presets[preset_id])
            if key in self._presets:
                return Preset(id=key, name=self._presets[key])
            if value not in ('yes', 'no'):
                return Preset(id=preset_id, name=_humanize(value))
            return Preset(id=key, name=_humanize(key))
        return Preset(id='point', name=self._presets.get('fallback', 'Point'))
