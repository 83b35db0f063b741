#!/usr/bin/env python3
"""
Localizer
=========
Message templates and language display names, read from strings.yaml.
"""

import html
from typing import Any, Optional

from namelint.settings import load_strings


class Localizer:
    """
    Looks up message templates by dotted key.

    Usage:
        loc = Localizer()
        loc.t("issues.fix.remove_the_name.title")
        loc.t_html("issues.generic_name.message", feature="Bakery", name="Bakery")
        loc.language_name("fr")   # "French"
    """

    def __init__(self, strings: Optional[dict] = None):
        self._strings = strings if strings is not None else load_strings()

    def _lookup(self, key: str) -> Any:
        current: Any = self._strings
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                raise KeyError(f"Missing string '{key}' in strings.yaml")
            current = current[part]
        return current

    def has(self, key: str) -> bool:
        try:
            return isinstance(self._lookup(key), str)
        except KeyError:
            return False

    def t(self, key: str, **replacements) -> str:
        """Plain-text string with {placeholders} filled in."""
        template = self._lookup(key)
        if not isinstance(template, str):
            raise KeyError(f"String '{key}' is not a template")
        return template.format(**replacements)

    def t_html(self, key: str, **replacements) -> str:
        """Like t(), with replacement values HTML-escaped."""
        escaped = {
            k: html.escape(str(v)) if v is not None else ''
            for k, v in replacements.items()
        }
        return self.t(key, **escaped)

    def language_name(self, code: str) -> str:
        """Display name for a language subtag, or the code itself if unknown."""
        languages = self._strings.get('languages') or {}
        return languages.get(code) or code
