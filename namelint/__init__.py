#!/usr/bin/env python3
"""
NameLint - Suspicious Name Validator
====================================

Detects placeholder or mistaken names on map features:

- generic names: the name is just a category word ("Bar", "Bakery") or
  a known generic word from the name-suggestion-index list
- mistaken names: the name is listed in the feature's own ``not:name`` tag

Quick Start
-----------
    from namelint import NameLint

    lint = NameLint()
    lint.wait_for_generics(5)

    issues = lint.check({"shop": "bakery", "name": "Bakery"})
    for issue in issues:
        print(issue.subtype, issue.hash)

Modules
-------
    namelint.generics   - Generic word registry (async loaded)
    namelint.fetcher    - Named resource fetching with disk cache
    namelint.tags       - Name tag extraction
    namelint.classifier - Generic / disclaimed classification
    namelint.issues     - Validation issues and fixes
    namelint.validation - The suspicious_name validation
    namelint.context    - Entities, graphs and undoable edits

CLI Usage
---------
    python -m namelint check shop=bakery name=Bakery
    python -m namelint scan features.json --fix -o fixed.json
    python -m namelint generics --match "parking"
"""

__version__ = "0.1.0"
__author__ = "NameLint"

import sys
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

# Ensure parent directory is in path for imports
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from .context import Entity, Graph, EditContext, ChangeTagsAction
from .fetcher import FileFetcher, ResourceError, RetryHandler, get_fetcher
from .generics import GenericWordRegistry, RegistryState
from .tags import NameEntry, extract_names, not_names, has_wikidata, remove_tag
from .classifier import NameVerdict, classify, is_generic_name, GENERIC_KEYS
from .issues import (
    IssueList,
    ValidationIssue,
    ValidationIssueFix,
    make_generic_name_issue,
    make_incorrect_name_issue,
    GENERIC_NAME,
    NOT_NAME,
)
from .localizer import Localizer
from .presets import Preset, PresetMatcher
from .settings import get_setting
from .validation import SuspiciousNameValidation, validation_suspicious_name


class NameLint:
    """
    Main interface for suspicious name validation.

    Owns one GenericWordRegistry for the session; loading starts on
    construction and never blocks validation.

    Examples
    --------
        >>> lint = NameLint()
        >>> issues = lint.check({"amenity": "restaurant", "name": "Restaurant"})
        >>> [i.hash for i in issues]
        ['name=Restaurant']
    """

    def __init__(self,
                 fetcher: Optional[FileFetcher] = None,
                 registry: Optional[GenericWordRegistry] = None):
        """
        Parameters
        ----------
        fetcher : FileFetcher, optional
            Fetcher for the generic words resource (default: shared fetcher)
        registry : GenericWordRegistry, optional
            Pre-built registry; loading is started if it has not been
        """
        self._validation = validation_suspicious_name(fetcher=fetcher, registry=registry)

    @property
    def validation(self) -> SuspiciousNameValidation:
        return self._validation

    @property
    def registry(self) -> GenericWordRegistry:
        return self._validation.registry

    def wait_for_generics(self, timeout: Optional[float] = None) -> bool:
        """Block until the generic words are loaded (or failed)."""
        return self.registry.wait(timeout)

    def validate(self, entity: Entity) -> IssueList:
        return self._validation(entity)

    def check(self, tags: Mapping[str, str], entity_id: Optional[str] = None) -> IssueList:
        """Validate a bare tag mapping."""
        if entity_id is None:
            entity_id = get_setting("cli.default_entity_id", "n-1")
        return self.validate(Entity(id=entity_id, tags=dict(tags)))

    def scan(self, entities: Iterable[Entity]) -> Dict[str, IssueList]:
        """Validate many entities. Entities without issues are omitted."""
        results = {}
        for entity in entities:
            issues = self.validate(entity)
            if issues:
                results[entity.id] = issues
        return results

    def fix(self, context: EditContext, issues: Iterable[ValidationIssue]) -> int:
        """Apply the first fix of every issue. Returns the number of edits made."""
        applied = 0
        for issue in issues:
            fixes = issue.fixes()
            if fixes and fixes[0].apply(context):
                applied += 1
        return applied


__all__ = [
    'NameLint',
    '__version__',
    # Context
    'Entity',
    'Graph',
    'EditContext',
    'ChangeTagsAction',
    # Loading
    'FileFetcher',
    'ResourceError',
    'RetryHandler',
    'get_fetcher',
    'GenericWordRegistry',
    'RegistryState',
    # Classification
    'NameEntry',
    'extract_names',
    'not_names',
    'has_wikidata',
    'remove_tag',
    'NameVerdict',
    'classify',
    'is_generic_name',
    'GENERIC_KEYS',
    # Issues
    'IssueList',
    'ValidationIssue',
    'ValidationIssueFix',
    'make_generic_name_issue',
    'make_incorrect_name_issue',
    'GENERIC_NAME',
    'NOT_NAME',
    'Localizer',
    'Preset',
    'PresetMatcher',
    # Validation
    'SuspiciousNameValidation',
    'validation_suspicious_name',
]
