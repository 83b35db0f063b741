#!/usr/bin/env python3
"""
Suspicious Name Validation
==========================
Flags name tags that hold a generic word ("Bar", "Restaurant") instead of a
real name, or a value the feature's ``not:name`` tag says is wrong.

Usage:
    validation = validation_suspicious_name()   # starts loading generic words
    issues = validation(entity)
    if issues.provisional:
        ...  # re-run once validation.registry.is_ready()
"""

from typing import Optional, Sequence

from namelint.classifier import classify
from namelint.generics import GenericWordRegistry
from namelint.issues import (
    TYPE,
    IssueList,
    make_generic_name_issue,
    make_incorrect_name_issue,
)
from namelint.localizer import Localizer
from namelint.presets import PresetMatcher
from namelint.tags import extract_names, not_names, has_wikidata


class SuspiciousNameValidation:
    """Callable validation: entity -> IssueList."""

    type = TYPE

    def __init__(self,
                 registry: Optional[GenericWordRegistry] = None,
                 localizer: Optional[Localizer] = None,
                 preset_matcher: Optional[PresetMatcher] = None,
                 generic_keys: Optional[Sequence[str]] = None):
        self.registry = registry if registry is not None else GenericWordRegistry()
        self.localizer = localizer or Localizer()
        self.preset_matcher = preset_matcher or PresetMatcher()
        self.generic_keys = generic_keys
        # No-op once loading has started
        self.registry.load()

    def __call__(self, entity) -> IssueList:
        return self.check_generic_name(entity)

    def check_generic_name(self, entity) -> IssueList:
        # Read before classifying so a load finishing mid-check still counts as provisional
        issues = IssueList(provisional=not self.registry.is_ready())
        tags = entity.tags

        # a generic name is allowed if it's a known brand or entity
        if has_wikidata(tags):
            return issues

        disclaimed_names = not_names(tags)

        for entry in extract_names(tags):
            verdict = classify(entry.value, tags, disclaimed_names,
                               self.registry, self.generic_keys)
            if verdict.disclaimed:
                issues.append(make_incorrect_name_issue(
                    entity.id, entry.key, entry.value, entry.lang_code,
                    self.localizer, self.preset_matcher,
                ))
                continue
            if verdict.generic:
                issues.append(make_generic_name_issue(
                    entity.id, entry.key, entry.value, entry.lang_code,
                    self.localizer, self.preset_matcher,
                ))

        return issues


def validation_suspicious_name(fetcher=None,
                               registry: Optional[GenericWordRegistry] = None,
                               **kwargs) -> SuspiciousNameValidation:
    """Create the validation and start loading the generic words."""
    if registry is None:
        registry = GenericWordRegistry(fetcher=fetcher)
    return SuspiciousNameValidation(registry=registry, **kwargs)
