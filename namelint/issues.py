#!/usr/bin/env python3
"""
Validation Issues
=================
Issue and fix objects produced by the suspicious name validation.

An issue is identified by (type, subtype, entity_ids, hash); the hash is
``"<key>=<value>"`` so re-running a validation yields equal issues. Messages,
reference text and fixes are computed lazily, when the host renders them.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from namelint.localizer import Localizer
from namelint.presets import PresetMatcher
from namelint.settings import get_setting
from namelint.tags import remove_tag
from namelint.context import ChangeTagsAction

logger = logging.getLogger(__name__)

TYPE = get_setting("validation.type")
SEVERITY = get_setting("validation.severity")
FIX_ICON = get_setting("validation.fix_icon")
if TYPE is None or SEVERITY is None or FIX_ICON is None:
    raise ValueError("validation.type, severity and fix_icon must be set in app.yaml")

GENERIC_NAME = 'generic_name'
NOT_NAME = 'not_name'

REFERENCE_KEY = 'issues.generic_name.reference'
REMOVE_NAME_TITLE_KEY = 'issues.fix.remove_the_name.title'


class IssueList(list):
    """List of issues for one entity, flagged provisional when computed
    before the generic word list finished loading."""

    def __init__(self, issues=(), provisional: bool = False):
        super().__init__(issues)
        self.provisional = provisional


@dataclass
class ValidationIssueFix:
    """Removes one name tag from one entity. ``title()`` renders the label."""
    icon: str
    title: Callable[[], str] = field(compare=False)
    entity_id: str
    name_key: str
    annotation: str
    issue: Optional["ValidationIssue"] = field(default=None, repr=False, compare=False)

    def apply(self, context) -> bool:
        """
        Remove the tag as a single undoable edit.

        Returns:
            False if the tag was already gone (nothing performed)
        """
        entity = context.entity(self.entity_id)
        if self.name_key not in entity.tags:
            logger.debug(f"{self.entity_id} has no '{self.name_key}' tag, nothing to remove")
            return False
        tags = remove_tag(entity.tags, self.name_key)
        context.perform(ChangeTagsAction(self.entity_id, tags), self.annotation)
        return True


class ValidationIssue:
    """A warning about one entity, with lazily rendered message and fixes."""

    def __init__(self,
                 type: str,
                 subtype: str,
                 severity: str,
                 entity_ids: List[str],
                 hash: str,
                 message: Callable[["ValidationIssue", object], str],
                 reference: Callable[["ValidationIssue", Optional[list]], str],
                 dynamic_fixes: Callable[["ValidationIssue"], List[ValidationIssueFix]]):
        self.type = type
        self.subtype = subtype
        self.severity = severity
        self.entity_ids = list(entity_ids)
        self.hash = hash
        self._message = message
        self._reference = reference
        self._dynamic_fixes = dynamic_fixes

    @property
    def id(self) -> str:
        return f"{self.type}-{self.subtype}-{','.join(self.entity_ids)}-{self.hash}"

    def message(self, context) -> str:
        return self._message(self, context)

    def reference(self, selection: Optional[list] = None) -> str:
        return self._reference(self, selection)

    def fixes(self) -> List[ValidationIssueFix]:
        fixes = self._dynamic_fixes(self)
        for fix in fixes:
            fix.issue = self
        return fixes

    def __eq__(self, other):
        if not isinstance(other, ValidationIssue):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"ValidationIssue({self.subtype}, {self.entity_ids[0]}, {self.hash!r})"


def _make_name_issue(subtype: str,
                     message_key: str,
                     annotation_key: str,
                     entity_id: str,
                     name_key: str,
                     value: str,
                     lang_code: Optional[str],
                     localizer: Optional[Localizer],
                     preset_matcher: Optional[PresetMatcher]) -> ValidationIssue:
    localizer = localizer or Localizer()
    preset_matcher = preset_matcher or PresetMatcher()

    def message(issue, context):
        entity = context.has_entity(issue.entity_ids[0])
        if not entity:
            return ''
        preset = preset_matcher.match(entity, context.graph())
        lang_name = localizer.language_name(lang_code) if lang_code else None
        return localizer.t_html(
            message_key + ('_language' if lang_name else ''),
            feature=preset.name, name=value, language=lang_name
        )

    def show_reference(issue, selection):
        # Appended once per selection
        text = localizer.t_html(REFERENCE_KEY)
        if selection is not None and text not in selection:
            selection.append(text)
        return text

    def dynamic_fixes(issue):
        return [
            ValidationIssueFix(
                icon=FIX_ICON,
                title=lambda: localizer.t_html(REMOVE_NAME_TITLE_KEY),
                entity_id=issue.entity_ids[0],
                name_key=name_key,
                annotation=localizer.t(annotation_key),
            )
        ]

    return ValidationIssue(
        type=TYPE,
        subtype=subtype,
        severity=SEVERITY,
        entity_ids=[entity_id],
        hash=f"{name_key}={value}",
        message=message,
        reference=show_reference,
        dynamic_fixes=dynamic_fixes,
    )


def make_generic_name_issue(entity_id: str, name_key: str, generic_name: str,
                            lang_code: Optional[str] = None,
                            localizer: Optional[Localizer] = None,
                            preset_matcher: Optional[PresetMatcher] = None) -> ValidationIssue:
    """Issue for a name that is only a category word."""
    return _make_name_issue(
        GENERIC_NAME,
        'issues.generic_name.message',
        'issues.fix.remove_generic_name.annotation',
        entity_id, name_key, generic_name, lang_code, localizer, preset_matcher,
    )


def make_incorrect_name_issue(entity_id: str, name_key: str, incorrect_name: str,
                              lang_code: Optional[str] = None,
                              localizer: Optional[Localizer] = None,
                              preset_matcher: Optional[PresetMatcher] = None) -> ValidationIssue:
    """Issue for a name the feature's not:name tag disclaims."""
    return _make_name_issue(
        NOT_NAME,
        'issues.incorrect_name.message',
        'issues.fix.remove_mistaken_name.annotation',
        entity_id, name_key, incorrect_name, lang_code, localizer, preset_matcher,
    )
