"""
Tests for Validation Issues
===========================
Issue identity, deferred messages, references and fixes in
namelint/issues.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namelint.context import Entity, Graph, EditContext
from namelint.issues import (
    IssueList,
    ValidationIssueFix,
    make_generic_name_issue,
    make_incorrect_name_issue,
    GENERIC_NAME,
    NOT_NAME,
)
from namelint.localizer import Localizer


@pytest.fixture
def context():
    return EditContext(Graph([
        Entity("n1", {"shop": "bakery", "name": "Bakery", "name:fr": "Boulangerie"}),
    ]))


class TestIssueIdentity:
    """Tests for issue fields and equality."""

    def test_generic_issue_fields(self):
        issue = make_generic_name_issue("n1", "name", "Bakery", None)
        assert issue.type == "suspicious_name"
        assert issue.subtype == GENERIC_NAME
        assert issue.severity == "warning"
        assert issue.entity_ids == ["n1"]
        assert issue.hash == "name=Bakery"

    def test_incorrect_issue_fields(self):
        issue = make_incorrect_name_issue("n1", "name:fr", "Boulangerie", "fr")
        assert issue.subtype == NOT_NAME
        assert issue.hash == "name:fr=Boulangerie"

    def test_equal_when_same_identity(self):
        a = make_generic_name_issue("n1", "name", "Bakery", None)
        b = make_generic_name_issue("n1", "name", "Bakery", None)
        assert a == b
        assert len({a, b}) == 1

    def test_subtype_and_entity_distinguish(self):
        generic = make_generic_name_issue("n1", "name", "Bakery", None)
        assert generic != make_incorrect_name_issue("n1", "name", "Bakery", None)
        assert generic != make_generic_name_issue("n2", "name", "Bakery", None)


class TestMessages:
    """Tests for deferred message rendering."""

    def test_generic_message(self, context):
        issue = make_generic_name_issue("n1", "name", "Bakery", None)
        assert issue.message(context) == 'Bakery has the suspicious name "Bakery"'

    def test_generic_message_with_language(self, context):
        issue = make_generic_name_issue("n1", "name:fr", "Boulangerie", "fr")
        assert issue.message(context) == 'Bakery has the suspicious name "Boulangerie" in French'

    def test_incorrect_message(self, context):
        issue = make_incorrect_name_issue("n1", "name", "Bakery", None)
        assert issue.message(context) == 'Bakery has the mistaken name "Bakery"'

    def test_unknown_language_uses_code(self, context):
        issue = make_incorrect_name_issue("n1", "name:xx", "Bakery", "xx")
        assert issue.message(context).endswith(" in xx")

    def test_message_escapes_name(self):
        context = EditContext(Graph([Entity("n1", {"amenity": "bar", "name": "<b>Bar</b>"})]))
        issue = make_generic_name_issue("n1", "name", "<b>Bar</b>", None)
        assert "&lt;b&gt;" in issue.message(context)

    def test_deleted_entity_renders_empty(self):
        issue = make_generic_name_issue("gone", "name", "Bakery", None)
        assert issue.message(EditContext()) == ""

    def test_custom_localizer(self, context):
        localizer = Localizer({
            "issues": {
                "generic_name": {"message": "{feature}: {name}", "reference": "ref"},
                "fix": {
                    "remove_the_name": {"title": "Remove"},
                    "remove_generic_name": {"annotation": "gone"},
                },
            },
            "languages": {},
        })
        issue = make_generic_name_issue("n1", "name", "Bakery", None, localizer=localizer)
        assert issue.message(context) == "Bakery: Bakery"
        assert issue.reference() == "ref"
        assert issue.fixes()[0].annotation == "gone"


class TestReference:
    """Tests for the reference renderer."""

    def test_shared_reference_text(self):
        generic = make_generic_name_issue("n1", "name", "Bakery", None)
        incorrect = make_incorrect_name_issue("n1", "name", "Bakery", None)
        assert generic.reference() == incorrect.reference()
        assert "on-the-ground" in generic.reference()

    def test_appends_once(self):
        issue = make_generic_name_issue("n1", "name", "Bakery", None)
        selection = []
        issue.reference(selection)
        issue.reference(selection)
        assert len(selection) == 1


class TestFixes:
    """Tests for the remove-the-name fix."""

    def test_single_fix(self):
        fixes = make_generic_name_issue("n1", "name", "Bakery", None).fixes()
        assert len(fixes) == 1
        fix = fixes[0]
        assert isinstance(fix, ValidationIssueFix)
        assert fix.icon == "iD-operation-delete"
        assert fix.title() == "Remove the name"
        assert fix.name_key == "name"
        assert fix.issue is not None and fix.issue.hash == "name=Bakery"

    def test_title_rendered_on_call(self):
        strings = {
            "issues": {"fix": {
                "remove_the_name": {"title": "Remove"},
                "remove_generic_name": {"annotation": "gone"},
            }},
            "languages": {},
        }
        fix = make_generic_name_issue("n1", "name", "Bakery", None,
                                      localizer=Localizer(strings)).fixes()[0]
        strings["issues"]["fix"]["remove_the_name"]["title"] = "Delete the name"
        assert fix.title() == "Delete the name"

    def test_generic_fix_removes_only_target(self, context):
        issue = make_generic_name_issue("n1", "name", "Bakery", None)
        assert issue.fixes()[0].apply(context)
        assert context.entity("n1").tags == {"shop": "bakery", "name:fr": "Boulangerie"}
        assert context.annotation == "Removed a generic name."

    def test_incorrect_fix_annotation(self, context):
        issue = make_incorrect_name_issue("n1", "name:fr", "Boulangerie", "fr")
        issue.fixes()[0].apply(context)
        assert "name:fr" not in context.entity("n1").tags
        assert context.annotation == "Removed a mistaken name."

    def test_fix_twice_is_noop(self, context):
        fix = make_generic_name_issue("n1", "name", "Bakery", None).fixes()[0]
        assert fix.apply(context) is True
        assert fix.apply(context) is False
        assert context.history == ["Removed a generic name."]
        assert context.entity("n1").tags == {"shop": "bakery", "name:fr": "Boulangerie"}

    def test_fix_is_undoable(self, context):
        make_generic_name_issue("n1", "name", "Bakery", None).fixes()[0].apply(context)
        context.undo()
        assert context.entity("n1").tags["name"] == "Bakery"

    def test_fix_does_not_mutate_original_tags(self, context):
        original = context.entity("n1").tags
        make_generic_name_issue("n1", "name", "Bakery", None).fixes()[0].apply(context)
        assert original["name"] == "Bakery"


class TestIssueList:

    def test_defaults(self):
        issues = IssueList()
        assert issues == []
        assert issues.provisional is False

    def test_provisional(self):
        issue = make_generic_name_issue("n1", "name", "Bakery", None)
        issues = IssueList([issue], provisional=True)
        assert list(issues) == [issue]
        assert issues.provisional is True
