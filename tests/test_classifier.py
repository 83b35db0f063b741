"""
Tests for Name Classifier
=========================
Raw tag matching, known generic words and disclaimed names in
namelint/classifier.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from namelint.classifier import (
    GENERIC_KEYS,
    NameVerdict,
    classify,
    is_disclaimed,
    is_generic_name,
    name_matches_raw_tag,
)
from namelint.generics import GenericWordRegistry


class StubRegistry:
    """Registry answering from a fixed set of lowercase words."""

    def __init__(self, words=()):
        self.words = set(words)
        self.queries = []

    def is_known_generic(self, text):
        self.queries.append(text)
        return text in self.words


class TestGenericKeys:

    def test_structural_keys(self):
        assert GENERIC_KEYS == (
            'aerialway', 'aeroway', 'amenity', 'building', 'craft', 'highway',
            'leisure', 'railway', 'man_made', 'office', 'shop', 'tourism', 'waterway',
        )


class TestNameMatchesRawTag:
    """Tests for the raw tag heuristic."""

    def test_matches_value(self):
        assert name_matches_raw_tag("bakery", {"shop": "bakery"})

    def test_matches_key(self):
        assert name_matches_raw_tag("shop", {"shop": "bakery"})

    def test_matches_value_with_spaces(self):
        assert name_matches_raw_tag("fast food", {"amenity": "fast_food"})

    def test_matches_key_with_spaces(self):
        assert name_matches_raw_tag("man made", {"man_made": "tower"})

    def test_value_compared_lowercase(self):
        assert name_matches_raw_tag("bakery", {"shop": "Bakery"})

    def test_key_must_be_present(self):
        assert not name_matches_raw_tag("shop", {"amenity": "cafe"})

    def test_empty_value_ignored(self):
        assert not name_matches_raw_tag("shop", {"shop": ""})

    def test_unlisted_key_ignored(self):
        assert not name_matches_raw_tag("park", {"landuse": "park"})

    def test_no_structural_tags(self):
        assert not name_matches_raw_tag("bakery", {"name": "Bakery"})

    def test_partial_match_is_not_generic(self):
        assert not name_matches_raw_tag("joe's bakery", {"shop": "bakery"})


class TestIsGenericName:
    """Tests for is_generic_name."""

    def test_raw_tag_match_case_insensitive(self):
        assert is_generic_name("BAKERY", {"shop": "bakery"})

    def test_registry_receives_lowercase(self):
        registry = StubRegistry({"bar"})
        assert is_generic_name("Bar", {}, registry)
        assert registry.queries == ["bar"]

    def test_registry_skipped_on_raw_match(self):
        registry = StubRegistry()
        assert is_generic_name("Bakery", {"shop": "bakery"}, registry)
        assert registry.queries == []

    def test_no_registry(self):
        assert not is_generic_name("Bar", {})

    def test_real_registry(self):
        registry = GenericWordRegistry(fetcher=object())
        registry.load_patterns(["^(bar|pub)$"])
        assert is_generic_name("Pub", {"amenity": "bar"}, registry)
        assert not is_generic_name("Joe's Diner", {"amenity": "restaurant"}, registry)


class TestIsDisclaimed:
    """Tests for not:name matching."""

    def test_exact_match(self):
        assert is_disclaimed("Bakery", ["Bakery"])

    def test_case_sensitive(self):
        assert not is_disclaimed("bakery", ["Bakery"])

    def test_empty_entries_ignored(self):
        assert not is_disclaimed("", ["", "Bakery"])

    def test_any_entry(self):
        assert is_disclaimed("Pub", ["Bar", "Pub"])


class TestClassify:
    """Tests for classify."""

    def test_acceptable(self):
        verdict = classify("Joe's Diner", {"amenity": "restaurant"}, [""], StubRegistry())
        assert verdict == NameVerdict(disclaimed=False, generic=False)
        assert not verdict.is_suspicious

    def test_generic(self):
        verdict = classify("Bakery", {"shop": "bakery"}, [""])
        assert verdict == NameVerdict(disclaimed=False, generic=True)
        assert verdict.is_suspicious

    def test_disclaimed_and_generic_evaluated_independently(self):
        verdict = classify("Bakery", {"shop": "bakery"}, ["Bakery"])
        assert verdict.disclaimed
        assert verdict.generic

    def test_custom_keys(self):
        verdict = classify("Park", {"landuse": "park"}, [""], keys=("landuse",))
        assert verdict.generic
