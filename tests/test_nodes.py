"""Tests for location-node parsing."""

import pytest

from genealogy.nodes import (
    NO_PARENT,
    Decision,
    get_ancestor_nodes,
    get_ancestor_set,
    join_ids,
    split_ids
)


class TestAncestorSet:
    """Test parsing of the included and excluded location nodes."""

    def test_empty(self):
        assert get_ancestor_set(None) == frozenset()
        assert get_ancestor_set("") == frozenset()
        assert get_ancestor_set("  ") == frozenset()

    def test_adds_negated_ids(self):
        assert get_ancestor_set("10,20") == {10, -10, 20, -20}

    @pytest.mark.parametrize("nodes", [
        "10,20",
        "10;20",
        "10:20",
        "10 20",
        "10\t20\n",
        "(10, 20)",
        "[10][20]",
        "'10', \"20\"",
        "10. 20.",
    ])
    def test_separators(self, nodes):
        assert get_ancestor_set(nodes) == {10, -10, 20, -20}

    def test_skips_non_numeric_tokens(self):
        assert get_ancestor_set("10,abc,20x,30") == {10, -10, 30, -30}

    def test_negative_ids(self):
        assert get_ancestor_set("-40") == {40, -40}

    def test_root_sentinel_is_never_a_member(self):
        nodes = get_ancestor_set("1,-1")
        assert NO_PARENT not in nodes
        assert nodes == {1}

    def test_result_is_immutable(self):
        assert isinstance(get_ancestor_set("1"), frozenset)


class TestAncestorNodes:
    """Test the SQL rendering of the location nodes."""

    def test_duplicates_with_negation(self):
        assert get_ancestor_nodes("2000,3000") == "2000,-2000,3000,-3000"

    def test_empty(self):
        assert get_ancestor_nodes("") == ""
        assert get_ancestor_nodes(None) == ""

    def test_normalizes_separators(self):
        assert get_ancestor_nodes("(2000; 3000)") == "2000,-2000,3000,-3000"


class TestIds:
    """Test id list conversions."""

    def test_join(self):
        assert join_ids([1000, 1001]) == "1000,1001"
        assert join_ids([]) == ""

    def test_split(self):
        assert split_ids("1000,1001") == [1000, 1001]
        assert split_ids("") == []
        assert split_ids(None) == []

    def test_split_rejects_garbage(self):
        with pytest.raises(ValueError):
            split_ids("1000,abc")

    def test_decision_values(self):
        assert Decision.INCLUDED.value == "included"
        assert Decision.EXCLUDED.value == "excluded"
        assert Decision("excluded") is Decision.EXCLUDED
