"""
Tests for partitioning target identifiers into contexts.
"""

import random

import pytest

from contextbundle.context import Context, partition_identifiers
from contextbundle.graph import DependencyGraph
from contextbundle.grouping import build_groups
from contextbundle.schemas import Snippet
from contextbundle.snippets import SnippetPackage


class TestPartition:
    """Greedy cover over target identifiers."""

    def test_free_identifiers_share_a_context(self, builder):
        builder.add("v", kind="value", text="var v = 5", full_text="var v = 5")
        builder.add("UseV", uses=["v"])
        groups = builder.groups()

        result = partition_identifiers(groups, ["v", "UseV"])
        assert list(result.values()) == [["v", "UseV"]]
        context = next(iter(result))
        assert isinstance(context, Context)
        assert context.added_identifiers() == ["v"]

    def test_order_matters(self, builder):
        builder.add("A", uses=["B"])
        builder.add("B")
        groups = builder.groups()

        # B's context shows A in full, and A's only dep is B
        assert list(partition_identifiers(groups, ["B", "A"]).values()) == [["B", "A"]]
        # A's context only has B's signature
        assert list(partition_identifiers(groups, ["A", "B"]).values()) == [["A"], ["B"]]

    def test_unknown_identifiers_dropped(self, builder):
        builder.add("A")
        groups = builder.groups()
        assert list(partition_identifiers(groups, ["nope", "A", "A"]).values()) == [["A"]]

    def test_group_members_are_covered_together(self, builder):
        builder.add(["X", "Y"], kind="value", is_var=False)
        builder.add("Z")
        groups = builder.groups()
        result = partition_identifiers(groups, ["Y", "Z", "X"])
        assert list(result.values()) == [["Y", "X"], ["Z"]]

    def test_empty(self, builder):
        builder.add("A")
        assert partition_identifiers(builder.groups(), []) == {}
        assert partition_identifiers([], ["A"]) == {}

    @pytest.mark.parametrize("seed", range(15))
    def test_disjoint_and_complete(self, seed, make_options):
        rng = random.Random(seed)
        names = [f"n{i}" for i in range(12)]
        uses = {n: [m for m in names if m != n and rng.random() < 0.15] for n in names}
        snippets = [
            Snippet(
                ids=[n],
                text=f"func {n}()",
                full_text=f"func {n}() {{}}",
                docs=[{"identifier": n, "doc": "//"}] if rng.random() < 0.6 else [],
            )
            for n in names
        ]
        graph = DependencyGraph(uses, identifiers=names)
        groups = build_groups(graph, SnippetPackage("pkg", snippets), make_options())

        targets = rng.sample(names, 8) + ["unknown"]
        result = partition_identifiers(groups, targets)

        covered = [i for ids in result.values() for i in ids]
        assert len(covered) == len(set(covered))
        assert set(covered) == set(targets) - {"unknown"}
        for context, ids in result.items():
            assert set(ids) <= set(context.all_identifiers())
