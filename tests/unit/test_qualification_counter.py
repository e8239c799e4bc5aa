"""
Unit tests for the qualification counter.

Tests cover:
- Exact price equality
- Generation cut-off
- Qualifying-lineage mode
- Tree flattening
"""

from decimal import Decimal

import pytest

from gdp_rewards.services.reward.qualification_counter import count_qualifying, flatten_tree
from gdp_rewards.services.reward.types import NetworkNode, NetworkSnapshot
from gdp_rewards.utils.exceptions import InvalidInputError


PRICE = Decimal("100")


def node(user_id: int, generation: int, value, parent_id: int | None = None) -> NetworkNode:
    """Build a network node with a Decimal value."""
    return NetworkNode(
        user_id=user_id,
        generation=generation,
        value=Decimal(value) if value is not None else None,
        parent_id=parent_id,
    )


class TestCountQualifying:
    """Test per-generation counting."""

    def test_counts_equal_prices_per_generation(self):
        """Only descendants with the reference price are counted."""
        snapshot = NetworkSnapshot(
            root_user_id=1,
            nodes=(
                node(2, 1, "100", 1),
                node(3, 1, "100", 1),
                node(4, 1, "200", 1),
                node(5, 2, "100", 2),
                node(6, 2, None, 3),
            ),
        )

        counts = count_qualifying(snapshot, PRICE)

        assert counts.count(1) == 2
        assert counts.count(2) == 1
        assert counts.total == 3
        assert len(counts.counts) == 6

    def test_equality_is_exact(self):
        """Near-equal prices do not qualify; equal scales do."""
        snapshot = NetworkSnapshot(
            root_user_id=1,
            nodes=(
                node(2, 1, "100.00000000", 1),
                node(3, 1, "100.00000001", 1),
                node(4, 1, "99.99999999", 1),
            ),
        )

        assert count_qualifying(snapshot, PRICE).count(1) == 1

    def test_deeper_generations_ignored(self):
        """Generations beyond max_generation are not counted."""
        snapshot = NetworkSnapshot(
            root_user_id=1,
            nodes=tuple(node(10 + g, g, "100") for g in range(1, 9)),
        )

        counts = count_qualifying(snapshot, PRICE, max_generation=5)

        assert counts.counts == (1, 1, 1, 1, 1)
        assert counts.count(6) == 0

    def test_no_reference_price_counts_nothing(self):
        """Users without a GDP price have no qualifying network."""
        snapshot = NetworkSnapshot(root_user_id=1, nodes=(node(2, 1, "100"),))

        counts = count_qualifying(snapshot, None)

        assert counts.total == 0

    def test_empty_snapshot(self):
        """Empty network yields all zero counts."""
        counts = count_qualifying(NetworkSnapshot(root_user_id=1), PRICE)
        assert counts.as_dict() == {f"gen{g}": 0 for g in range(1, 7)}

    def test_invalid_max_generation(self):
        """max_generation below 1 raises."""
        with pytest.raises(InvalidInputError):
            count_qualifying(NetworkSnapshot(root_user_id=1), PRICE, max_generation=0)

    def test_non_finite_price_rejected(self):
        """Non-finite reference prices raise."""
        with pytest.raises(InvalidInputError):
            count_qualifying(NetworkSnapshot(root_user_id=1), Decimal("NaN"))


class TestQualifyingLineage:
    """Test the lineage rule."""

    @pytest.fixture
    def snapshot(self):
        """Grandchild at the reference price below a child at another price."""
        return NetworkSnapshot(
            root_user_id=1,
            nodes=(
                node(2, 1, "200", 1),
                node(3, 2, "100", 2),
                node(4, 1, "100", 1),
                node(5, 2, "100", 4),
            ),
        )

    def test_lineage_ignored_by_default(self, snapshot):
        """Without the rule every matching descendant counts."""
        counts = count_qualifying(snapshot, PRICE)
        assert counts.counts[:2] == (1, 2)

    def test_lineage_required(self, snapshot):
        """With the rule a non-qualifying parent cuts off its subtree."""
        counts = count_qualifying(snapshot, PRICE, require_qualifying_lineage=True)
        assert counts.counts[:2] == (1, 1)


class TestFlattenTree:
    """Test adjacency flattening."""

    def test_assigns_generations_breadth_first(self):
        """Generations follow the distance from the root."""
        snapshot = flatten_tree(
            root_user_id=1,
            children_by_parent={1: [2, 3], 2: [4], 4: [5]},
            values={2: PRICE, 3: PRICE, 4: PRICE, 5: None},
        )

        generations = {n.user_id: n.generation for n in snapshot.nodes}
        assert generations == {2: 1, 3: 1, 4: 2, 5: 3}
        assert snapshot.depth == 3
        assert [n.user_id for n in snapshot.at_generation(1)] == [2, 3]

    def test_stops_at_max_generation(self):
        """Nodes below max_generation are not emitted."""
        snapshot = flatten_tree(
            root_user_id=1,
            children_by_parent={1: [2], 2: [3], 3: [4]},
            values={},
            max_generation=2,
        )
        assert [n.user_id for n in snapshot.nodes] == [2, 3]

    def test_cycles_are_visited_once(self):
        """A cyclic adjacency view does not loop forever."""
        snapshot = flatten_tree(
            root_user_id=1,
            children_by_parent={1: [2], 2: [1, 3], 3: [2]},
            values={2: PRICE, 3: PRICE},
        )
        assert sorted(n.user_id for n in snapshot.nodes) == [2, 3]

    def test_flattened_tree_feeds_counter(self):
        """Flattened snapshots can be counted directly."""
        snapshot = flatten_tree(
            root_user_id=1,
            children_by_parent={1: [2, 3], 2: [4, 5, 6, 7]},
            values={2: PRICE, 3: PRICE, 4: PRICE, 5: PRICE, 6: PRICE, 7: Decimal("50")},
        )
        assert count_qualifying(snapshot, PRICE).counts[:2] == (2, 3)
