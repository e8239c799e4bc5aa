"""
Qualification counter.

Counts, per generation, the descendants whose GDP price equals the evaluating
user's reference price. Pure functions: no I/O, no shared state.
"""

import math
from collections import deque
from collections.abc import Mapping, Sequence
from decimal import Decimal

from gdp_rewards.config.reward_tiers import MAX_GENERATION
from gdp_rewards.services.reward.types import NetworkNode, NetworkSnapshot, QualifyingCounts
from gdp_rewards.utils.exceptions import InvalidInputError


def _validate_reference_price(reference_price: Decimal | float) -> None:
    if isinstance(reference_price, Decimal):
        finite = reference_price.is_finite()
    else:
        finite = math.isfinite(reference_price)
    if not finite:
        raise InvalidInputError(f"Reference price must be finite, got {reference_price}")


def count_qualifying(
    snapshot: NetworkSnapshot,
    reference_price: Decimal | float | None,
    max_generation: int = MAX_GENERATION,
    require_qualifying_lineage: bool = False,
) -> QualifyingCounts:
    """
    Count qualifying descendants per generation.

    A descendant qualifies iff its value equals reference_price exactly.
    Prices are fixed at enrollment, so equality means "same price tier";
    there is no tolerance band.

    Args:
        snapshot: Downstream network of the evaluated user
        reference_price: Evaluated user's own GDP price; None counts nothing
        max_generation: Deepest generation counted, deeper nodes are ignored
        require_qualifying_lineage: Only count a node whose ancestors up to
            the evaluated user all qualify

    Returns:
        One count per generation 1..max_generation

    Raises:
        InvalidInputError: max_generation < 1 or non-finite reference price

    Example:
        >>> snapshot = NetworkSnapshot(1, (NetworkNode(2, 1, Decimal("100")),))
        >>> count_qualifying(snapshot, Decimal("100")).count(1)
        1
    """
    if max_generation < 1:
        raise InvalidInputError(f"max_generation must be >= 1, got {max_generation}")

    counts = [0] * max_generation
    if reference_price is None:
        return QualifyingCounts(counts=tuple(counts))

    _validate_reference_price(reference_price)

    nodes = sorted(
        (node for node in snapshot.nodes if 1 <= node.generation <= max_generation),
        key=lambda node: node.generation,
    )

    qualified_ids: set[int] = set()
    for node in nodes:
        if node.value is None or node.value != reference_price:
            continue
        if (
            require_qualifying_lineage
            and node.generation > 1
            and node.parent_id not in qualified_ids
        ):
            continue
        qualified_ids.add(node.user_id)
        counts[node.generation - 1] += 1

    return QualifyingCounts(counts=tuple(counts))


def flatten_tree(
    root_user_id: int,
    children_by_parent: Mapping[int, Sequence[int]],
    values: Mapping[int, Decimal | None],
    max_generation: int = MAX_GENERATION,
) -> NetworkSnapshot:
    """
    Flatten an adjacency view of the referral tree into a snapshot.

    Walks breadth-first from the root, assigning generations, and stops at
    max_generation. A user reachable twice is only emitted once.

    Args:
        root_user_id: Evaluated user
        children_by_parent: Parent ID -> direct child IDs
        values: User ID -> GDP price
        max_generation: Deepest generation to emit

    Returns:
        Network snapshot of the root's descendants
    """
    nodes: list[NetworkNode] = []
    seen = {root_user_id}
    queue: deque[tuple[int, int]] = deque([(root_user_id, 0)])

    while queue:
        parent_id, generation = queue.popleft()
        if generation >= max_generation:
            continue
        for child_id in children_by_parent.get(parent_id, ()):
            if child_id in seen:
                continue
            seen.add(child_id)
            nodes.append(
                NetworkNode(
                    user_id=child_id,
                    generation=generation + 1,
                    value=values.get(child_id),
                    parent_id=parent_id,
                )
            )
            queue.append((child_id, generation + 1))

    return NetworkSnapshot(root_user_id=root_user_id, nodes=tuple(nodes))
