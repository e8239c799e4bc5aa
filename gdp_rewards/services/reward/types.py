"""
Type definitions for the reward engine.

Transient value objects produced and consumed by a single evaluation pass.
None of them is persisted.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from gdp_rewards.config.reward_settings import RewardSettingsSnapshot
from gdp_rewards.config.reward_tiers import RewardTier


@dataclass(frozen=True)
class NetworkNode:
    """
    Descendant of the evaluated user.

    Attributes:
        user_id: Descendant user ID
        generation: Depth below the evaluated user (1 = direct child)
        value: Descendant's GDP price, None if not bought in
        parent_id: Direct parent of the descendant
    """

    user_id: int
    generation: int
    value: Decimal | None
    parent_id: int | None = None


@dataclass(frozen=True)
class NetworkSnapshot:
    """Downstream network of root_user_id read at one point in time."""

    root_user_id: int
    nodes: tuple[NetworkNode, ...] = ()

    @property
    def depth(self) -> int:
        """Deepest generation present in the snapshot."""
        return max((node.generation for node in self.nodes), default=0)

    def at_generation(self, generation: int) -> list[NetworkNode]:
        """Nodes of a single generation."""
        return [node for node in self.nodes if node.generation == generation]


@dataclass(frozen=True)
class QualifyingCounts:
    """
    Qualifying descendants per generation.

    counts[0] is generation 1. Generations past the end of the vector read 0.
    """

    counts: tuple[int, ...] = ()

    @classmethod
    def of(cls, *counts: int) -> "QualifyingCounts":
        """Build counts from positional generation values, generation 1 first."""
        return cls(counts=tuple(counts))

    def count(self, generation: int) -> int:
        """Qualifying count at generation (1-based)."""
        if generation < 1 or generation > len(self.counts):
            return 0
        return self.counts[generation - 1]

    @property
    def total(self) -> int:
        """Qualifying descendants across all generations."""
        return sum(self.counts)

    def as_dict(self) -> dict[str, int]:
        """Counts keyed gen1..genN."""
        return {f"gen{index}": value for index, value in enumerate(self.counts, start=1)}


@dataclass(frozen=True)
class MissingRequirement:
    """First unmet generation of a tier and how many descendants it still needs."""

    generation: int
    shortfall: int

    def describe(self) -> str:
        """Human readable guidance."""
        return f"need {self.shortfall} more at generation {self.generation}"


@dataclass(frozen=True)
class TierEvaluation:
    """Result of evaluating one tier against a count vector."""

    tier: RewardTier
    progress_percent: float
    eligible: bool
    explanation: MissingRequirement | None
    weighted_progress: float
    direct_only_progress: float

    @property
    def direct_only_met(self) -> bool:
        """Whether the direct-only condition alone unlocks the tier."""
        return self.direct_only_progress >= 100.0


class ClaimState(str, Enum):
    """Claim lifecycle per (user, tier). CLAIMED is terminal."""

    UNCLAIMED = "unclaimed"
    CLAIMED = "claimed"


@dataclass(frozen=True)
class TierStatus:
    """Evaluation of a tier together with the user's claim state."""

    evaluation: TierEvaluation
    state: ClaimState
    button_label: str | None
    reward_amount: Decimal

    @property
    def can_claim(self) -> bool:
        """Whether a claim would be accepted right now."""
        return self.evaluation.eligible and self.state is ClaimState.UNCLAIMED


@dataclass(frozen=True)
class RewardOverview:
    """Everything the surrounding UI needs to render a user's reward progress."""

    user_id: int
    reference_price: Decimal | None
    counts: QualifyingCounts
    tiers: dict[RewardTier, TierStatus] = field(default_factory=dict)
    settings: RewardSettingsSnapshot = field(default_factory=RewardSettingsSnapshot)

    @property
    def reward_claimed(self) -> bool:
        """Whether any tier has been claimed."""
        return any(status.state is ClaimState.CLAIMED for status in self.tiers.values())
