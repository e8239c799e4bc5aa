"""
Unit tests for the tier evaluator.

Tests cover:
- Weighted multi-generation progress
- Direct-only condition and its precedence
- Eligibility threshold and explanations
- Monotonicity
- Zero thresholds and invalid input
"""

from decimal import Decimal

import pytest

from gdp_rewards.config.reward_tiers import REWARD_TIERS, RewardTier, TierDefinition
from gdp_rewards.services.reward.tier_evaluator import (
    evaluate_all,
    evaluate_tier,
    validate_counts,
    validate_tier_definition,
)
from gdp_rewards.services.reward.types import MissingRequirement, QualifyingCounts
from gdp_rewards.utils.exceptions import InvalidInputError


def make_definition(
    thresholds: tuple[int, ...],
    weights: tuple[float, ...],
    direct_only: int,
) -> TierDefinition:
    """Ad-hoc tier definition for edge cases."""
    return TierDefinition(
        tier=RewardTier.TIER_150,
        percent=150,
        thresholds=thresholds,
        weights=weights,
        direct_only_threshold=direct_only,
        payout_rate=Decimal("0.5"),
        display_name="test",
    )


class TestWeightedProgress:
    """Test the weighted multi-generation condition."""

    def test_150_partial_progress(self):
        """Two of three direct and two of four second-generation -> 58.33%."""
        result = evaluate_tier(
            QualifyingCounts.of(2, 2), REWARD_TIERS[RewardTier.TIER_150]
        )

        assert result.progress_percent == pytest.approx(58.333, abs=0.01)
        assert result.eligible is False
        assert result.explanation == MissingRequirement(generation=1, shortfall=1)
        assert result.explanation.describe() == "need 1 more at generation 1"

    def test_all_generations_met_is_exactly_100(self):
        """Meeting every threshold yields exactly 100."""
        result = evaluate_tier(
            QualifyingCounts.of(16, 4, 8, 16, 32, 64),
            REWARD_TIERS[RewardTier.TIER_1000],
        )

        assert result.weighted_progress == 100.0
        assert result.progress_percent == 100.0
        assert result.eligible is True
        assert result.explanation is None

    def test_surplus_does_not_compensate_other_generations(self):
        """Each generation ratio is capped at 1."""
        result = evaluate_tier(
            QualifyingCounts.of(3, 40), REWARD_TIERS[RewardTier.TIER_150]
        )
        # gen1 met (50) + gen2 met (50) -> 100
        assert result.eligible is True

        result = evaluate_tier(
            QualifyingCounts.of(0, 40), REWARD_TIERS[RewardTier.TIER_150]
        )
        assert result.weighted_progress == pytest.approx(50.0)
        assert result.eligible is False

    def test_missing_generations_read_as_zero(self):
        """Short count vectors count as zero for deeper generations."""
        result = evaluate_tier(
            QualifyingCounts.of(4), REWARD_TIERS[RewardTier.TIER_200]
        )

        assert result.weighted_progress == pytest.approx(33.33)
        assert result.explanation == MissingRequirement(generation=2, shortfall=4)

    def test_explanation_is_first_unmet_generation(self):
        """Explanation names the lowest unmet generation."""
        result = evaluate_tier(
            QualifyingCounts.of(6, 4, 3, 0), REWARD_TIERS[RewardTier.TIER_300]
        )

        assert result.explanation == MissingRequirement(generation=3, shortfall=5)


class TestDirectOnly:
    """Test the direct-only condition."""

    def test_130_reached_with_two_direct(self):
        """Two qualifying direct children unlock 130%."""
        result = evaluate_tier(
            QualifyingCounts.of(2), REWARD_TIERS[RewardTier.TIER_130]
        )

        assert result.progress_percent == 100.0
        assert result.eligible is True

    def test_130_half_way(self):
        """One qualifying direct child is 50% of 130%."""
        result = evaluate_tier(
            QualifyingCounts.of(1), REWARD_TIERS[RewardTier.TIER_130]
        )

        assert result.progress_percent == pytest.approx(50.0)
        assert result.eligible is False
        assert result.explanation.describe() == "need 1 more at generation 1"

    @pytest.mark.parametrize("tier", list(RewardTier))
    def test_direct_only_always_unlocks(self, tier):
        """Meeting the direct-only threshold yields 100% with no deeper network."""
        definition = REWARD_TIERS[tier]
        result = evaluate_tier(
            QualifyingCounts.of(definition.direct_only_threshold), definition
        )

        assert result.progress_percent == 100.0
        assert result.eligible is True
        assert result.direct_only_met is True
        assert result.explanation is None

    def test_direct_only_beats_weighted(self):
        """Progress is the better of both conditions."""
        result = evaluate_tier(
            QualifyingCounts.of(3), REWARD_TIERS[RewardTier.TIER_200]
        )
        # weighted: 3/4 * 33.33 = 25; direct-only: 3/6 * 100 = 50
        assert result.weighted_progress == pytest.approx(24.9975)
        assert result.direct_only_progress == pytest.approx(50.0)
        assert result.progress_percent == pytest.approx(50.0)


class TestEligibility:
    """Test eligibility and monotonicity."""

    @pytest.mark.parametrize(
        "counts",
        [(0,), (1, 1), (2, 3), (3, 4), (5, 0, 8), (16, 4, 8, 16, 32, 64)],
    )
    @pytest.mark.parametrize("tier", list(RewardTier))
    def test_eligible_iff_full_progress(self, tier, counts):
        """eligible is exactly progress >= 100."""
        result = evaluate_tier(QualifyingCounts.of(*counts), REWARD_TIERS[tier])

        assert result.eligible == (result.progress_percent >= 100.0)
        assert 0.0 <= result.progress_percent <= 100.0

    @pytest.mark.parametrize("tier", list(RewardTier))
    def test_progress_is_monotonic(self, tier):
        """Adding a qualifying descendant never lowers progress."""
        definition = REWARD_TIERS[tier]
        counts = [0] * len(definition.thresholds)
        previous = evaluate_tier(QualifyingCounts.of(*counts), definition).progress_percent

        for step in range(40):
            counts[step % len(counts)] += 1
            current = evaluate_tier(
                QualifyingCounts.of(*counts), definition
            ).progress_percent
            assert current >= previous
            previous = current

    def test_evaluate_all_is_independent_per_tier(self):
        """Every tier is evaluated against the same counts."""
        results = evaluate_all(QualifyingCounts.of(4, 4))

        assert list(results) == list(RewardTier)
        assert results[RewardTier.TIER_130].eligible is True
        assert results[RewardTier.TIER_150].eligible is True
        assert results[RewardTier.TIER_200].eligible is False

    def test_evaluate_all_subset(self):
        """A subset of tiers can be evaluated."""
        results = evaluate_all(
            QualifyingCounts.of(1), tiers=[RewardTier.TIER_130]
        )
        assert list(results) == [RewardTier.TIER_130]


class TestEdgeCases:
    """Test zero thresholds and invalid input."""

    def test_zero_threshold_is_satisfied(self):
        """A zero threshold counts as fully met."""
        definition = make_definition((0, 2), (50.0, 50.0), direct_only=5)
        result = evaluate_tier(QualifyingCounts.of(0, 1), definition)

        assert result.weighted_progress == pytest.approx(75.0)
        assert result.explanation == MissingRequirement(generation=2, shortfall=1)

    def test_zero_direct_only_threshold_unlocks(self):
        """A zero direct-only threshold is trivially met."""
        definition = make_definition((3, 4), (50.0, 50.0), direct_only=0)
        result = evaluate_tier(QualifyingCounts.of(), definition)

        assert result.eligible is True

    @pytest.mark.parametrize("bad", [-1, 1.5, float("nan"), float("inf"), "2"])
    def test_invalid_counts_rejected(self, bad):
        """Negative, fractional and non-finite counts raise."""
        with pytest.raises(InvalidInputError):
            evaluate_tier(
                QualifyingCounts(counts=(bad,)), REWARD_TIERS[RewardTier.TIER_130]
            )

    def test_integral_float_count_accepted(self):
        """Integral floats are accepted as counts."""
        result = evaluate_tier(
            QualifyingCounts(counts=(2.0,)), REWARD_TIERS[RewardTier.TIER_130]
        )
        assert result.eligible is True

    def test_integral_float_shortfall_is_int(self):
        """Counts given as floats still explain the shortfall in whole users."""
        result = evaluate_tier(
            QualifyingCounts(counts=(1.0,)), REWARD_TIERS[RewardTier.TIER_130]
        )

        assert result.explanation == MissingRequirement(generation=1, shortfall=1)
        assert isinstance(result.explanation.shortfall, int)
        assert result.explanation.describe() == "need 1 more at generation 1"

    def test_validate_counts_returns_ints(self):
        """Validated counts hold ints only."""
        counts = validate_counts(QualifyingCounts(counts=(2.0, 0, 3.0)))

        assert counts == QualifyingCounts.of(2, 0, 3)
        assert all(type(value) is int for value in counts.counts)

    @pytest.mark.parametrize(
        "thresholds, weights, direct_only",
        [
            ((), (), 1),
            ((1, 2), (100.0,), 1),
            ((1, -2), (50.0, 50.0), 1),
            ((1, 2), (50.0, 40.0), 1),
            ((1, 2), (50.0, 50.0), -1),
        ],
    )
    def test_malformed_definitions_rejected(self, thresholds, weights, direct_only):
        """Malformed definitions raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            validate_tier_definition(make_definition(thresholds, weights, direct_only))
