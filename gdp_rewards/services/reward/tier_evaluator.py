"""
Tier evaluator.

One evaluator for every reward tier, parameterised by a TierDefinition.
A tier is reached either through the weighted multi-generation condition or
through the direct-only condition; progress is the better of the two.
"""

import math
from collections.abc import Iterable, Mapping

from gdp_rewards.config.reward_tiers import REWARD_TIER_ORDER, REWARD_TIERS, RewardTier, TierDefinition
from gdp_rewards.services.reward.types import MissingRequirement, QualifyingCounts, TierEvaluation
from gdp_rewards.utils.exceptions import InvalidInputError


FULL_PROGRESS = 100.0

# Allowed drift of the weight sum from 100 (weights are rounded to 2 places)
WEIGHT_SUM_TOLERANCE = 0.01


def validate_tier_definition(definition: TierDefinition) -> None:
    """
    Validate a tier definition.

    Raises:
        InvalidInputError: If the definition is malformed
    """
    thresholds = definition.thresholds
    weights = definition.weights

    if not thresholds:
        raise InvalidInputError(f"Tier {definition.tier} has no thresholds")
    if len(thresholds) != len(weights):
        raise InvalidInputError(
            f"Tier {definition.tier}: {len(thresholds)} thresholds "
            f"but {len(weights)} weights"
        )
    if any(not isinstance(t, int) or isinstance(t, bool) or t < 0 for t in thresholds):
        raise InvalidInputError(
            f"Tier {definition.tier}: thresholds must be non-negative integers"
        )
    if any(not math.isfinite(w) or w < 0 for w in weights):
        raise InvalidInputError(
            f"Tier {definition.tier}: weights must be finite and non-negative"
        )
    if abs(math.fsum(weights) - FULL_PROGRESS) > WEIGHT_SUM_TOLERANCE:
        raise InvalidInputError(
            f"Tier {definition.tier}: weights sum to {math.fsum(weights)}, expected 100"
        )
    if (
        not isinstance(definition.direct_only_threshold, int)
        or definition.direct_only_threshold < 0
    ):
        raise InvalidInputError(
            f"Tier {definition.tier}: direct-only threshold must be a non-negative integer"
        )


def validate_counts(counts: QualifyingCounts) -> QualifyingCounts:
    """
    Validate a count vector.

    Integral floats (2.0) are accepted and converted to int.

    Returns:
        Counts holding ints only

    Raises:
        InvalidInputError: Negative, non-integer or non-finite counts
    """
    normalized = []
    for generation, value in enumerate(counts.counts, start=1):
        if isinstance(value, bool) or not isinstance(value, int):
            if isinstance(value, float) and math.isfinite(value) and value.is_integer():
                value = int(value)
            else:
                raise InvalidInputError(
                    f"Count at generation {generation} must be a finite integer, got {value!r}"
                )
        if value < 0:
            raise InvalidInputError(
                f"Count at generation {generation} must not be negative, got {value}"
            )
        normalized.append(value)
    return QualifyingCounts(counts=tuple(normalized))


def _ratio(count: int, threshold: int) -> float:
    # Zero threshold is trivially satisfied
    if threshold == 0:
        return 1.0
    return min(count / threshold, 1.0)


def evaluate_tier(
    counts: QualifyingCounts, definition: TierDefinition
) -> TierEvaluation:
    """
    Evaluate one tier.

    weighted = sum over the tier's generations of min(count/threshold, 1) * weight
    direct-only = min(count[1] / direct_only_threshold, 1) * 100
    progress = max(weighted, direct-only), clamped to [0, 100]

    Args:
        counts: Qualifying counts per generation
        definition: Tier definition

    Returns:
        Progress, eligibility and the first unmet generation when not eligible

    Raises:
        InvalidInputError: Malformed counts or definition
    """
    validate_tier_definition(definition)
    counts = validate_counts(counts)

    ratios = [
        _ratio(counts.count(generation), threshold)
        for generation, threshold in enumerate(definition.thresholds, start=1)
    ]

    if all(ratio >= 1.0 for ratio in ratios):
        weighted = FULL_PROGRESS
    else:
        weighted = min(
            math.fsum(ratio * weight for ratio, weight in zip(ratios, definition.weights)),
            FULL_PROGRESS,
        )

    direct_only = _ratio(counts.count(1), definition.direct_only_threshold) * FULL_PROGRESS

    progress = min(max(weighted, direct_only, 0.0), FULL_PROGRESS)
    eligible = progress >= FULL_PROGRESS

    explanation = None
    if not eligible:
        for generation, threshold in enumerate(definition.thresholds, start=1):
            count = counts.count(generation)
            if count < threshold:
                explanation = MissingRequirement(
                    generation=generation, shortfall=threshold - count
                )
                break

    return TierEvaluation(
        tier=definition.tier,
        progress_percent=progress,
        eligible=eligible,
        explanation=explanation,
        weighted_progress=weighted,
        direct_only_progress=direct_only,
    )


def evaluate_all(
    counts: QualifyingCounts,
    definitions: Mapping[RewardTier, TierDefinition] | None = None,
    tiers: Iterable[RewardTier] | None = None,
) -> dict[RewardTier, TierEvaluation]:
    """
    Evaluate several tiers independently against the same counts.

    Args:
        counts: Qualifying counts per generation
        definitions: Tier table (defaults to REWARD_TIERS)
        tiers: Tiers to evaluate (defaults to every tier, ascending)

    Returns:
        Evaluation per tier
    """
    definitions = definitions if definitions is not None else REWARD_TIERS
    tiers = list(tiers) if tiers is not None else [
        tier for tier in REWARD_TIER_ORDER if tier in definitions
    ]
    return {tier: evaluate_tier(counts, definitions[tier]) for tier in tiers}
