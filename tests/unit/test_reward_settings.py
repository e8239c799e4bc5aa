"""Unit tests for the reward settings snapshot and its repository."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from gdp_rewards.config.reward_settings import (
    DEFAULT_INVESTMENT_TERM_DAYS,
    RewardSettingsSnapshot,
)
from gdp_rewards.repositories.reward_settings_repository import RewardSettingsRepository
from gdp_rewards.utils.exceptions import InvalidInputError


class TestRewardSettingsSnapshot:
    """Test reward settings snapshot."""

    def test_defaults(self):
        """Defaults are zero percentages and a 30 day term."""
        snapshot = RewardSettingsSnapshot()

        assert snapshot.percentage == Decimal("0")
        assert snapshot.investment_term == DEFAULT_INVESTMENT_TERM_DAYS == 30

    def test_gdp_reward_rate(self):
        """Percentage converts to a fraction."""
        snapshot = RewardSettingsSnapshot(gdp_reward_percentage=Decimal("12.5"))
        assert snapshot.gdp_reward_rate == Decimal("0.125")

    @pytest.mark.parametrize(
        "field", ["percentage", "investment_percentage", "gdp_reward_percentage"]
    )
    @pytest.mark.parametrize("value", [Decimal("-0.01"), Decimal("100.01")])
    def test_percentages_bounded(self, field, value):
        """Percentages outside 0-100 are rejected."""
        with pytest.raises(InvalidInputError):
            RewardSettingsSnapshot(**{field: value})

    def test_negative_term_rejected(self):
        """Negative investment terms are rejected."""
        with pytest.raises(InvalidInputError):
            RewardSettingsSnapshot(investment_term=-1)

    def test_snapshot_is_immutable(self):
        """Snapshots cannot be mutated."""
        snapshot = RewardSettingsSnapshot()
        with pytest.raises(AttributeError):
            snapshot.percentage = Decimal("5")


def settings_row(**overrides) -> MagicMock:
    """Stored settings row with valid values unless overridden."""
    values = {
        "id": 1,
        "percentage": Decimal("5"),
        "investment_percentage": Decimal("10"),
        "investment_term": 90,
        "gdp_reward_percentage": Decimal("12.5"),
    }
    values.update(overrides)
    return MagicMock(**values)


class TestRewardSettingsRepository:
    """Test reading the settings row."""

    @pytest.fixture
    def repo(self, mock_session):
        return RewardSettingsRepository(mock_session)

    def stored(self, mock_session, row):
        result = MagicMock()
        result.scalar_one_or_none.return_value = row
        mock_session.execute.return_value = result

    @pytest.mark.asyncio
    async def test_missing_row_uses_defaults(self, repo, mock_session):
        """No settings row reads as defaults."""
        self.stored(mock_session, None)

        assert await repo.get_snapshot() == RewardSettingsSnapshot()

    @pytest.mark.asyncio
    async def test_valid_row(self, repo, mock_session):
        """A valid row is returned as is."""
        self.stored(mock_session, settings_row())

        snapshot = await repo.get_snapshot()

        assert snapshot.investment_term == 90
        assert snapshot.gdp_reward_percentage == Decimal("12.5")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"percentage": Decimal("999.99")},
            {"gdp_reward_percentage": Decimal("100.01")},
            {"investment_term": -1},
        ],
    )
    async def test_out_of_range_row_uses_defaults(self, repo, mock_session, overrides):
        """A row outside the allowed ranges is logged and replaced by defaults."""
        self.stored(mock_session, settings_row(**overrides))

        assert await repo.get_snapshot() == RewardSettingsSnapshot()
