"""Tests for volatility scoring, classification, drivers and narrative."""

import pytest

from sprint_vix.tools.risk_scorer import (
    CRITICAL,
    DRIVER_EXCESSIVE_CHURN,
    DRIVER_TIGHT_PIT_WINDOW,
    DRIVER_YELLOW_FLAGS,
    HIGH,
    LOW,
    MEDIUM,
    classify_risk_level,
    compute_volatility_index,
    detect_key_drivers,
    generate_narrative,
)


class TestVolatilityIndex:
    def test_blend(self):
        assert compute_volatility_index(0.5, 2.0) == 60

    def test_rounds_half_away_from_zero(self):
        assert compute_volatility_index(0.0, 2.5) == 13
        assert compute_volatility_index(0.0, 0.5) == 3

    def test_capped_at_100(self):
        assert compute_volatility_index(1.0, 0.0) == 100
        assert compute_volatility_index(0.9, 10.0) == 100

    def test_monotone_in_crash_probability(self):
        scores = [compute_volatility_index(p / 20, 1.5) for p in range(21)]
        assert scores == sorted(scores)

    def test_monotone_in_churn(self):
        scores = [compute_volatility_index(0.3, c / 4) for c in range(60)]
        assert scores == sorted(scores)
        assert max(scores) == 100


class TestRiskLevel:
    @pytest.mark.parametrize(
        "score,expected",
        [
            (0, LOW),
            (25, LOW),
            (26, MEDIUM),
            (50, MEDIUM),
            (51, HIGH),
            (75, HIGH),
            (76, CRITICAL),
            (100, CRITICAL),
        ],
    )
    def test_boundaries(self, score, expected):
        assert classify_risk_level(score) == expected

    def test_custom_thresholds(self):
        assert classify_risk_level(30, low=10, medium=20, high=40) == HIGH


class TestKeyDrivers:
    """Each rule fires on its own and order follows evaluation order."""

    def _drivers(self, avg_churn=0.0, days_remaining=10, remaining=10.0, total=100.0, blocked=False):
        return detect_key_drivers(
            avg_churn=avg_churn,
            days_remaining=days_remaining,
            remaining_points=remaining,
            total_committed_points=total,
            any_blocked=blocked,
        )

    def test_none(self):
        assert self._drivers() == []

    def test_only_churn(self):
        assert self._drivers(avg_churn=2.5) == [DRIVER_EXCESSIVE_CHURN]

    def test_churn_of_exactly_two_does_not_fire(self):
        assert self._drivers(avg_churn=2.0) == []

    def test_only_pit_window(self):
        assert self._drivers(days_remaining=2, remaining=31) == [DRIVER_TIGHT_PIT_WINDOW]

    def test_pit_window_needs_more_than_thirty_percent(self):
        assert self._drivers(days_remaining=2, remaining=30) == []
        assert self._drivers(days_remaining=3, remaining=80) == []

    def test_only_blocked(self):
        assert self._drivers(blocked=True) == [DRIVER_YELLOW_FLAGS]

    def test_two_drivers(self):
        assert self._drivers(avg_churn=3, blocked=True) == [
            DRIVER_EXCESSIVE_CHURN,
            DRIVER_YELLOW_FLAGS,
        ]

    def test_all_three_in_order(self):
        assert self._drivers(avg_churn=4, days_remaining=1, remaining=60, blocked=True) == [
            DRIVER_EXCESSIVE_CHURN,
            DRIVER_TIGHT_PIT_WINDOW,
            DRIVER_YELLOW_FLAGS,
        ]


class TestNarrative:
    def test_critical_cites_first_driver(self):
        text = generate_narrative(80, [DRIVER_YELLOW_FLAGS, DRIVER_EXCESSIVE_CHURN])
        assert text.startswith("CRITICAL")
        assert DRIVER_YELLOW_FLAGS in text
        assert DRIVER_EXCESSIVE_CHURN not in text

    def test_critical_without_drivers(self):
        assert "High volatility" in generate_narrative(76, [])

    def test_warning_ignores_drivers(self):
        text = generate_narrative(75, [DRIVER_YELLOW_FLAGS])
        assert text.startswith("WARNING")
        assert DRIVER_YELLOW_FLAGS not in text

    def test_on_track(self):
        assert generate_narrative(50, [DRIVER_YELLOW_FLAGS]).startswith("OPTIMAL")
        assert generate_narrative(0, []).startswith("OPTIMAL")

    def test_tiers_follow_custom_thresholds(self):
        assert generate_narrative(60, [DRIVER_YELLOW_FLAGS], medium=40, high=55).startswith(
            "CRITICAL"
        )
        assert generate_narrative(45, [], medium=40, high=55).startswith("WARNING")
        assert generate_narrative(60, [], medium=60, high=90).startswith("OPTIMAL")
