# sprint_vix/tools/risk_scorer.py

from __future__ import annotations

import math
from typing import List, Sequence


LOW = "LOW"
MEDIUM = "MEDIUM"
HIGH = "HIGH"
CRITICAL = "CRITICAL"

RISK_LEVELS = (LOW, MEDIUM, HIGH, CRITICAL)

DRIVER_EXCESSIVE_CHURN = "Excessive Ticket Churn (Tire Degradation)"
DRIVER_TIGHT_PIT_WINDOW = "Tight Pit Window (Time/Scope Mismatch)"
DRIVER_YELLOW_FLAGS = "Yellow Flags (Blocked Issues)"
DRIVER_ALL_WORK_COMPLETE = "All work complete"

FINISHED_NARRATIVE = "Chequered flag waved. Outstanding lap."


def compute_volatility_index(
    crash_probability: float,
    avg_churn: float,
    churn_weight: float = 5.0,
) -> int:
    """
    Blend crash frequency and average churn into the 0-100 index.

        index = min(100, round(crash_probability * 100 + avg_churn * churn_weight))

    Rounding is half away from zero (so 12.5 -> 13), never banker's
    rounding.
    """
    raw = crash_probability * 100 + avg_churn * churn_weight
    rounded = int(math.floor(raw + 0.5))
    return max(0, min(100, rounded))


def classify_risk_level(
    volatility_index: float,
    low: float = 25,
    medium: float = 50,
    high: float = 75,
) -> str:
    """Map an index to LOW / MEDIUM / HIGH / CRITICAL (each tier is '> threshold')."""
    if volatility_index > high:
        return CRITICAL
    if volatility_index > medium:
        return HIGH
    if volatility_index > low:
        return MEDIUM
    return LOW


def detect_key_drivers(
    avg_churn: float,
    days_remaining: int,
    remaining_points: float,
    total_committed_points: float,
    any_blocked: bool,
) -> List[str]:
    """
    Evaluate the three driver rules in a fixed order.

    Each rule fires on its own; the result keeps evaluation order:
      1. average churn above 2
      2. fewer than 3 days left with more than 30% of scope open
      3. at least one incomplete item blocked
    """
    drivers: List[str] = []

    if avg_churn > 2:
        drivers.append(DRIVER_EXCESSIVE_CHURN)
    if days_remaining < 3 and remaining_points > 0.3 * total_committed_points:
        drivers.append(DRIVER_TIGHT_PIT_WINDOW)
    if any_blocked:
        drivers.append(DRIVER_YELLOW_FLAGS)

    return drivers


def generate_narrative(
    volatility_index: float,
    drivers: Sequence[str],
    medium: float = 50,
    high: float = 75,
) -> str:
    """Strategy call for the pit wall; tiers share the risk-level thresholds."""
    if volatility_index > high:
        lead = drivers[0] if drivers else "High volatility"
        return (
            f"CRITICAL: Telemetry indicates a likely DNF. {lead} is eating up "
            "performance. Box now for a scope reduction strategy."
        )
    if volatility_index > medium:
        return (
            "WARNING: Tire degradation is high. We are losing grip on the sprint "
            "commitment. Recommend reducing pace or clearing blocks immediately."
        )
    return (
        "OPTIMAL: Telemetry is green. Pace is good. Maintain delta management "
        "to the finish line."
    )
