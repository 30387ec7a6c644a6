"""
Demo sprint for the dashboard.

Used when the dashboard cannot reach the strategy engine at all, so
there is always something to look at. Everything here is fictional and
every response built from it is flagged with "demo": True.
"""

from __future__ import annotations

import random
from typing import Any, Dict

from sprint_vix.tools.monte_carlo_simulator import SprintSnapshot, WorkItem, compute_risk
from sprint_vix.tools.telemetry import build_telemetry_response

DEMO_SPRINT_LABEL = "MONACO SPRINT (SIMULATION)"

DEMO_SNAPSHOT = SprintSnapshot(
    sprint_label=DEMO_SPRINT_LABEL,
    days_remaining=2,
    total_committed_points=40.0,
    completed_points=13.0,
    items=(
        WorkItem("MON-101", "Pit stop telemetry API", "Done", 5.0, churn_count=2),
        WorkItem("MON-102", "Lap time ingestion job", "Done", 8.0, churn_count=1),
        WorkItem("MON-103", "Tyre wear model", "In Progress", 8.0, churn_count=5),
        WorkItem("MON-104", "Race control webhook", "Blocked", 5.0, churn_count=4, is_blocked=True),
        WorkItem("MON-105", "Strategy board UI", "In Review", 5.0, churn_count=3),
        WorkItem("MON-106", "Fuel load calculator", "To Do", 3.0),
        WorkItem("MON-107", "Driver radio transcripts", "In Progress", 3.0, churn_count=2),
        WorkItem("MON-108", "Weather feed adapter", "Blocked", 3.0, churn_count=1, is_blocked=True),
    ),
)


def demo_response(seed: int = 7) -> Dict[str, Any]:
    """Handler-shaped response for DEMO_SNAPSHOT, reproducible for a given seed."""
    report = compute_risk(DEMO_SNAPSHOT, rng=random.Random(seed))

    response = build_telemetry_response(
        DEMO_SNAPSHOT.sprint_label,
        report,
        message="Simulated telemetry. Live data is unavailable.",
    )
    response["demo"] = True
    return response
