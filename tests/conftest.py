import random

import pytest

from sprint_vix.platform.config import JiraSettings
from sprint_vix.tools.monte_carlo_simulator import SprintSnapshot, WorkItem


class FixedDraw:
    """Stand-in randomness source that always returns the same draw."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def make_item():
    def _make(
        identifier="PIT-1",
        status="In Progress",
        story_points=5.0,
        churn_count=0,
        is_blocked=False,
        title="Telemetry ticket",
    ):
        return WorkItem(
            identifier=identifier,
            title=title,
            status=status,
            story_points=story_points,
            churn_count=churn_count,
            is_blocked=is_blocked,
        )

    return _make


@pytest.fixture
def make_snapshot():
    def _make(items=(), total=100.0, completed=0.0, days_remaining=5, label="Sprint 42"):
        return SprintSnapshot(
            sprint_label=label,
            days_remaining=days_remaining,
            total_committed_points=total,
            completed_points=completed,
            items=tuple(items),
        )

    return _make


@pytest.fixture
def jira_settings():
    return JiraSettings(
        base_url="https://pitwall.atlassian.net",
        email="strategist@example.com",
        api_token="token-123",
    )


@pytest.fixture
def fixed_draw():
    return FixedDraw
