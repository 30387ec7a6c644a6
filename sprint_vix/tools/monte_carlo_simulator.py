# sprint_vix/tools/monte_carlo_simulator.py

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sprint_vix.errors import ConfigurationError, SimulationTooLargeError
from sprint_vix.platform.config import env_float, env_int
from sprint_vix.platform.logging import get_logger
from sprint_vix.tools.risk_scorer import (
    DRIVER_ALL_WORK_COMPLETE,
    FINISHED_NARRATIVE,
    LOW,
    classify_risk_level,
    compute_volatility_index,
    detect_key_drivers,
    generate_narrative,
)

logger = get_logger(__name__)


DEFAULT_TERMINAL_STATUSES = ("done", "closed")


@dataclass(frozen=True)
class WorkItem:
    """A single sprint ticket, already normalized by the data provider."""
    identifier: str
    title: str
    status: str
    story_points: float
    churn_count: int = 0
    is_blocked: bool = False


@dataclass(frozen=True)
class SprintSnapshot:
    """
    Everything the engine needs to know about the running sprint.

    total_committed_points and completed_points are trusted as supplied;
    the engine only looks at item statuses to decide what is still open.
    """
    sprint_label: str
    days_remaining: int
    total_committed_points: float
    completed_points: float
    items: Tuple[WorkItem, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def remaining_points(self) -> float:
        return self.total_committed_points - self.completed_points

    def incomplete_items(
        self,
        terminal_statuses: Sequence[str] = DEFAULT_TERMINAL_STATUSES,
    ) -> List[WorkItem]:
        return [
            item for item in self.items
            if not is_terminal_status(item.status, terminal_statuses)
        ]

    def consistency_warnings(
        self,
        terminal_statuses: Sequence[str] = DEFAULT_TERMINAL_STATUSES,
    ) -> List[str]:
        """
        Human-readable notes about figures that do not add up.

        Nothing here stops a run: the engine produces a defined (if
        degenerate) report for inconsistent snapshots.
        """
        warnings: List[str] = []
        if self.completed_points > self.total_committed_points:
            warnings.append(
                f"Completed points ({self.completed_points}) exceed committed "
                f"points ({self.total_committed_points})."
            )
        if self.remaining_points > 0 and not self.incomplete_items(terminal_statuses):
            warnings.append(
                f"{self.remaining_points} points remain but every item is in a "
                "terminal status."
            )
        return warnings


@dataclass(frozen=True)
class RiskReport:
    volatility_index: int
    crash_probability: float
    risk_level: str
    projected_completion_fraction: float
    key_drivers: Tuple[str, ...]
    narrative: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "volatility_index": self.volatility_index,
            "crash_probability": self.crash_probability,
            "risk_level": self.risk_level,
            "projected_completion_fraction": self.projected_completion_fraction,
            "key_drivers": list(self.key_drivers),
            "narrative": self.narrative,
        }


@dataclass(frozen=True)
class SimulationConfig:
    """Tunable constants of the sprint simulation."""
    trial_count: int = 1000
    base_probability: float = 0.85
    high_churn_threshold: int = 3
    high_churn_penalty: float = 0.25
    moderate_churn_threshold: int = 1
    moderate_churn_penalty: float = 0.10
    blocker_impact: float = 0.20
    crash_threshold_fraction: float = 0.9
    churn_weight: float = 5.0
    risk_low: float = 25
    risk_medium: float = 50
    risk_high: float = 75
    max_item_evaluations: int = 5_000_000
    terminal_statuses: Tuple[str, ...] = field(default=DEFAULT_TERMINAL_STATUSES)

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        """
        Defaults, overridden by:

          SPRINT_VIX_SIMULATION_RUNS        -> trial_count
          SPRINT_VIX_CHURN_THRESHOLD_HIGH   -> high_churn_threshold
          SPRINT_VIX_BLOCKER_IMPACT         -> blocker_impact
          SPRINT_VIX_MAX_ITEM_EVALUATIONS   -> max_item_evaluations
        """
        defaults = cls()
        trial_count = env_int("SPRINT_VIX_SIMULATION_RUNS", defaults.trial_count)
        if trial_count <= 0:
            raise ConfigurationError("SPRINT_VIX_SIMULATION_RUNS must be positive")

        return cls(
            trial_count=trial_count,
            high_churn_threshold=env_int(
                "SPRINT_VIX_CHURN_THRESHOLD_HIGH", defaults.high_churn_threshold
            ),
            blocker_impact=env_float("SPRINT_VIX_BLOCKER_IMPACT", defaults.blocker_impact),
            max_item_evaluations=env_int(
                "SPRINT_VIX_MAX_ITEM_EVALUATIONS", defaults.max_item_evaluations
            ),
        )


def is_terminal_status(
    status: str,
    terminal_statuses: Sequence[str] = DEFAULT_TERMINAL_STATUSES,
) -> bool:
    return status.strip().lower() in {s.lower() for s in terminal_statuses}


def item_completion_probability(item: WorkItem, config: SimulationConfig) -> float:
    """
    Per-trial chance that an open item gets delivered:

        base rate - churn penalty - blocker penalty, clamped to [0, 1]

    Churn tiers are exclusive; the high tier wins.
    """
    prob = config.base_probability

    if item.churn_count > config.high_churn_threshold:
        prob -= config.high_churn_penalty
    elif item.churn_count > config.moderate_churn_threshold:
        prob -= config.moderate_churn_penalty

    if item.is_blocked:
        prob -= config.blocker_impact

    return min(1.0, max(0.0, prob))


def _complete_report() -> RiskReport:
    return RiskReport(
        volatility_index=0,
        crash_probability=0.0,
        risk_level=LOW,
        projected_completion_fraction=1.0,
        key_drivers=(DRIVER_ALL_WORK_COMPLETE,),
        narrative=FINISHED_NARRATIVE,
    )


def compute_risk(
    snapshot: SprintSnapshot,
    rng: Optional[random.Random] = None,
    config: Optional[SimulationConfig] = None,
) -> RiskReport:
    """
    Run the Monte Carlo sprint simulation and derive the risk report.

    Args:
        snapshot: normalized sprint data.
        rng: source of uniform draws. Pass a seeded random.Random for
            reproducible results; a fresh unseeded generator is used
            otherwise (never the module-level one).
        config: simulation constants, SimulationConfig() by default.

    Each trial flips one weighted coin per open item (in item order) and
    adds the delivered points to the already completed ones. A trial
    "crashes" when that total lands below crash_threshold_fraction of
    the commitment.

    Raises:
        SimulationTooLargeError: trial_count * open items exceeds
            config.max_item_evaluations.
    """
    config = config or SimulationConfig()
    rng = rng if rng is not None else random.Random()

    remaining_points = snapshot.remaining_points
    if remaining_points <= 0:
        logger.debug("sprint_already_complete", sprint=snapshot.sprint_label)
        return _complete_report()

    incomplete = snapshot.incomplete_items(config.terminal_statuses)

    evaluations = config.trial_count * len(incomplete)
    if evaluations > config.max_item_evaluations:
        raise SimulationTooLargeError(evaluations, config.max_item_evaluations)

    probabilities = [item_completion_probability(item, config) for item in incomplete]
    crash_line = snapshot.total_committed_points * config.crash_threshold_fraction

    crashes = 0
    delivered_sum = 0.0

    for _ in range(config.trial_count):
        simulated_points = 0.0
        for item, prob in zip(incomplete, probabilities):
            if rng.random() < prob:
                simulated_points += item.story_points

        trial_total = snapshot.completed_points + simulated_points
        delivered_sum += trial_total
        if trial_total < crash_line:
            crashes += 1

    crash_probability = crashes / config.trial_count
    projected_completion = (delivered_sum / config.trial_count) / snapshot.total_committed_points

    avg_churn = sum(item.churn_count for item in incomplete) / max(1, len(incomplete))
    volatility_index = compute_volatility_index(
        crash_probability, avg_churn, churn_weight=config.churn_weight
    )

    drivers = detect_key_drivers(
        avg_churn=avg_churn,
        days_remaining=snapshot.days_remaining,
        remaining_points=remaining_points,
        total_committed_points=snapshot.total_committed_points,
        any_blocked=any(item.is_blocked for item in incomplete),
    )

    risk_level = classify_risk_level(
        volatility_index,
        low=config.risk_low,
        medium=config.risk_medium,
        high=config.risk_high,
    )

    logger.debug(
        "sprint_simulation_finished",
        sprint=snapshot.sprint_label,
        trials=config.trial_count,
        incomplete_items=len(incomplete),
        crashes=crashes,
    )

    return RiskReport(
        volatility_index=volatility_index,
        crash_probability=crash_probability,
        risk_level=risk_level,
        projected_completion_fraction=projected_completion,
        key_drivers=tuple(drivers),
        narrative=generate_narrative(
            volatility_index,
            drivers,
            medium=config.risk_medium,
            high=config.risk_high,
        ),
    )
