# sprint_vix/errors.py

from __future__ import annotations


class SprintVixError(Exception):
    """Base class for every failure the strategy engine reports upward."""


class ConfigurationError(SprintVixError):
    """A required setting is missing or cannot be parsed."""


class NoActiveSprintError(SprintVixError):
    """The tracker returned no work items for any open sprint."""


class TrackerRequestError(SprintVixError):
    """The tracker could not be reached or answered with an error status."""


class SimulationTooLargeError(SprintVixError):
    """The requested trial count would evaluate too many work items."""

    def __init__(self, evaluations: int, limit: int) -> None:
        super().__init__(
            f"Simulation would evaluate {evaluations} work items "
            f"(limit is {limit}). Reduce the trial count or the sprint size."
        )
        self.evaluations = evaluations
        self.limit = limit


class InvalidProjectKeyError(SprintVixError):
    """A project key that is not a plain tracker key (letters, digits, underscores)."""

    def __init__(self, project_key: str) -> None:
        super().__init__(f"Invalid project key {project_key!r}.")
        self.project_key = project_key
