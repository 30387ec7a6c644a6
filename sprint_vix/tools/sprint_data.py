# sprint_vix/tools/sprint_data.py

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import requests

from sprint_vix.errors import (
    InvalidProjectKeyError,
    NoActiveSprintError,
    TrackerRequestError,
)
from sprint_vix.platform.config import JiraSettings, load_jira_settings
from sprint_vix.platform.logging import get_logger
from sprint_vix.tools.monte_carlo_simulator import SprintSnapshot, WorkItem

logger = get_logger(__name__)


FALLBACK_SPRINT_LABEL = "Active Sprint (Detected)"
DONE_CATEGORY = "done"

PROJECT_KEY_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]+$")


# --------------------------------------------------------------------
# Field extraction
# --------------------------------------------------------------------


def count_status_transitions(issue: Dict[str, Any]) -> int:
    """Count changelog entries that moved the issue between statuses."""
    histories = (issue.get("changelog") or {}).get("histories") or []
    return sum(
        1
        for history in histories
        for change in history.get("items") or []
        if change.get("field") == "status"
    )


def _story_points(fields: Dict[str, Any], settings: JiraSettings) -> float:
    raw = fields.get(settings.story_points_field)
    if raw is None:
        return settings.default_story_points
    try:
        return float(raw)
    except (TypeError, ValueError):
        return settings.default_story_points


def _status_parts(fields: Dict[str, Any]) -> Tuple[str, str]:
    status = fields.get("status") or {}
    name = str(status.get("name") or "")
    category = str((status.get("statusCategory") or {}).get("key") or "")
    return name, category


def normalize_issue(issue: Dict[str, Any], settings: JiraSettings) -> WorkItem:
    fields = issue.get("fields") or {}
    status_name, _ = _status_parts(fields)

    return WorkItem(
        identifier=str(issue.get("key") or issue.get("id") or ""),
        title=str(fields.get("summary") or ""),
        status=status_name,
        story_points=_story_points(fields, settings),
        churn_count=count_status_transitions(issue),
        is_blocked="block" in status_name.lower(),
    )


def _parse_tracker_date(value: str) -> Optional[date]:
    # Jira sends e.g. "2024-05-17T09:00:00.000Z"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _find_active_sprint(
    issues: List[Dict[str, Any]],
    settings: JiraSettings,
) -> Optional[Dict[str, Any]]:
    for issue in issues:
        sprints = (issue.get("fields") or {}).get(settings.sprint_field) or []
        if isinstance(sprints, dict):
            sprints = [sprints]
        if not isinstance(sprints, list):
            continue
        for sprint in sprints:
            if isinstance(sprint, dict) and str(sprint.get("state", "")).lower() == "active":
                return sprint
    return None


def _sprint_meta(
    issues: List[Dict[str, Any]],
    settings: JiraSettings,
    today: date,
) -> Tuple[str, int]:
    """Sprint label and whole days left, with fallbacks when the tracker is silent."""
    sprint = _find_active_sprint(issues, settings)
    if not sprint:
        return FALLBACK_SPRINT_LABEL, settings.default_days_remaining

    label = str(sprint.get("name") or FALLBACK_SPRINT_LABEL)
    end = _parse_tracker_date(str(sprint.get("endDate") or ""))
    if end is None:
        return label, settings.default_days_remaining

    return label, max(0, (end - today).days)


# --------------------------------------------------------------------
# Normalization
# --------------------------------------------------------------------


def normalize_sprint_payload(
    payload: Dict[str, Any],
    settings: JiraSettings,
    today: Optional[date] = None,
) -> SprintSnapshot:
    """
    Turn a Jira search response (with expanded changelog) into a
    SprintSnapshot.

    Raises:
        NoActiveSprintError: the response holds no issues.
    """
    issues_raw = payload.get("issues") or []
    if not issues_raw:
        raise NoActiveSprintError(
            "No active sprint data found. Are there issues assigned to an open sprint?"
        )

    items: List[WorkItem] = []
    total_points = 0.0
    completed_points = 0.0

    for issue in issues_raw:
        item = normalize_issue(issue, settings)
        _, category = _status_parts(issue.get("fields") or {})

        total_points += item.story_points
        if category == DONE_CATEGORY:
            completed_points += item.story_points
        items.append(item)

    label, days_remaining = _sprint_meta(issues_raw, settings, today or date.today())

    return SprintSnapshot(
        sprint_label=label,
        days_remaining=days_remaining,
        total_committed_points=total_points,
        completed_points=completed_points,
        items=tuple(items),
    )


# --------------------------------------------------------------------
# Fetching
# --------------------------------------------------------------------


def build_jql(project_key: Optional[str] = None) -> str:
    """
    JQL for the open sprint, optionally narrowed to one project.

    The key is trimmed and upper-cased, then must look like a Jira key
    (PIT, OPS_2) before it goes into the query.
    """
    jql = "sprint in openSprints() ORDER BY rank ASC"
    if project_key:
        key = project_key.strip().upper()
        if not PROJECT_KEY_PATTERN.match(key):
            raise InvalidProjectKeyError(project_key)
        return f'project = "{key}" AND {jql}'
    return jql


def _project_key_from_context(context: Optional[Dict[str, Any]]) -> Optional[str]:
    if not context:
        return None
    key = context.get("project_key")
    if not key:
        # UI contexts nest the project under extension.project.key
        project = (context.get("extension") or {}).get("project") or {}
        key = project.get("key")
    return str(key) if key else None


def fetch_active_sprint_data(
    context: Optional[Dict[str, Any]] = None,
    settings: Optional[JiraSettings] = None,
    session: Optional[requests.Session] = None,
) -> SprintSnapshot:
    """
    Query Jira for every issue in an open sprint and normalize it.

    Raises:
        ConfigurationError: Jira settings are missing.
        TrackerRequestError: Jira is unreachable or returned an error.
        NoActiveSprintError: no issue is assigned to an open sprint.
    """
    settings = settings or load_jira_settings()
    http = session or requests.Session()

    jql = build_jql(_project_key_from_context(context))
    params = {
        "jql": jql,
        "expand": "changelog",
        "maxResults": settings.max_results,
    }
    logger.info("jira_search_started", jql=jql)

    try:
        response = http.get(
            f"{settings.base_url}/rest/api/3/search",
            params=params,
            auth=(settings.email, settings.api_token),
            headers={"Accept": "application/json"},
            timeout=settings.timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        raise TrackerRequestError(f"Jira search failed: {exc}") from exc
    except ValueError as exc:
        raise TrackerRequestError("Jira returned a response that is not JSON") from exc

    snapshot = normalize_sprint_payload(payload, settings)
    logger.info(
        "jira_search_finished",
        sprint=snapshot.sprint_label,
        items=len(snapshot.items),
    )
    return snapshot
