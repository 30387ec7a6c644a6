from __future__ import annotations

import json
import random
from typing import Any, Callable, Dict, Optional

from google import genai

from sprint_vix.agents.briefing_agent import briefing_agent
from sprint_vix.errors import SprintVixError
from sprint_vix.platform.config import get_genai_api_key
from sprint_vix.platform.logging import get_logger
from sprint_vix.tools.monte_carlo_simulator import (
    SimulationConfig,
    SprintSnapshot,
    compute_risk,
)
from sprint_vix.tools.sprint_data import fetch_active_sprint_data
from sprint_vix.tools.telemetry import build_failure_response, build_telemetry_response

logger = get_logger(__name__)

SprintFetcher = Callable[[Optional[Dict[str, Any]]], SprintSnapshot]

TELEMETRY_FAILURE_MESSAGE = "Telemetry connection failed. Could not retrieve sprint data."


# -------------------------------------------------------------------
# Low-level helpers
# -------------------------------------------------------------------

def _get_genai_client() -> genai.Client:
    api_key = get_genai_api_key()
    if not api_key:
        raise RuntimeError(
            "Missing GOOGLE_API_KEY (or GENAI_API_KEY) in environment. "
            "Set it before requesting a strategy briefing."
        )
    return genai.Client(api_key=api_key)


def _call_llm_with_instruction(
    instruction: str,
    user_payload: Dict[str, Any],
) -> str:
    """
    Call gemini-2.0-flash with a plain text prompt (no system role) and
    return the raw text answer.
    """
    client = _get_genai_client()

    prompt = (
        instruction.strip()
        + "\n\nHere is the input JSON you must process:\n```json\n"
        + json.dumps(user_payload, indent=2)
        + "\n```"
    )

    response = client.models.generate_content(
        model="gemini-2.0-flash",
        contents=[prompt],
        config={"temperature": 0.0},
    )
    return response.text or ""


def generate_strategy_briefing(response: Dict[str, Any]) -> Optional[str]:
    """
    Turn a successful engine response into a short conversational briefing.
    Soft-fails to None on any LLM error.
    """
    payload = {
        "telemetry": response.get("telemetry") or {},
        "analysis": response.get("analysis") or {},
    }

    try:
        text = _call_llm_with_instruction(briefing_agent.instruction, payload)
    except Exception as exc:
        logger.warning("strategy_briefing_failed", error=str(exc))
        return None

    return text.strip() or None


# -------------------------------------------------------------------
# Public handler
# -------------------------------------------------------------------

def sprint_risk_agent_handler(
    context: Optional[Dict[str, Any]] = None,
    *,
    fetch: Optional[SprintFetcher] = None,
    rng: Optional[random.Random] = None,
    config: Optional[SimulationConfig] = None,
    include_briefing: bool = False,
) -> Dict[str, Any]:
    """
    Fetch the open sprint, run the strategy engine and package the result.

    Never raises: every failure comes back as
    {"success": False, "error": "<human-readable message>"}.

    Args:
        context: invocation context (may carry "project_key").
        fetch: sprint data provider, fetch_active_sprint_data by default.
        rng: randomness source handed to the engine (seed it in tests).
        config: engine constants, SimulationConfig.from_env() by default.
        include_briefing: also ask the briefing agent for a text summary.
    """
    fetch = fetch or fetch_active_sprint_data
    logger.info("strategy_engine_started")

    try:
        config = config or SimulationConfig.from_env()
        snapshot = fetch(context)

        for warning in snapshot.consistency_warnings(config.terminal_statuses):
            logger.warning("sprint_snapshot_inconsistent", detail=warning)

        report = compute_risk(snapshot, rng=rng, config=config)
    except SprintVixError as exc:
        logger.error("strategy_engine_failed", error=str(exc), error_type=type(exc).__name__)
        return build_failure_response(f"{TELEMETRY_FAILURE_MESSAGE} {exc}")
    except Exception:
        logger.exception("strategy_engine_crashed")
        return build_failure_response(TELEMETRY_FAILURE_MESSAGE)

    logger.info(
        "strategy_engine_finished",
        sprint=snapshot.sprint_label,
        vix_index=report.volatility_index,
        risk_level=report.risk_level,
    )

    response = build_telemetry_response(snapshot.sprint_label, report)

    if include_briefing:
        briefing = generate_strategy_briefing(response)
        if briefing:
            response["briefing"] = briefing

    return response


def resolve_ui_request(request: Dict[str, Any], **kwargs: Any) -> Dict[str, Any]:
    """Dashboard path: the request carries the caller's context under "context"."""
    return sprint_risk_agent_handler((request or {}).get("context"), **kwargs)


def agent_handler(event: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    """Agent path: the event itself is the context."""
    return sprint_risk_agent_handler(event, **kwargs)
