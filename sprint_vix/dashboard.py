# sprint_vix/dashboard.py

from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

from sprint_vix.platform.logging import get_logger
from sprint_vix.tools.demo_data import demo_response
from sprint_vix.tools.risk_scorer import CRITICAL, HIGH, LOW, MEDIUM
from sprint_vix.tools.telemetry import format_percentage

logger = get_logger(__name__)

SOURCE_LIVE = "live"
SOURCE_OFFLINE = "offline"
SOURCE_DEMO = "demo"

RISK_COLORS = {
    LOW: "#22c55e",
    MEDIUM: "#facc15",
    HIGH: "#f97316",
    CRITICAL: "#ef4444",
}

# Gauge bands follow the risk-level thresholds
GAUGE_STEPS = [
    {"range": [0, 25], "color": "#bbf7d0"},
    {"range": [25, 50], "color": "#fef08a"},
    {"range": [50, 75], "color": "#fed7aa"},
    {"range": [75, 100], "color": "#fecaca"},
]


def risk_color(level: str) -> str:
    return RISK_COLORS.get(str(level).upper(), "#6b7280")


def load_dashboard_data(
    invoke: Callable[[], Dict[str, Any]],
    demo: bool = False,
) -> Tuple[Dict[str, Any], str]:
    """
    Call the engine and tell the page which state to render.

    Returns (response, source):
      - "live":    engine answered with success = True
      - "offline": engine answered with a failure result
      - "demo":    demo was requested (invoke is not called), or the call
                   itself blew up; the simulated dataset is returned
    """
    if demo:
        logger.info("demo_mode_requested")
        return demo_response(), SOURCE_DEMO

    try:
        response = invoke()
    except Exception as exc:
        logger.warning("engine_unreachable_using_demo_data", error=str(exc))
        return demo_response(), SOURCE_DEMO

    if not isinstance(response, dict) or not response.get("success"):
        return response if isinstance(response, dict) else {}, SOURCE_OFFLINE

    return response, SOURCE_LIVE


def summary_metrics(response: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a successful response into the numbers the page shows."""
    telemetry = response.get("telemetry") or {}
    analysis = response.get("analysis") or {}

    return {
        "sprint": telemetry.get("sprint", "Unknown sprint"),
        "vix_index": int(analysis.get("volatility_index", 0)),
        "risk_level": analysis.get("risk_level", LOW),
        "crash_probability": format_percentage(float(analysis.get("crash_probability", 0.0))),
        "projected_completion": format_percentage(
            float(analysis.get("projected_completion_fraction", 0.0)), digits=0
        ),
        "key_drivers": list(analysis.get("key_drivers") or []),
        "narrative": analysis.get("narrative", ""),
    }
