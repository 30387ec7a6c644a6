# sprint_vix/tools/telemetry.py

from __future__ import annotations

from typing import Any, Dict

from sprint_vix.tools.monte_carlo_simulator import RiskReport


def format_percentage(fraction: float, digits: int = 1) -> str:
    """0.724 -> '72.4%'."""
    return f"{fraction * 100:.{digits}f}%"


def build_telemetry_response(
    sprint_label: str,
    report: RiskReport,
    message: str = "Strategy engine calculation complete.",
) -> Dict[str, Any]:
    """
    Shape a report the way both invocation paths return it:

    {
      "success": True,
      "telemetry": {"sprint", "vix_index", "probability_of_failure", "status"},
      "analysis": {...RiskReport fields, fractions as plain numbers...},
      "message": str
    }
    """
    return {
        "success": True,
        "telemetry": {
            "sprint": sprint_label,
            "vix_index": report.volatility_index,
            "probability_of_failure": format_percentage(report.crash_probability),
            "status": report.risk_level,
        },
        "analysis": report.to_dict(),
        "message": message,
    }


def build_failure_response(error: str) -> Dict[str, Any]:
    return {"success": False, "error": error}
