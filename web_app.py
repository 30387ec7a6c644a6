# web_app.py

import random
from typing import Any, Dict

import streamlit as st
import plotly.graph_objects as go

from sprint_vix.dashboard import (
    GAUGE_STEPS,
    SOURCE_DEMO,
    SOURCE_OFFLINE,
    load_dashboard_data,
    risk_color,
    summary_metrics,
)
from sprint_vix.main_agent import resolve_ui_request
from sprint_vix.platform.logging import configure_logging

configure_logging()


# -------------------------------------------------------------------
# Small helpers
# -------------------------------------------------------------------

def _invoke_engine(project_key: str, seed: int, include_briefing: bool) -> Dict[str, Any]:
    context: Dict[str, Any] = {}
    if project_key.strip():
        context["project_key"] = project_key.strip()

    rng = random.Random(seed) if seed else None
    return resolve_ui_request(
        {"context": context},
        rng=rng,
        include_briefing=include_briefing,
    )


def _gauge(vix_index: int, level: str) -> go.Figure:
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=vix_index,
            title={"text": "Sprint VIX (0-100)"},
            gauge={
                "axis": {"range": [0, 100]},
                "bar": {"color": risk_color(level)},
                "steps": GAUGE_STEPS,
            },
        )
    )
    fig.update_layout(margin=dict(l=20, r=20, t=50, b=10))
    return fig


# -------------------------------------------------------------------
# Streamlit UI
# -------------------------------------------------------------------
st.markdown(
    """
    <style>
    [data-testid="stAppViewContainer"] .block-container {
        max-width: 90% !important;
        padding-top: 1.5rem !important;
    }

    h2, h3 {
        font-weight: 800 !important;
        color: #1f2937;
        border-bottom: 2px solid #e5e7eb;
        padding-bottom: 0.5rem;
    }

    div[data-testid="stMetric"] {
        border-radius: 0.5rem;
        padding: 0.5rem;
        background-color: #f9fafb;
        min-height: 100px;
    }

    div[data-testid="stMetricValue"] {
        font-weight: 900 !important;
        color: #4f46e5 !important;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# Header
st.markdown(
    """
<div style="display:flex; align-items:center; gap:1.25rem; margin-bottom: 1.0rem;">
  <div style="
      width:90px; height:90px; border-radius:22px;
      background:linear-gradient(135deg,#0f172a,#ef4444);
      display:flex; align-items:center; justify-content:center;
      color:white; font-size:2.2rem; font-weight:900;
  ">
    VIX
  </div>
  <div>
    <div style="font-size:1.0rem; text-transform:uppercase; letter-spacing:0.16em; color:#6b7280; font-weight:600;">
      Pit Wall Telemetry
    </div>
    <div style="font-size:2.8rem; font-weight:900; color:#111827;">
      Sprint Strategy Deck
    </div>
  </div>
</div>
""",
    unsafe_allow_html=True,
)

st.caption(
    "Pull the open sprint from Jira, race it 1000 times in a Monte Carlo simulation, "
    "and read the odds of missing the commitment."
)

# Sidebar
with st.sidebar:
    st.header("Race Parameters")
    project_key = st.text_input("Jira project key (optional)", value="")
    seed = st.number_input(
        "Random seed (0 = fresh draw each run)", min_value=0, max_value=10_000_000, value=0, step=1
    )
    include_briefing = st.checkbox("Ask the strategist for a written briefing", value=False)
    demo_mode = st.checkbox(
        "Demo mode (simulated data)",
        value=False,
        help="Skip Jira and race the bundled demo sprint.",
    )

run_clicked = st.button("Run Telemetry Analysis", type="primary")

result: Dict[str, Any] = st.session_state.get("telemetry_result") or {}
source: str = st.session_state.get("telemetry_source") or ""

if run_clicked:
    with st.spinner("Initializing Strategy Engine... connecting to Pit Wall Telemetry"):
        result, source = load_dashboard_data(
            lambda: _invoke_engine(project_key, int(seed), include_briefing),
            demo=demo_mode,
        )
        st.session_state["telemetry_result"] = result
        st.session_state["telemetry_source"] = source

if not result and not source:
    st.info("Press **Run Telemetry Analysis** to start.")

elif source == SOURCE_OFFLINE:
    st.markdown("### Telemetry offline")
    st.error(result.get("error") or "No sprint data available.")
    st.caption("Check the Jira settings in your environment and that a sprint is open.")

else:
    if source == SOURCE_DEMO:
        st.warning(
            "SIMULATION MODE: a demo sprint is shown (demo mode is on, or the "
            "strategy engine could not be reached). These numbers are not your team's."
        )

    metrics = summary_metrics(result)
    level = metrics["risk_level"]

    st.markdown(f"### {metrics['sprint']}")

    c_gauge, c_metrics = st.columns((1.2, 1.0))

    with c_gauge:
        st.plotly_chart(_gauge(metrics["vix_index"], level), use_container_width=True)

    with c_metrics:
        st.markdown(
            f"<div style='font-size:1.6rem;font-weight:900;color:{risk_color(level)};'>"
            f"Risk level: {level}</div>",
            unsafe_allow_html=True,
        )
        m1, m2 = st.columns(2)
        m1.metric("Probability of failure", metrics["crash_probability"])
        m2.metric("Projected completion", metrics["projected_completion"])

    st.markdown("---")

    st.markdown("#### Key Drivers")
    if metrics["key_drivers"]:
        for driver in metrics["key_drivers"]:
            st.markdown(f"- {driver}")
    else:
        st.caption("No risk drivers detected.")

    st.markdown("#### Strategy Call")
    st.info(metrics["narrative"])

    briefing = result.get("briefing")
    if briefing:
        st.markdown("#### Strategist Briefing")
        st.write(briefing)

    with st.expander("Raw response (JSON)"):
        st.json(result)
