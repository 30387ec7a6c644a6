# sprint_vix/agents/sprint_risk_agent.py

from typing import Any, Dict, Optional

from google.adk.agents import LlmAgent
from google.adk.models.google_llm import Gemini
from google.adk.runners import InMemoryRunner
from google.genai import types

from sprint_vix.main_agent import agent_handler
from sprint_vix.platform.logging import get_logger

logger = get_logger(__name__)

APP_NAME = "sprint_vix"
LOCAL_USER_ID = "local"


def analyze_sprint_risk(project_key: str = "") -> Dict[str, Any]:
    """
    Run the sprint risk simulation for the currently open sprint.

    Args:
        project_key: optional Jira project key (e.g. "PIT") to narrow the
            search. Leave empty to use the first open sprint found.

    Returns:
        The strategy engine response: "success", "telemetry", "analysis"
        and "message" on success, or "success": false with an "error".
    """
    event: Dict[str, Any] = {}
    if project_key:
        event["project_key"] = project_key
    return agent_handler(event)


sprint_risk_agent = LlmAgent(
    name="sprint_risk_agent",
    model=Gemini(model="gemini-2.0-flash"),
    description="Predicts whether the current sprint will miss its commitment.",
    instruction="""
You are the Sprint Strategy Agent, a race engineer for software teams.

When the user asks about sprint risk, delivery confidence, or whether the
team will hit its commitment:
1. Call the `analyze_sprint_risk` tool (pass a project key if the user
   names one).
2. If "success" is false, tell the user the telemetry link is down and
   repeat the "error" text. Do not guess numbers.
3. Otherwise report:
   - the volatility index (0-100) and risk level
   - the probability of failure ("telemetry.probability_of_failure")
   - projected completion ("analysis.projected_completion_fraction",
     shown as a percentage)
   - every key driver, each with one practical mitigation
   - the engine's narrative as the closing recommendation

Rules:
- Numbers come from the tool only. Never recompute them.
- Be concise: one short paragraph plus the driver list.
""",
    tools=[analyze_sprint_risk],
)

# Entry point for ADK tooling that looks up `root_agent`
root_agent = sprint_risk_agent


async def ask_sprint_agent(question: str, runner: Optional[InMemoryRunner] = None) -> str:
    """
    Put one question to the sprint risk agent and return its final answer.

    A fresh in-memory session is opened per question; the agent decides
    whether to call analyze_sprint_risk. Needs GOOGLE_API_KEY for Gemini.
    """
    runner = runner or InMemoryRunner(agent=root_agent, app_name=APP_NAME)
    session = await runner.session_service.create_session(
        app_name=APP_NAME, user_id=LOCAL_USER_ID
    )
    message = types.Content(role="user", parts=[types.Part(text=question)])

    answer = ""
    async for event in runner.run_async(
        user_id=LOCAL_USER_ID, session_id=session.id, new_message=message
    ):
        if event.is_final_response() and event.content and event.content.parts:
            answer = "".join(part.text or "" for part in event.content.parts)

    logger.info("sprint_agent_answered", session_id=session.id, chars=len(answer))
    return answer
