"""Tests for the LLM agent definitions and the agent-facing tool."""

import asyncio
from types import SimpleNamespace

from google.genai import types

from sprint_vix.agents import sprint_risk_agent as agent_module
from sprint_vix.agents.briefing_agent import briefing_agent


class TestSprintRiskAgent:
    def test_tool_registered(self):
        agent = agent_module.sprint_risk_agent
        assert agent.name == "sprint_risk_agent"
        assert agent_module.analyze_sprint_risk in agent.tools

    def test_tool_forwards_project_key(self, monkeypatch):
        events = []

        def fake_handler(event):
            events.append(event)
            return {"success": False, "error": "offline"}

        monkeypatch.setattr(agent_module, "agent_handler", fake_handler)

        assert agent_module.analyze_sprint_risk("PIT") == {"success": False, "error": "offline"}
        assert agent_module.analyze_sprint_risk() == {"success": False, "error": "offline"}
        assert events == [{"project_key": "PIT"}, {}]


class FakeRunner:
    """Runner double that replays canned events instead of calling Gemini."""

    def __init__(self, events):
        self.events = events
        self.calls = []
        self.session_service = self

    async def create_session(self, app_name, user_id):
        return SimpleNamespace(id="session-1", app_name=app_name, user_id=user_id)

    async def run_async(self, user_id, session_id, new_message):
        self.calls.append((user_id, session_id, new_message))
        for event in self.events:
            yield event


def _event(text, final):
    return SimpleNamespace(
        content=types.Content(role="model", parts=[types.Part(text=text)]),
        is_final_response=lambda: final,
    )


class TestAskSprintAgent:
    def test_root_agent_is_the_sprint_risk_agent(self):
        assert agent_module.root_agent is agent_module.sprint_risk_agent

    def test_returns_final_response(self):
        runner = FakeRunner(
            [_event("Checking telemetry...", False), _event("VIX 63, HIGH risk.", True)]
        )

        answer = asyncio.run(agent_module.ask_sprint_agent("Will we make it?", runner=runner))

        assert answer == "VIX 63, HIGH risk."
        user_id, session_id, message = runner.calls[0]
        assert session_id == "session-1"
        assert message.role == "user"
        assert message.parts[0].text == "Will we make it?"

    def test_no_final_response(self):
        runner = FakeRunner([_event("partial", False)])
        assert asyncio.run(agent_module.ask_sprint_agent("Status?", runner=runner)) == ""


class TestBriefingAgent:
    def test_instruction_forbids_new_numbers(self):
        assert briefing_agent.name == "briefing_agent"
        assert "Do NOT recompute" in briefing_agent.instruction
