"""Tests for the terminal runner."""

import json

import pytest
import structlog

import run_local


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestRunLocal:
    def test_demo_prints_telemetry(self, capsys):
        assert run_local.main(["--demo", "--seed", "7"]) == 0

        out = capsys.readouterr().out
        payload = json.loads(out.split("=== TELEMETRY (JSON) ===", 1)[1])
        assert payload["demo"] is True
        assert payload["success"] is True

    def test_agent_question(self, monkeypatch, capsys):
        questions = []

        async def fake_ask(question):
            questions.append(question)
            return "VIX 63: box for scope reduction."

        monkeypatch.setattr(run_local, "ask_sprint_agent", fake_ask)

        assert run_local.main(["--agent", "Will we hit the commitment?"]) == 0
        assert questions == ["Will we hit the commitment?"]
        assert "VIX 63: box for scope reduction." in capsys.readouterr().out

    def test_agent_without_answer_fails(self, monkeypatch):
        async def fake_ask(question):
            return ""

        monkeypatch.setattr(run_local, "ask_sprint_agent", fake_ask)
        assert run_local.main(["--agent", "Status?"]) == 1
