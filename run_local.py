# run_local.py

import argparse
import asyncio
import json
import random
import sys
from typing import Any, Dict, List, Optional

from sprint_vix.agents.sprint_risk_agent import ask_sprint_agent
from sprint_vix.main_agent import agent_handler
from sprint_vix.platform.logging import configure_logging
from sprint_vix.tools.demo_data import demo_response


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the sprint risk simulation against the open Jira sprint."
    )
    parser.add_argument("--project", default="", help="Jira project key to narrow the search")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Skip Jira and simulate the bundled demo sprint",
    )
    parser.add_argument(
        "--briefing",
        action="store_true",
        help="Ask the briefing agent for a written summary (needs GOOGLE_API_KEY)",
    )
    parser.add_argument(
        "--agent",
        metavar="QUESTION",
        default=None,
        help="Ask the sprint risk agent a question instead of printing raw telemetry "
        "(needs GOOGLE_API_KEY)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    print("=== Sprint Strategy Deck (Local Run) ===")

    if args.agent:
        answer = asyncio.run(ask_sprint_agent(args.agent))
        print("\n=== STRATEGY AGENT ===")
        print(answer or "(no answer)")
        return 0 if answer else 1

    if args.demo:
        result: Dict[str, Any] = demo_response(seed=args.seed if args.seed is not None else 7)
    else:
        event: Dict[str, Any] = {}
        if args.project:
            event["project_key"] = args.project
        rng = random.Random(args.seed) if args.seed is not None else None
        result = agent_handler(event, rng=rng, include_briefing=args.briefing)

    print("\n=== TELEMETRY (JSON) ===")
    print(json.dumps(result, indent=2))

    return 0 if result.get("success") else 1


if __name__ == "__main__":
    sys.exit(main())
