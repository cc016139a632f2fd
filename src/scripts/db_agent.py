#!/usr/bin/env python3
"""Ask the database agent to change the music tables.

Usage::

    python src/scripts/db_agent.py query "add a weekly_mix_playlists table with three rows"
    python src/scripts/db_agent.py query "..." --apply --migrate
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import django

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="db-agent",
        description="AI-powered database agent for the musicshelf app",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    query = subcommands.add_parser("query", help="Process a database-related request")
    query.add_argument("request", help="The request to process, in plain language")
    query.add_argument("--apply", action="store_true", help="Execute the proposed SQL")
    query.add_argument("--migrate", action="store_true", help="Run Django migrations first")
    query.add_argument(
        "--allow-destructive",
        action="store_true",
        help="Permit DROP/TRUNCATE/unfiltered DELETE statements",
    )

    subcommands.add_parser("schema", help="Print the tables the agent can see")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns a process exit code."""
    args = build_parser().parse_args(argv)

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "musicshelf.settings")
    try:
        django.setup()
    except ModuleNotFoundError as exc:
        missing = exc.name or "unknown dependency"
        print(
            "Django could not start because a dependency is missing. "
            f"Install the project (pip install -e .). Missing module: {missing}",
            file=sys.stderr,
        )
        return 1

    # Imported late: these modules need configured settings.
    from agent.services.sql_agent import AgentError, describe_schema, process_query

    logging.getLogger("agent").setLevel(logging.INFO)

    if args.command == "schema":
        for entry in describe_schema():
            columns = ", ".join(f"{col['name']} {col['type']}" for col in entry["columns"])
            print(f"{entry['table']}: {columns}")
        return 0

    print("Database Agent: processing your request...")
    print(f"Request: {args.request}")
    try:
        plan = process_query(
            args.request,
            apply=args.apply,
            migrate=args.migrate,
            allow_destructive=args.allow_destructive,
        )
    except AgentError as exc:
        print(f"Error processing request: {exc}", file=sys.stderr)
        return 1

    if plan.explanation:
        print(plan.explanation)
    if plan.usage.get("total_tokens"):
        print(
            "Tokens used: {prompt_tokens} prompt, {completion_tokens} completion, "
            "{total_tokens} total".format(**plan.usage)
        )
    if plan.is_empty:
        print("No SQL proposed.")
        return 0

    for statement in plan.statements:
        print(f"  {statement};")
    if args.apply:
        print(f"Applied {len(plan.statements)} statement(s).")
    else:
        print("Dry run; pass --apply to execute.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
