"""Turn natural-language requests into SQL against the music tables.

The agent describes the current schema to the model, asks for a JSON plan
(``{"explanation": ..., "sql": [...]}``), screens the statements and, when
asked to, runs them in a single transaction.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from django.core.management import call_command
from django.db import DatabaseError, connection as default_connection, transaction

from library.services.backend import DatabaseTableBackend

from .llm_handler import (
    get_llm_usage_snapshot,
    parse_json_response,
    query_openai,
    reset_llm_usage_tracker,
)

logger = logging.getLogger(__name__)

AGENT_INSTRUCTIONS = (
    "You are a database agent for a Spotify-style music browsing app. "
    "The home page fills three shelves (Recently Played, Made For You, Popular Albums) "
    "from whatever tables exist, classifying them by table name. "
    "You understand relational schemas and write portable SQL."
)

_DESTRUCTIVE_RE = re.compile(r"^\s*(drop|truncate)\b|\balter\s+table\b.*\bdrop\b", re.IGNORECASE | re.DOTALL)
_DELETE_RE = re.compile(r"^\s*delete\b", re.IGNORECASE)
_WHERE_RE = re.compile(r"\bwhere\b", re.IGNORECASE)


class AgentError(Exception):
    """Raised when a plan cannot be screened or applied."""


@dataclass
class AgentPlan:
    """What the model proposed for one request."""

    request: str
    explanation: str = ""
    statements: List[str] = field(default_factory=list)
    raw_response: str = ""
    usage: Dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.statements


def describe_schema(backend: Optional[DatabaseTableBackend] = None) -> List[Dict[str, object]]:
    """Return ``[{table, columns}]`` for every browsable table."""
    backend = backend or DatabaseTableBackend()
    return [
        {"table": table, "columns": backend.describe_table(table)}
        for table in backend.list_tables()
    ]


def split_statements(sql: str) -> List[str]:
    """Split a SQL blob on semicolons, ignoring blanks and ``--`` comment lines."""
    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    return [part.strip() for part in "\n".join(lines).split(";") if part.strip()]


def is_destructive(statement: str) -> bool:
    """DROP, TRUNCATE, ALTER ... DROP, or DELETE without a WHERE clause."""
    if _DESTRUCTIVE_RE.search(statement):
        return True
    return bool(_DELETE_RE.match(statement)) and not _WHERE_RE.search(statement)


def build_prompt(request: str, schema: List[Dict[str, object]]) -> str:
    schema_label = json.dumps(schema, ensure_ascii=False, indent=2) if schema else "(no tables yet)"
    return (
        f"Current schema:\n{schema_label}\n\n"
        f"User request: \"{request}\"\n\n"
        "Respond with a JSON object containing the keys \"explanation\" (a short "
        "sentence describing the change) and \"sql\" (an array of SQL statements, "
        "one statement per entry, no trailing semicolons). Name new tables so the "
        "shelf they belong to is obvious (for example recently_played_songs, "
        "weekly_mix_playlists, top_albums). Return an empty array if no SQL is needed."
    )


def _coerce_statements(value) -> List[str]:
    if isinstance(value, str):
        return split_statements(value)
    statements: List[str] = []
    if isinstance(value, list):
        for item in value:
            if isinstance(item, str):
                statements.extend(split_statements(item))
    return statements


def plan_query(
    request: str,
    *,
    schema: Optional[List[Dict[str, object]]] = None,
    query_fn: Optional[Callable[[str], str]] = None,
) -> AgentPlan:
    """Ask the model for SQL that fulfils ``request``.

    Never raises: a missing client or unreadable answer gives an empty plan
    whose explanation says what happened.
    """
    request = (request or "").strip()
    plan = AgentPlan(request=request)
    if not request:
        plan.explanation = "Empty request; nothing to do."
        return plan

    if schema is None:
        schema = describe_schema()
    prompt = build_prompt(request, schema)
    llm_query_fn = query_fn or (lambda text: query_openai(text, instructions=AGENT_INSTRUCTIONS))
    reset_llm_usage_tracker()
    response = llm_query_fn(prompt)
    plan.usage = get_llm_usage_snapshot()
    plan.raw_response = response or ""
    if not response:
        plan.explanation = "The language model returned no response."
        return plan

    parsed = parse_json_response(response)
    if isinstance(parsed, dict):
        plan.explanation = str(parsed.get("explanation") or "").strip()
        plan.statements = _coerce_statements(
            parsed.get("sql") or parsed.get("statements") or parsed.get("queries")
        )
    elif isinstance(parsed, list):
        plan.statements = _coerce_statements(parsed)
    else:
        snippet = response if len(response) <= 200 else response[:197] + "..."
        logger.warning("Could not parse agent response: %s", snippet)
        plan.explanation = "Could not parse the language model response."

    return plan


def screen_plan(plan: AgentPlan, *, allow_destructive: bool = False) -> None:
    """Raise ``AgentError`` if the plan contains statements we will not run."""
    if allow_destructive:
        return
    blocked = [statement for statement in plan.statements if is_destructive(statement)]
    if blocked:
        raise AgentError(
            "Refusing destructive statements (use --allow-destructive): " + "; ".join(blocked)
        )


def apply_plan(plan: AgentPlan, *, connection=None, allow_destructive: bool = False) -> int:
    """Run every statement atomically; return how many were executed."""
    screen_plan(plan, allow_destructive=allow_destructive)
    connection = connection if connection is not None else default_connection
    try:
        with transaction.atomic(using=connection.alias):
            with connection.cursor() as cursor:
                for statement in plan.statements:
                    logger.info("Executing: %s", statement)
                    cursor.execute(statement)
    except DatabaseError as exc:
        raise AgentError(f"SQL failed and was rolled back: {exc}") from exc
    return len(plan.statements)


def run_migrations() -> None:
    """Bring Django's own tables up to date."""
    logger.info("Running database migrations...")
    call_command("migrate", interactive=False, verbosity=0)


def process_query(
    request: str,
    *,
    apply: bool = False,
    migrate: bool = False,
    allow_destructive: bool = False,
    query_fn: Optional[Callable[[str], str]] = None,
) -> AgentPlan:
    """Plan, then optionally apply and migrate. Raises ``AgentError`` on refusal or SQL failure."""
    if migrate:
        run_migrations()

    plan = plan_query(request, query_fn=query_fn)
    screen_plan(plan, allow_destructive=allow_destructive)
    if apply and not plan.is_empty:
        executed = apply_plan(plan, allow_destructive=allow_destructive)
        logger.info("Applied %d statement(s)", executed)
    return plan
