#!/usr/bin/env python3
"""Load the starter music rows into the local database."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import django
from django.core.management import call_command
from django.core.management.base import CommandError


def main() -> int:
    """Migrate, then load the shelf seed fixture."""
    project_root = Path(__file__).resolve().parents[1]
    fixture_path = project_root / "seeds" / "shelves.json"

    if not fixture_path.exists():
        print(f"Seed fixture not found at {fixture_path}", file=sys.stderr)
        return 1

    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))
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

    try:
        call_command("migrate", interactive=False, verbosity=0)
        call_command("loaddata", fixture_path)
    except CommandError as exc:
        print(f"Failed to seed shelves: {exc}", file=sys.stderr)
        return 1

    print(f"Loaded seed shelves from {fixture_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
