"""Interactive helpers using InquirerPy."""

from __future__ import annotations

import sys
from typing import Dict, List

try:
    from InquirerPy import inquirer
    HAVE_INQUIRER = True
except ImportError:  # pragma: no cover - optional dependency
    HAVE_INQUIRER = False


def _execute(prompt):
    """Execute a prompt and handle ``Ctrl-C`` gracefully."""
    try:
        return prompt.execute()
    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        sys.exit(1)


def section_choices(sections: List[dict], notebooks: Dict[str, dict] | None = None) -> List[dict]:
    """Build prompt choices labelled ``Notebook / Section``."""
    notebooks = notebooks or {}
    choices = []
    for s in sections:
        parent = s.get("parentNotebook") or {}
        nb = notebooks.get(parent.get("id")) or parent
        name = s.get("displayName") or "(untitled)"
        if nb.get("displayName"):
            name = f"{nb['displayName']} / {name}"
        choices.append({"name": name, "value": s.get("id")})
    choices.sort(key=lambda x: x["name"].lower())
    return choices


def interactive_pick_section(sections: List[dict], notebooks: Dict[str, dict] | None = None) -> str | None:
    """Let the user pick one section and return its ID."""

    if not HAVE_INQUIRER:
        print(
            "Interactive mode requires InquirerPy. Install:\n  pip install InquirerPy",
            file=sys.stderr,
        )
        sys.exit(2)
    if not sections:
        return None

    prompt = inquirer.fuzzy(
        message="Select a section:",
        choices=section_choices(sections, notebooks),
        instruction="Type to filter, Enter to confirm",
        height="90%",
    )
    return _execute(prompt)
