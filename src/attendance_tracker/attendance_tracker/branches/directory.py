from __future__ import annotations

from typing import Optional, Sequence

from .model import Branch

# Append a Branch to add an office; nothing else special-cases branch identity.
BRANCHES: tuple[Branch, ...] = (
    Branch(
        branch_id="alabang",
        name="Alabang",
        address="Madrigal Business Park, Ayala Alabang, Muntinlupa City",
        latitude=14.4516,
        longitude=121.026,
    ),
    Branch(
        branch_id="makati",
        name="Makati",
        address="Ayala Avenue, Makati City",
        latitude=14.5547,
        longitude=121.0244,
    ),
    Branch(
        branch_id="ortigas",
        name="Ortigas",
        address="ADB Avenue, Ortigas Center, Pasig City",
        latitude=14.5869,
        longitude=121.0614,
    ),
    Branch(
        branch_id="cebu",
        name="Cebu IT Park",
        address="Salinas Drive, Lahug, Cebu City",
        latitude=10.3308,
        longitude=123.9062,
    ),
)


def list_branches() -> Sequence[Branch]:
    return BRANCHES


def find_branch(id_or_name: Optional[str], *, branches: Sequence[Branch] = BRANCHES) -> Optional[Branch]:
    """Look a branch up by id (exact) or by name substring, ignoring case."""
    query = (id_or_name or "").strip().lower()
    if not query:
        return None

    for branch in branches:
        if branch.branch_id.lower() == query:
            return branch

    for branch in branches:
        if query in branch.name.lower():
            return branch
    return None
