"""Exceptions raised by the triage SDK.

All of them subclass ``ValueError`` through :class:`TriageError`, so callers
that only care about "bad input" can keep catching ``ValueError``.
"""

from __future__ import annotations


class TriageError(ValueError):
    """Base class for triage SDK errors."""


class InvalidChoice(TriageError):
    """``answer()`` got a label the current node does not offer, or no session is active."""

    def __init__(self, choice: str, node_id: str | None, allowed: list[str] | None = None) -> None:
        self.choice = choice
        self.node_id = node_id
        self.allowed = list(allowed or [])
        if node_id is None:
            msg = f"Invalid choice {choice!r}: no active triage session"
        else:
            msg = f"Invalid choice {choice!r} for node {node_id!r}; expected one of {self.allowed}"
        super().__init__(msg)


class UnknownTransitionTarget(TriageError):
    """A goto action (or the tree's start) references a node id missing from the table."""

    def __init__(self, target: str, source: str | None = None) -> None:
        self.target = target
        self.source = source
        where = f" (referenced from {source!r})" if source else ""
        super().__init__(f"Unknown triage node {target!r}{where}")


class UnknownSpecialization(TriageError):
    """A tree action or classifier rule references a tag outside the shared enumeration."""

    def __init__(self, tag: str, where: str) -> None:
        self.tag = tag
        self.where = where
        super().__init__(f"Unknown specialization {tag!r} in {where}")
