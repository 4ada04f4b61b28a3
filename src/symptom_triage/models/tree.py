"""Decision tree models: nodes, choices, and the tree container.

A ``TriageTree`` is a flat table of ``TriageNode`` keyed by id.  Traversal is
an id lookup, never an object reference, so the table can be validated for
referential integrity once at load time.

A node with no choices is terminal: reaching it closes the session with the
node's prompt as the closing message.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, model_validator

from symptom_triage.constants import DEFAULT_CLOSE_MESSAGE, DEFAULT_RECOMMEND_MESSAGE

from .action import Action, GotoAction, RecommendAction


class Choice(BaseModel):
    """A selectable option label with the action it triggers."""

    label: str
    action: Action


class TriageNode(BaseModel):
    """One question in the tree."""

    id: str
    prompt: str
    choices: List[Choice] = []

    @model_validator(mode="after")
    def _unique_labels(self):
        labels = self.labels
        if len(labels) != len(set(labels)):
            raise ValueError(f"Duplicate choice labels in node {self.id!r}: {labels}")
        return self

    @property
    def labels(self) -> list[str]:
        """Choice labels in display order."""
        return [c.label for c in self.choices]

    @property
    def is_terminal(self) -> bool:
        return not self.choices

    def transition(self, label: str) -> Action | None:
        """Return the action for *label* (exact, case-sensitive), or None."""
        for choice in self.choices:
            if choice.label == label:
                return choice.action
        return None


class TriageTree(BaseModel):
    """The whole question graph plus its default terminal messages."""

    start: str
    recommend_message: str = DEFAULT_RECOMMEND_MESSAGE
    close_message: str = DEFAULT_CLOSE_MESSAGE
    nodes: dict[str, TriageNode] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _index_nodes(cls, data):
        # YAML lists nodes in order; index them by id here.
        if isinstance(data, dict) and isinstance(data.get("nodes"), list):
            indexed = {}
            for n in data["nodes"]:
                node_id = n.id if isinstance(n, TriageNode) else n["id"]
                if node_id in indexed:
                    raise ValueError(f"Duplicate triage node id: {node_id!r}")
                indexed[node_id] = n
            data = {**data, "nodes": indexed}
        return data

    @model_validator(mode="after")
    def _keys_match_ids(self):
        for key, node in self.nodes.items():
            if node.id != key:
                raise ValueError(f"Node table key {key!r} does not match node id {node.id!r}")
        return self

    def goto_targets(self) -> list[tuple[str, str]]:
        """All ``(source_node_id, target_node_id)`` pairs declared by goto actions."""
        pairs = []
        for node in self.nodes.values():
            for choice in node.choices:
                if isinstance(choice.action, GotoAction):
                    pairs.append((node.id, choice.action.node))
        return pairs

    def recommended_specializations(self) -> set[str]:
        """Every specialization tag a recommend action can emit."""
        return {
            c.action.specialization
            for node in self.nodes.values()
            for c in node.choices
            if isinstance(c.action, RecommendAction)
        }
