"""Export the triage tree as a node/edge graph for inspection tools.

The output uses the cytoscape element format: ``{"data": {...}}`` dicts with
``id``/``label`` for nodes and ``source``/``target``/``label`` for edges.
Recommend and close actions point at virtual terminal nodes so every choice
has an edge.
"""

from __future__ import annotations

from typing import Any, Dict

from symptom_triage.models.action import CloseAction, GotoAction, RecommendAction
from symptom_triage.models.tree import TriageTree

CLOSE_NODE_ID = "__close"


def _spec_node_id(tag: str) -> str:
    return f"__recommend_{tag}"


def build_tree_graph(tree: TriageTree) -> Dict[str, Any]:
    nodes = []
    edges = []
    terminals: dict[str, dict] = {}

    for node in tree.nodes.values():
        data = {
            "id": node.id,
            "label": node.prompt,
            "type": "terminal" if node.is_terminal else "question",
            "options": node.labels,
        }
        if node.id == tree.start:
            data["start"] = True
        nodes.append({"data": data})

    for node in tree.nodes.values():
        for choice in node.choices:
            act = choice.action
            if isinstance(act, GotoAction):
                target = act.node
            elif isinstance(act, RecommendAction):
                target = _spec_node_id(act.specialization)
                terminals.setdefault(
                    target, {"id": target, "label": act.specialization, "type": "recommendation"}
                )
            elif isinstance(act, CloseAction):
                target = CLOSE_NODE_ID
                terminals.setdefault(target, {"id": target, "label": "close", "type": "close"})
            else:
                continue
            edges.append({"data": {"source": node.id, "target": target, "label": choice.label}})

    nodes.extend({"data": t} for t in terminals.values())
    return {"nodes": nodes, "edges": edges}
