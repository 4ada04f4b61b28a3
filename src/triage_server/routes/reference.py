"""Reference data endpoints — specializations, concerns, conditions, triage graph.

These are read-only endpoints that expose the data loaded from ``v1/``.
They don't require authentication since the data is public reference
information.
"""

from fastapi import APIRouter, Depends

from symptom_triage.graph import build_tree_graph
from symptom_triage.ruleset import RulesetStore

from triage_server.dependencies import get_store

router = APIRouter(prefix="/reference", tags=["reference"])


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.get("/specializations")
def list_specializations(
    store: RulesetStore = Depends(get_store),
) -> list[dict]:
    """Return the shared specialization enumeration."""
    return [store.resolve_specialization(spec_id) for spec_id in store.specializations]


@router.get("/specializations/{spec_id}")
def get_specialization(
    spec_id: str,
    store: RulesetStore = Depends(get_store),
) -> dict:
    """Return one specialization; 404 if the tag is unknown."""
    return store.resolve_specialization(spec_id)


@router.get("/concerns")
def list_concerns(
    store: RulesetStore = Depends(get_store),
) -> list[dict]:
    """Return the patient-facing concern list."""
    return [{"id": c.id, "name": c.name} for c in store.concerns.values()]


@router.get("/conditions")
def list_conditions(
    store: RulesetStore = Depends(get_store),
) -> list[dict]:
    """Return the known-condition list."""
    return [{"id": c.id, "name": c.name} for c in store.conditions.values()]


@router.get("/triage-graph")
def triage_graph(
    store: RulesetStore = Depends(get_store),
) -> dict:
    """Return the triage tree as cytoscape nodes and edges."""
    return build_tree_graph(store.tree)
