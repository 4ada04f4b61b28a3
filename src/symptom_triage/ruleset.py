"""RulesetStore — loads the triage YAML under ``v1/`` into typed models.

This is the single source of truth for rule data at runtime.  The store is
loaded once at startup, validated eagerly, and then treated as read-only so
it can be shared by every conversation.

Usage::

    store = RulesetStore()          # defaults to v1/ relative to repo root
    store.load()                    # parse and validate all YAML files

    walker = store.new_walker()
    classifier = store.classifier
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from symptom_triage.classifier import SymptomClassifier, shadowed_rules
from symptom_triage.errors import UnknownSpecialization, UnknownTransitionTarget
from symptom_triage.models.classifier import ClassifierRule
from symptom_triage.models.schema import (
    ConcernConst,
    ConditionConst,
    Doctor,
    SpecializationConst,
)
from symptom_triage.models.tree import TriageTree
from symptom_triage.walker import TriageWalker

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------

def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upwards from *start* to find the repo root (dir with pyproject.toml or .git).

    Falls back to cwd if no marker is found.
    """
    p = (start or Path(__file__).resolve()).parent
    for parent in [p, *p.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            return parent
    return Path.cwd()


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def validate_tree(tree: TriageTree, specializations: set[str] | None = None) -> None:
    """Check referential integrity of *tree*.

    Raises:
        UnknownTransitionTarget: the start node or a goto target is missing.
        UnknownSpecialization: a recommend action uses a tag outside
            *specializations* (skipped when *specializations* is None).
    """
    if tree.start not in tree.nodes:
        raise UnknownTransitionTarget(tree.start, "start")
    for source, target in tree.goto_targets():
        if target not in tree.nodes:
            raise UnknownTransitionTarget(target, source)
    if tree.nodes[tree.start].is_terminal:
        raise ValueError(f"Start node {tree.start!r} has no choices")
    if specializations is not None:
        for tag in sorted(tree.recommended_specializations()):
            if tag not in specializations:
                raise UnknownSpecialization(tag, "triage tree")


# ---------------------------------------------------------------------------
# RulesetStore
# ---------------------------------------------------------------------------

class RulesetStore:
    """Loads all YAML from ``v1/`` and provides typed lookup.

    Attributes populated after :meth:`load`:

        specializations — dict[id, SpecializationConst]
        concerns        — dict[id, ConcernConst]
        conditions      — dict[id, ConditionConst]
        doctors         — list[Doctor]
        tree            — TriageTree
        rules           — list[ClassifierRule] in priority order
    """

    def __init__(self, ruleset_dir: str | Path | None = None) -> None:
        if ruleset_dir is None:
            ruleset_dir = os.getenv("TRIAGE_RULESET_DIR") or find_repo_root() / "v1"
        self._base = Path(ruleset_dir)

        # Populated by load()
        self.specializations: dict[str, SpecializationConst] = {}
        self.concerns: dict[str, ConcernConst] = {}
        self.conditions: dict[str, ConditionConst] = {}
        self.doctors: list[Doctor] = []
        self.tree: TriageTree | None = None
        self.rules: list[ClassifierRule] = []
        self._classifier: SymptomClassifier | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse and validate all YAML files under the ruleset directory.

        Call this once at startup.  Raises ``FileNotFoundError`` if expected
        YAML files are missing, and a :class:`~symptom_triage.errors.TriageError`
        if the tree or rules reference unknown nodes or specializations.
        """
        self._load_constants()
        self._load_tree()
        self._load_rules()
        self._load_doctors()
        logger.info(
            "RulesetStore loaded: %d specializations, %d nodes, %d rules, %d doctors",
            len(self.specializations),
            len(self.tree.nodes),
            len(self.rules),
            len(self.doctors),
        )

    def _load_constants(self) -> None:
        """Load v1/const/*.yaml into typed model dicts."""
        const_dir = self._base / "const"
        self.specializations, self.concerns, self.conditions = {}, {}, {}

        for raw in load_yaml(const_dir / "specializations.yaml"):
            spec = SpecializationConst(**raw)
            self.specializations[spec.id] = spec

        for raw in load_yaml(const_dir / "concerns.yaml"):
            concern = ConcernConst(**raw)
            self.concerns[concern.id] = concern

        for raw in load_yaml(const_dir / "conditions.yaml"):
            cond = ConditionConst(**raw)
            self.conditions[cond.id] = cond

    def _load_tree(self) -> None:
        """Load v1/rules/triage_tree.yaml and check it eagerly."""
        tree = TriageTree(**load_yaml(self._base / "rules" / "triage_tree.yaml"))
        validate_tree(tree, set(self.specializations))
        self.tree = tree

    def _load_rules(self) -> None:
        """Load v1/rules/classifier.yaml in priority order."""
        rules = [ClassifierRule(**raw) for raw in load_yaml(self._base / "rules" / "classifier.yaml")]
        for i, rule in enumerate(rules):
            if rule.specialization not in self.specializations:
                raise UnknownSpecialization(rule.specialization, f"classifier rule #{i}")
        for i in shadowed_rules(rules):
            logger.warning("Classifier rule #%d %s can never match", i, rules[i].keywords)
        self.rules = rules
        self._classifier = SymptomClassifier(rules)

    def _load_doctors(self) -> None:
        """Load v1/const/doctors.yaml; tags must exist in the reference lists."""
        doctors = []
        for raw in load_yaml(self._base / "const" / "doctors.yaml"):
            doc = Doctor(**raw)
            for tag in doc.specializations:
                if tag not in self.specializations:
                    raise UnknownSpecialization(tag, f"doctor {doc.id}")
            unknown = [c for c in doc.concerns if c not in self.concerns]
            unknown += [c for c in doc.conditions if c not in self.conditions]
            if unknown:
                logger.warning("Doctor %s references unknown concern/condition ids: %s", doc.id, unknown)
            doctors.append(doc)
        self.doctors = doctors

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    @property
    def classifier(self) -> SymptomClassifier:
        """The shared, stateless classifier built from :attr:`rules`."""
        if self._classifier is None:
            raise RuntimeError("RulesetStore.load() has not been called")
        return self._classifier

    def new_walker(self) -> TriageWalker:
        """A fresh walker over the loaded tree; one per conversation."""
        if self.tree is None:
            raise RuntimeError("RulesetStore.load() has not been called")
        return TriageWalker(self.tree)

    def resolve_specialization(self, spec_id: str) -> dict:
        """Look up a specialization by ID and return a dict for API responses.

        Raises:
            KeyError: if the ID is unknown.
        """
        spec = self.specializations[spec_id]
        return {"id": spec.id, "name": spec.name, "description": spec.description}
