"""symptom_triage — Rule-based symptom triage SDK.

Public API:
    TriageWalker        — guided yes/no decision tree, one per conversation
    SymptomClassifier   — first-match-wins keyword rules over free text
    RulesetStore        — loads YAML rulesets into typed models and validates them
    Recommendation      — shared output: optional specialization + message
    QuestionStep        — walker step: prompt with choice labels
    TerminalStep        — walker step: session ended
    StepResult          — union of the two step types

Hand-off to doctor listings:
    DoctorDirectory     — ABC for the doctor query surface
    InMemoryDirectory   — directory over a fixed doctor list
    match_doctors       — builds a listing with the ``recommended`` flag

Errors:
    TriageError, InvalidChoice, UnknownTransitionTarget, UnknownSpecialization
"""

from symptom_triage.classifier import SymptomClassifier
from symptom_triage.directory import DoctorDirectory, InMemoryDirectory, match_doctors
from symptom_triage.errors import (
    InvalidChoice,
    TriageError,
    UnknownSpecialization,
    UnknownTransitionTarget,
)
from symptom_triage.models.session import (
    ConversationTurn,
    QuestionStep,
    Recommendation,
    StepResult,
    TerminalStep,
)
from symptom_triage.ruleset import RulesetStore
from symptom_triage.walker import TriageWalker

__all__ = [
    # Engines & store
    "RulesetStore",
    "SymptomClassifier",
    "TriageWalker",
    # Steps / output
    "ConversationTurn",
    "QuestionStep",
    "Recommendation",
    "StepResult",
    "TerminalStep",
    # Directory
    "DoctorDirectory",
    "InMemoryDirectory",
    "match_doctors",
    # Errors
    "InvalidChoice",
    "TriageError",
    "UnknownSpecialization",
    "UnknownTransitionTarget",
]
