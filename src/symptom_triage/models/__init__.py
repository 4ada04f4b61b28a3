"""Public model re-exports for symptom_triage.

Consumers should import from ``symptom_triage.models`` rather than
reaching into sub-modules directly.
"""

# --- Actions ---
from symptom_triage.models.action import (
    Action,
    CloseAction,
    GotoAction,
    RecommendAction,
)

# --- Tree ---
from symptom_triage.models.tree import (
    Choice,
    TriageNode,
    TriageTree,
)

# --- Classifier ---
from symptom_triage.models.classifier import ClassifierRule

# --- Reference data / directory ---
from symptom_triage.models.schema import (
    ConcernConst,
    ConditionConst,
    Doctor,
    DoctorMatch,
    SpecializationConst,
)

# --- Session / step ---
from symptom_triage.models.session import (
    ConversationInfo,
    ConversationTurn,
    QuestionStep,
    Recommendation,
    StepResult,
    TerminalStep,
)

__all__ = [
    # Actions
    "Action",
    "CloseAction",
    "GotoAction",
    "RecommendAction",
    # Tree
    "Choice",
    "TriageNode",
    "TriageTree",
    # Classifier
    "ClassifierRule",
    # Reference
    "ConcernConst",
    "ConditionConst",
    "Doctor",
    "DoctorMatch",
    "SpecializationConst",
    # Session
    "ConversationInfo",
    "ConversationTurn",
    "QuestionStep",
    "Recommendation",
    "StepResult",
    "TerminalStep",
]
