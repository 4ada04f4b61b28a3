"""Step and recommendation models — the contract between the engines and callers.

These models define what the walker and classifier return.  They carry only
what a presentation layer needs to render; routing actions never leak out.

Step types:
  - QuestionStep: show a prompt with its choice labels
  - TerminalStep: the guided session ended (recommendation or neutral close)

The ``StepResult`` union covers both cases so callers can dispatch on ``type``.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class Recommendation(BaseModel):
    """Terminal output of either engine.

    ``specialization`` is None when there is no confident recommendation;
    the consumer then applies no specialization filter and shows ``message``.
    """

    model_config = ConfigDict(frozen=True)

    specialization: Optional[str] = None
    message: str


class QuestionStep(BaseModel):
    """Walker step: show a prompt and wait for one of ``choices``."""

    type: Literal["question"] = "question"
    node_id: str
    prompt: str
    choices: list[str]

    @property
    def is_terminal(self) -> bool:
        return False


class TerminalStep(BaseModel):
    """Walker step: the guided session ended.

    ``type`` is "recommendation" when a specialization was chosen and
    "closed" for the neutral branch (``recommendation.specialization`` is None).
    """

    type: Literal["recommendation", "closed"]
    recommendation: Recommendation

    @property
    def is_terminal(self) -> bool:
        return True


# Callers can match on step.type to dispatch rendering logic.
StepResult = QuestionStep | TerminalStep


class ConversationTurn(BaseModel):
    """One chat bubble, kept for display only; the engines never read it."""

    role: Literal["user", "assistant"]
    text: str
    options: Optional[list[str]] = None
    recommendation: Optional[Recommendation] = None


class ConversationInfo(BaseModel):
    """Public view of a live conversation hosted by the server."""

    user_id: str
    conversation_id: str
    # Node the guided walk is parked on; None when not in guided mode.
    current_node_id: Optional[str] = None
    turn_count: int = 0
    created_at: datetime
    updated_at: datetime
