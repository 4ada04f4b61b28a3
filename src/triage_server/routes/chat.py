"""Chat endpoints — guided triage steps and free-text messages.

Guided mode:
  - ``triage/start`` begins (or restarts) the decision tree
  - ``triage/answer`` submits one of the labels shown in the last step
  - ``triage/cancel`` leaves guided mode

Free text (``messages``) always goes to the classifier and cancels any
guided walk in progress.  ``/classify`` is the stateless variant that needs
no conversation.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from symptom_triage.models.session import QuestionStep, Recommendation, StepResult
from symptom_triage.ruleset import RulesetStore

from triage_server.conversations import ConversationRegistry
from triage_server.dependencies import get_registry, get_store, get_user_id

router = APIRouter(tags=["chat"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class AnswerRequest(BaseModel):
    """Body for POST /conversations/{conversation_id}/triage/answer."""
    choice: str


class MessageRequest(BaseModel):
    """Body for POST /conversations/{conversation_id}/messages and /classify."""
    text: str


# ------------------------------------------------------------------
# Guided triage
# ------------------------------------------------------------------

@router.post("/conversations/{conversation_id}/triage/start")
def start_triage(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> QuestionStep:
    """Start guided triage and return the first question."""
    return registry.get(user_id, conversation_id).start_triage()


@router.post("/conversations/{conversation_id}/triage/answer")
def answer_triage(
    conversation_id: str,
    body: AnswerRequest,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> StepResult:
    """Submit a choice label.

    Returns the next ``question`` step, or a ``recommendation`` / ``closed``
    step that ends guided mode.  400 if the label is not on offer.
    """
    return registry.get(user_id, conversation_id).answer(body.choice)


@router.post("/conversations/{conversation_id}/triage/cancel", status_code=204)
def cancel_triage(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> None:
    """Leave guided mode; a no-op when it is not active."""
    registry.get(user_id, conversation_id).cancel_triage()


# ------------------------------------------------------------------
# Free text
# ------------------------------------------------------------------

@router.post("/conversations/{conversation_id}/messages")
def send_message(
    conversation_id: str,
    body: MessageRequest,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
    store: RulesetStore = Depends(get_store),
) -> Recommendation:
    """Classify free text within a conversation, cancelling guided mode."""
    return registry.get(user_id, conversation_id).send_message(body.text, store)


@router.post("/classify")
def classify(
    body: MessageRequest,
    store: RulesetStore = Depends(get_store),
) -> Recommendation:
    """Classify free text without a conversation."""
    return store.classifier.classify(body.text)
