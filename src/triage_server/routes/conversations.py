"""Conversation management endpoints — create, get, list, delete, transcript.

All endpoints require the ``X-User-ID`` header for user identification.
Conversation identity is the (user_id, conversation_id) pair.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from symptom_triage.models.session import ConversationInfo, ConversationTurn

from triage_server.conversations import ConversationRegistry
from triage_server.dependencies import get_registry, get_user_id

router = APIRouter(tags=["conversations"])


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class CreateConversationRequest(BaseModel):
    """Body for POST /conversations."""
    conversation_id: str


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/conversations", status_code=201)
def create_conversation(
    body: CreateConversationRequest,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> ConversationInfo:
    """Open a conversation.

    Returns 201 on success.  Raises 409 if the same (user_id,
    conversation_id) is already open.
    """
    return registry.create(user_id, body.conversation_id).info()


@router.get("/conversations")
def list_conversations(
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> list[ConversationInfo]:
    """List open conversations for the current user, most recent first."""
    return [c.info() for c in registry.list_for_user(user_id)]


@router.get("/conversations/{conversation_id}")
def get_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> ConversationInfo:
    """Get conversation info; 404 if it does not exist for this user."""
    return registry.get(user_id, conversation_id).info()


@router.delete("/conversations/{conversation_id}", status_code=204)
def delete_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> None:
    """Close a conversation and drop its walker and transcript."""
    registry.delete(user_id, conversation_id)


@router.get("/conversations/{conversation_id}/turns")
def list_turns(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    registry: ConversationRegistry = Depends(get_registry),
) -> list[ConversationTurn]:
    """Return the display transcript in chronological order."""
    return registry.get(user_id, conversation_id).transcript()
