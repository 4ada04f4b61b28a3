"""In-memory registry of live conversations.

Each conversation owns its own :class:`~symptom_triage.walker.TriageWalker`
plus a display transcript.  Nothing here survives a restart: conversation
history is deliberately not persisted.

Locking is two-level: the registry lock guards the dict of conversations,
and each conversation has its own lock serialising walker and transcript
updates.  Conversations idle for longer than the registry's TTL are evicted
on the next registry access.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from symptom_triage.models.session import (
    ConversationInfo,
    ConversationTurn,
    QuestionStep,
    Recommendation,
    StepResult,
)
from symptom_triage.ruleset import RulesetStore
from symptom_triage.walker import TriageWalker

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Conversation:
    """One chat: its walker, transcript and timestamps."""

    user_id: str
    conversation_id: str
    walker: TriageWalker
    turns: list[ConversationTurn] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    # ------------------------------------------------------------------
    # Guided mode
    # ------------------------------------------------------------------

    def start_triage(self) -> QuestionStep:
        with self._lock:
            step = self.walker.start()
            self._say_question(step)
        return step

    def answer(self, choice: str) -> StepResult:
        with self._lock:
            # Validate before recording so a rejected label leaves no user turn.
            step = self.walker.answer(choice)
            self.turns.append(ConversationTurn(role="user", text=choice))
            if step.is_terminal:
                self._say(step.recommendation.message, recommendation=step.recommendation)
            else:
                self._say_question(step)
        return step

    def cancel_triage(self) -> None:
        with self._lock:
            self.walker.cancel()
            self.updated_at = _now()

    # ------------------------------------------------------------------
    # Free text
    # ------------------------------------------------------------------

    def send_message(self, text: str, store: RulesetStore) -> Recommendation:
        """Route free text to the classifier, leaving guided mode first."""
        with self._lock:
            self.walker.cancel()
            self.turns.append(ConversationTurn(role="user", text=text))
            rec = store.classifier.classify(text)
            self._say(rec.message, recommendation=rec)
        return rec

    def transcript(self) -> list[ConversationTurn]:
        """A snapshot of the turns recorded so far."""
        with self._lock:
            return list(self.turns)

    def info(self) -> ConversationInfo:
        with self._lock:
            return ConversationInfo(
                user_id=self.user_id,
                conversation_id=self.conversation_id,
                current_node_id=self.walker.current_node_id,
                turn_count=len(self.turns),
                created_at=self.created_at,
                updated_at=self.updated_at,
            )

    def _say_question(self, step: QuestionStep) -> None:
        self._say(step.prompt, options=step.choices)

    def _say(
        self,
        text: str,
        *,
        options: list[str] | None = None,
        recommendation: Recommendation | None = None,
    ) -> None:
        self.turns.append(
            ConversationTurn(role="assistant", text=text, options=options, recommendation=recommendation)
        )
        self.updated_at = _now()


class ConversationRegistry:
    """Maps ``(user_id, conversation_id)`` to a live :class:`Conversation`.

    Args:
        store: loaded rulesets; each conversation gets ``store.new_walker()``.
        max_per_user: open conversations a user may hold; 0 means unlimited.
        ttl_seconds: idle time after which a conversation is evicted;
            0 disables eviction.
    """

    def __init__(self, store: RulesetStore, *, max_per_user: int = 0, ttl_seconds: int = 0) -> None:
        self._store = store
        self._max_per_user = max_per_user
        self._ttl = timedelta(seconds=ttl_seconds) if ttl_seconds > 0 else None
        self._items: dict[tuple[str, str], Conversation] = {}
        self._lock = threading.Lock()

    def create(self, user_id: str, conversation_id: str) -> Conversation:
        """Open a new conversation.

        Raises:
            ValueError: the id is already in use for this user, or the user
                reached ``max_per_user`` open conversations.
        """
        key = (user_id, conversation_id)
        with self._lock:
            self._purge_expired()
            if key in self._items:
                raise ValueError(f"Conversation already exists: user_id={user_id}, conversation_id={conversation_id}")
            if self._max_per_user:
                open_count = sum(1 for uid, _ in self._items if uid == user_id)
                if open_count >= self._max_per_user:
                    raise ValueError(f"Too many open conversations for user_id={user_id}")
            conv = Conversation(user_id=user_id, conversation_id=conversation_id, walker=self._store.new_walker())
            self._items[key] = conv
        logger.info("Conversation created: user_id=%s conversation_id=%s", user_id, conversation_id)
        return conv

    def get(self, user_id: str, conversation_id: str) -> Conversation:
        """Return the conversation or raise ``ValueError`` if not found (or expired)."""
        with self._lock:
            self._purge_expired()
            conv = self._items.get((user_id, conversation_id))
        if conv is None:
            raise ValueError(f"Conversation not found: user_id={user_id}, conversation_id={conversation_id}")
        return conv

    def delete(self, user_id: str, conversation_id: str) -> None:
        with self._lock:
            self._purge_expired()
            removed = self._items.pop((user_id, conversation_id), None)
        if removed is None:
            raise ValueError(f"Conversation not found: user_id={user_id}, conversation_id={conversation_id}")
        logger.info("Conversation deleted: user_id=%s conversation_id=%s", user_id, conversation_id)

    def list_for_user(self, user_id: str) -> list[Conversation]:
        """Open conversations for *user_id*, most recently updated first."""
        with self._lock:
            self._purge_expired()
            convs = [c for (uid, _), c in self._items.items() if uid == user_id]
        return sorted(convs, key=lambda c: c.updated_at, reverse=True)

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._items)

    def _purge_expired(self) -> int:
        """Drop conversations idle past the TTL.  Caller holds ``self._lock``."""
        if self._ttl is None:
            return 0
        cutoff = _now() - self._ttl
        expired = [key for key, conv in self._items.items() if conv.updated_at < cutoff]
        for key in expired:
            del self._items[key]
        if expired:
            logger.info("Evicted %d idle conversations (ttl=%s)", len(expired), self._ttl)
        return len(expired)
