"""TriageWalker — finite-state machine over the triage decision tree.

The walker's only state is ``current_node_id``: ``None`` means no guided
session is active.  ``start``, ``answer`` and ``cancel`` are its entire
mutation surface.  One walker belongs to exactly one conversation; hosts
that serve several conversations keep one walker each.

Flow::

    walker = TriageWalker(store.tree)
    step = walker.start()                # QuestionStep
    step = walker.answer("Yes")          # QuestionStep or TerminalStep
    if step.is_terminal:
        step.recommendation.specialization   # e.g. "cardiology", or None
"""

from __future__ import annotations

import logging

from symptom_triage.errors import InvalidChoice, UnknownTransitionTarget
from symptom_triage.models.action import CloseAction, GotoAction, RecommendAction
from symptom_triage.models.session import (
    QuestionStep,
    Recommendation,
    StepResult,
    TerminalStep,
)
from symptom_triage.models.tree import TriageNode, TriageTree

logger = logging.getLogger(__name__)


class TriageWalker:
    """Walks a :class:`TriageTree` one answer at a time.

    Args:
        tree: the question graph; validate it with
            :func:`symptom_triage.ruleset.validate_tree` beforehand to catch
            dangling goto targets at load time instead of mid-conversation.
    """

    def __init__(self, tree: TriageTree) -> None:
        self._tree = tree
        self.current_node_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.current_node_id is not None

    # ==================================================================
    # Session operations
    # ==================================================================

    def start(self) -> QuestionStep:
        """Begin (or restart) a guided session at the tree's start node."""
        node = self._node(self._tree.start)
        self.current_node_id = node.id
        logger.debug("Triage session started at %s", node.id)
        return self._question_step(node)

    def answer(self, choice: str) -> StepResult:
        """Apply *choice* to the current node and advance.

        Raises:
            InvalidChoice: no session is active, or *choice* is not one of the
                current node's labels (exact, case-sensitive match).
            UnknownTransitionTarget: the choice points at a missing node.
        """
        if self.current_node_id is None:
            raise InvalidChoice(choice, None)

        node = self._node(self.current_node_id)
        action = node.transition(choice)
        if action is None:
            raise InvalidChoice(choice, node.id, node.labels)

        if isinstance(action, GotoAction):
            target = self._node(action.node, source=node.id)
            if target.is_terminal:
                # A choice-less node is a closing message, e.g. "end".
                return self._finish("closed", None, target.prompt)
            self.current_node_id = target.id
            return self._question_step(target)

        if isinstance(action, RecommendAction):
            return self._finish(
                "recommendation",
                action.specialization,
                action.message or self._tree.recommend_message,
            )

        if isinstance(action, CloseAction):
            return self._finish("closed", None, action.message or self._tree.close_message)

        # Unreachable with the Action union, kept so a new variant fails loudly.
        raise TypeError(f"Unsupported action type: {type(action).__name__}")

    def cancel(self) -> None:
        """Leave guided mode unconditionally (e.g. the user typed free text)."""
        if self.current_node_id is not None:
            logger.debug("Triage session cancelled at %s", self.current_node_id)
        self.current_node_id = None

    def current_step(self) -> QuestionStep | None:
        """The question currently shown, or None when idle.  Read-only."""
        if self.current_node_id is None:
            return None
        return self._question_step(self._node(self.current_node_id))

    # ==================================================================
    # Helpers
    # ==================================================================

    def _node(self, node_id: str, *, source: str | None = None) -> TriageNode:
        try:
            return self._tree.nodes[node_id]
        except KeyError:
            raise UnknownTransitionTarget(node_id, source) from None

    def _finish(self, kind: str, specialization: str | None, message: str) -> TerminalStep:
        logger.debug(
            "Triage session ended at %s: %s (%s)",
            self.current_node_id, kind, specialization,
        )
        self.current_node_id = None
        return TerminalStep(
            type=kind,
            recommendation=Recommendation(specialization=specialization, message=message),
        )

    @staticmethod
    def _question_step(node: TriageNode) -> QuestionStep:
        return QuestionStep(node_id=node.id, prompt=node.prompt, choices=node.labels)
