"""Action models for the triage decision tree.

Actions define what happens after the user picks a choice:
  - GotoAction: move to another node by id
  - RecommendAction: end the session with a specialization recommendation
  - CloseAction: end the session with a neutral message, no specialization

The discriminated ``Action`` union uses the ``action`` field as its discriminator
so Pydantic can deserialise YAML dicts directly into the correct type.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class GotoAction(BaseModel):
    """Move to another node by id."""

    action: Literal["goto"] = "goto"
    node: str


class RecommendAction(BaseModel):
    """End the session recommending a specialization.

    ``message`` falls back to the tree's ``recommend_message`` when omitted.
    """

    action: Literal["recommend"] = "recommend"
    specialization: str
    message: Optional[str] = None


class CloseAction(BaseModel):
    """End the session without a recommendation."""

    action: Literal["close"] = "close"
    message: Optional[str] = None


# Discriminated union, resolved on the "action" field.
Action = Annotated[Union[GotoAction, RecommendAction, CloseAction], Field(discriminator="action")]
