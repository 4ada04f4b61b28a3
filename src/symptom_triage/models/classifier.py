"""Free-text classifier rule model.

Rules are evaluated in declared order; the first rule with any keyword found
as a substring of the lowercased input wins.
"""

from typing import List

from pydantic import BaseModel, field_validator


class ClassifierRule(BaseModel):
    """One keyword rule: any keyword present in the text emits ``specialization``."""

    keywords: List[str]
    specialization: str
    message: str

    @field_validator("keywords")
    @classmethod
    def _normalise(cls, v: List[str]) -> List[str]:
        cleaned = [k.strip().lower() for k in v if k and k.strip()]
        if not cleaned:
            raise ValueError("a classifier rule needs at least one non-empty keyword")
        return cleaned

    def matches(self, lowered: str) -> bool:
        """True if any keyword occurs in *lowered* (already lowercased)."""
        return any(k in lowered for k in self.keywords)
