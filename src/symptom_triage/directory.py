"""Doctor directory interface and recommendation hand-off.

The triage engines never touch the data store.  Once a
:class:`~symptom_triage.models.session.Recommendation` carries a
specialization, the host hands it to :func:`match_doctors` together with a
:class:`DoctorDirectory` implementation backed by whatever store the
deployment uses.

Typical integration flow::

    rec = store.classifier.classify("my chest hurts")
    directory: DoctorDirectory = MyDatabaseDirectory(...)
    listing = match_doctors(directory, specialization=rec.specialization)
    # listing[i].recommended is True for query hits, False for filler

:class:`InMemoryDirectory` serves the doctors loaded from
``v1/const/doctors.yaml`` for development and tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from symptom_triage.constants import FALLBACK_DOCTOR_COUNT
from symptom_triage.models.schema import Doctor, DoctorMatch

logger = logging.getLogger(__name__)


class DoctorDirectory(ABC):
    """Query surface over the doctor records.

    Implementations return doctors in a stable order; the matching layer
    preserves that order.
    """

    @abstractmethod
    def all(self) -> list[Doctor]:
        """Every listed doctor."""
        ...

    @abstractmethod
    def by_specialization(self, tag: str) -> list[Doctor]:
        """Doctors whose declared specializations include *tag*."""
        ...

    @abstractmethod
    def by_concern(self, concern_id: str) -> list[Doctor]:
        """Doctors tagged with the concern *concern_id*."""
        ...

    @abstractmethod
    def by_condition(self, condition_id: str) -> list[Doctor]:
        """Doctors tagged with the condition *condition_id*."""
        ...


class InMemoryDirectory(DoctorDirectory):
    """Directory over a fixed list of doctors."""

    def __init__(self, doctors: Iterable[Doctor]) -> None:
        self._doctors = list(doctors)

    def all(self) -> list[Doctor]:
        return list(self._doctors)

    def by_specialization(self, tag: str) -> list[Doctor]:
        return [d for d in self._doctors if tag in d.specializations]

    def by_concern(self, concern_id: str) -> list[Doctor]:
        return [d for d in self._doctors if concern_id in d.concerns]

    def by_condition(self, condition_id: str) -> list[Doctor]:
        return [d for d in self._doctors if condition_id in d.conditions]


def match_doctors(
    directory: DoctorDirectory,
    *,
    specialization: str | None = None,
    concern_id: str | None = None,
    condition_id: str | None = None,
    fallback_limit: int = FALLBACK_DOCTOR_COUNT,
) -> list[DoctorMatch]:
    """Build a doctor listing for a recommendation or a picked concern/condition.

    Only one filter is applied, in priority order specialization, concern,
    condition.  Hits come first with ``recommended=True``; then up to
    *fallback_limit* other doctors follow with ``recommended=False`` so the
    listing is never empty.  Doctors appear at most once.
    """
    if specialization:
        hits = directory.by_specialization(specialization)
    elif concern_id:
        hits = directory.by_concern(concern_id)
    elif condition_id:
        hits = directory.by_condition(condition_id)
    else:
        hits = []

    seen = {d.id for d in hits}
    listing = [DoctorMatch(doctor=d, recommended=True) for d in hits]

    filler = 0
    for doctor in directory.all():
        if filler >= fallback_limit:
            break
        if doctor.id in seen:
            continue
        seen.add(doctor.id)
        listing.append(DoctorMatch(doctor=doctor, recommended=False))
        filler += 1

    logger.debug(
        "match_doctors(spec=%s, concern=%s, condition=%s): %d recommended, %d filler",
        specialization, concern_id, condition_id, len(hits), filler,
    )
    return listing
