"""Pydantic models for reference data and the doctor directory.

These models mirror the YAML files in ``v1/const/``:

  - SpecializationConst: a specialization tag with display name
  - ConcernConst: patient-facing concern ("Fever & Cold", ...)
  - ConditionConst: known condition ("Hypertension (High BP)", ...)
  - Doctor: directory entry tagged with specializations, concerns, conditions

``DoctorMatch`` is the output of doctor matching: a directory entry plus
the ``recommended`` provenance flag.
"""

from typing import List

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Constants — v1/const/*.yaml
# ---------------------------------------------------------------------------

class SpecializationConst(BaseModel):
    """Medical specialization from specializations.yaml.

    ``id`` is the tag emitted by the walker and classifier.
    """

    id: str
    name: str
    description: str = ""


class ConcernConst(BaseModel):
    """Patient concern from concerns.yaml."""

    id: str
    name: str


class ConditionConst(BaseModel):
    """Known condition from conditions.yaml."""

    id: str
    name: str


# ---------------------------------------------------------------------------
# Directory — v1/const/doctors.yaml
# ---------------------------------------------------------------------------

class Doctor(BaseModel):
    """A doctor as seen by the matching layer."""

    id: str
    full_name: str
    email: str = ""
    specializations: List[str] = []
    concerns: List[str] = []
    conditions: List[str] = []


class DoctorMatch(BaseModel):
    """A doctor in a listing; ``recommended`` marks a query hit, not a quality score."""

    doctor: Doctor
    recommended: bool = False
