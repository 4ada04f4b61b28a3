"""Doctor matching tests — hand-off from a Recommendation to a listing.

Uses the development directory from v1/const/doctors.yaml:
    doc001 cardiology            doc006 mental-health
    doc002 neurology             doc007 orthopedics
    doc003 general               doc008 ophthalmology
    doc004 dermatology           doc009 internal-medicine, cardiology
    doc005 pediatrics, general
"""

import pytest

from symptom_triage.directory import DoctorDirectory, InMemoryDirectory, match_doctors
from symptom_triage.models.schema import Doctor


@pytest.fixture(scope="module")
def directory(store):
    return InMemoryDirectory(store.doctors)


def _ids(listing, recommended=None):
    return [
        m.doctor.id for m in listing
        if recommended is None or m.recommended is recommended
    ]


class TestInMemoryDirectory:

    def test_is_a_directory(self, directory):
        assert isinstance(directory, DoctorDirectory)

    def test_by_specialization(self, directory):
        assert [d.id for d in directory.by_specialization("cardiology")] == ["doc001", "doc009"]

    def test_by_concern(self, directory):
        assert [d.id for d in directory.by_concern("fever")] == ["doc003", "doc005"]

    def test_by_condition(self, directory):
        assert [d.id for d in directory.by_condition("htn")] == ["doc001", "doc009"]

    def test_all_returns_copy(self, directory):
        listing = directory.all()
        listing.clear()
        assert len(directory.all()) == 9


class TestMatchDoctors:

    def test_specialization_hits_first(self, directory):
        listing = match_doctors(directory, specialization="cardiology", fallback_limit=3)
        assert _ids(listing, recommended=True) == ["doc001", "doc009"]
        assert _ids(listing, recommended=False) == ["doc002", "doc003", "doc004"]
        assert listing[0].recommended is True

    def test_no_duplicates(self, directory):
        listing = match_doctors(directory, specialization="general", fallback_limit=20)
        ids = _ids(listing)
        assert len(ids) == len(set(ids))
        assert len(ids) == 9

    def test_specialization_takes_precedence(self, directory):
        listing = match_doctors(
            directory, specialization="neurology", concern_id="skin", fallback_limit=0,
        )
        assert _ids(listing) == ["doc002"]

    def test_concern_then_condition(self, directory):
        by_concern = match_doctors(directory, concern_id="mental", condition_id="htn", fallback_limit=0)
        assert _ids(by_concern) == ["doc006"]
        by_condition = match_doctors(directory, condition_id="htn", fallback_limit=0)
        assert _ids(by_condition) == ["doc001", "doc009"]

    def test_no_filter_is_fallback_only(self, directory):
        listing = match_doctors(directory, fallback_limit=3)
        assert _ids(listing) == ["doc001", "doc002", "doc003"]
        assert not any(m.recommended for m in listing)

    def test_none_specialization_from_fallback_recommendation(self, store, directory):
        """A no-match classification hands off None → plain listing."""
        rec = store.classifier.classify("xyz123")
        listing = match_doctors(directory, specialization=rec.specialization, fallback_limit=2)
        assert len(listing) == 2
        assert not any(m.recommended for m in listing)

    def test_unmatched_tag_still_lists_filler(self):
        d = InMemoryDirectory([Doctor(id="x", full_name="Dr. X", specializations=["general"])])
        listing = match_doctors(d, specialization="neurology", fallback_limit=5)
        assert [(m.doctor.id, m.recommended) for m in listing] == [("x", False)]

    def test_walker_hand_off(self, store, directory):
        w = store.new_walker()
        w.start()
        w.answer("No")
        w.answer("Yes")
        step = w.answer("Mental Health")
        listing = match_doctors(directory, specialization=step.recommendation.specialization, fallback_limit=0)
        assert _ids(listing) == ["doc006"]
