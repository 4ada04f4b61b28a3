import pytest

from symptom_triage.ruleset import RulesetStore


@pytest.fixture(scope="session")
def store():
    """Load the full RulesetStore once for the entire test session."""
    s = RulesetStore()
    s.load()
    return s


@pytest.fixture
def walker(store):
    """Fresh TriageWalker over the shipped tree for each test."""
    return store.new_walker()
