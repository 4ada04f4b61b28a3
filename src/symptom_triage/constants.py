"""Triage constants shared across the SDK.

These values are referenced by the walker, classifier, ruleset store and
doctor matching.  They mirror conventions encoded in the YAML rulesets under
``v1/``.

A few constants can be overridden via environment variables so that
deployments can adjust behaviour without code changes.
"""

import os

# Message returned by the classifier when no rule matches the text.
CLARIFICATION_MESSAGE = (
    "I understand. Could you describe your symptoms in a bit more detail? "
    "For example: 'I have a headache' or 'My chest hurts'."
)

# Fallbacks used when the tree YAML omits its own defaults.
DEFAULT_RECOMMEND_MESSAGE = "I've found the best specialists for you based on our conversation."
DEFAULT_CLOSE_MESSAGE = "I hope that was helpful! feel free to ask me anything else."

# Number of non-recommended doctors appended after the matched ones.
# Overridable via TRIAGE_FALLBACK_DOCTORS env var.
FALLBACK_DOCTOR_COUNT = int(os.getenv("TRIAGE_FALLBACK_DOCTORS", "3"))

# Roles allowed on a conversation turn.
TURN_ROLES: tuple[str, ...] = ("user", "assistant")
