"""triage_server — FastAPI REST API for the symptom triage SDK.

Hosts one triage walker per conversation, exposes the free-text classifier,
the doctor hand-off listing and reference data endpoints.
"""
