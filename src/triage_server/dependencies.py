"""FastAPI dependency injection — provides the store, registry, directory and user identity.

The store, conversation registry and doctor directory are built once in the
app lifespan and stashed on ``app.state``; these helpers hand them to routes.
"""

import hmac

from fastapi import Header, HTTPException, Request

from symptom_triage.directory import DoctorDirectory
from symptom_triage.ruleset import RulesetStore

from triage_server.conversations import ConversationRegistry


# ------------------------------------------------------------------
# Shared singletons — stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_store(request: Request) -> RulesetStore:
    """Return the RulesetStore singleton from ``app.state``."""
    return request.app.state.store


def get_registry(request: Request) -> ConversationRegistry:
    """Return the ConversationRegistry singleton from ``app.state``."""
    return request.app.state.registry


def get_directory(request: Request) -> DoctorDirectory:
    """Return the DoctorDirectory used for hand-off listings."""
    return request.app.state.directory


# ------------------------------------------------------------------
# User identity — extracted from the X-User-ID header
# ------------------------------------------------------------------

async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Extract user identity from the ``X-User-ID`` header.

    Returns 401 if the header is missing — every conversation endpoint
    requires a known caller.

    When ``TRUSTED_PROXY_SECRET`` is configured, the request must also
    carry a matching ``X-Proxy-Secret`` header.  This proves the
    ``X-User-ID`` was injected by a trusted API gateway and not forged
    by an external client.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="X-User-ID header is required")

    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if expected_secret:
        if not x_proxy_secret:
            raise HTTPException(
                status_code=403,
                detail="X-Proxy-Secret header is required",
            )
        # Constant-time comparison to prevent timing side-channels.
        if not hmac.compare_digest(x_proxy_secret, expected_secret):
            raise HTTPException(status_code=403, detail="Invalid proxy secret")

    return x_user_id
