"""Global exception handlers — map SDK exceptions to HTTP status codes.

The SDK raises ``ValueError`` subclasses for caller errors (bad choice,
conversation not found, duplicate conversation).  Rather than catching these
in every route, we install global handlers that pick the right HTTP status
code.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from symptom_triage.errors import InvalidChoice

logger = logging.getLogger(__name__)

# --- Keyword patterns in ValueError messages and their HTTP status codes ---
# Checked in order; first match wins.
_VALUE_ERROR_PATTERNS: list[tuple[str, int]] = [
    # Conversation already exists for this user
    ("already exists", 409),
    # Conversation not found
    ("not found", 404),
    # Per-user conversation cap reached
    ("too many", 429),
]


# --- Client-safe messages keyed by HTTP status code ---
# Internal details (user_id, conversation_id) stay in the server log; the
# client receives only a generic description.
_SAFE_MESSAGES: dict[int, str] = {
    404: "Resource not found",
    409: "Resource already exists",
    429: "Too many open conversations",
    400: "Invalid request",
}


async def invalid_choice_handler(request: Request, exc: InvalidChoice) -> JSONResponse:
    """Map :class:`InvalidChoice` to 400 with the labels the client may re-offer."""
    logger.info("InvalidChoice at %s: %s", request.url, exc)
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid choice",
            "active": exc.node_id is not None,
            "choices": exc.allowed,
        },
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map SDK ``ValueError`` to a contextual HTTP error response.

    Inspects the exception message to decide between 404 (not found),
    409 (conflict / duplicate), 429 (conversation cap) or 400.
    Falls back to 400 for unrecognised messages.

    The raw exception message is logged server-side but **never** sent
    to the client — it may contain user or conversation ids.
    """
    msg = str(exc)
    status = 400  # default
    for pattern, code in _VALUE_ERROR_PATTERNS:
        if pattern in msg.lower():
            status = code
            break

    logger.warning("ValueError [%d] at %s: %s", status, request.url, msg)
    safe_detail = _SAFE_MESSAGES.get(status, "Invalid request")
    return JSONResponse(status_code=status, content={"detail": safe_detail})


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Map ``KeyError`` (e.g. unknown specialization ID) to 404."""
    logger.warning("KeyError at %s: %s", request.url, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
