from typing import Literal

from fastapi import HTTPException

from ..core.errors import (
    JobApiError,
    NotFound,
    ScriptValidationError,
    SessionBusy,
    SessionNotFound,
)

# "modal" for destructive actions and detail fetches, "inline" for list fetches and saves
Display = Literal["modal", "inline"]


def http_error(exc: Exception, display: Display = "inline") -> HTTPException:
    if isinstance(exc, ScriptValidationError):
        status_code = 422
    elif isinstance(exc, (NotFound, SessionNotFound)):
        status_code = 404
    elif isinstance(exc, SessionBusy):
        status_code = 409
    elif isinstance(exc, JobApiError):
        status_code = 502
    elif isinstance(exc, IndexError):
        status_code = 404
    elif isinstance(exc, RuntimeError):
        status_code = 409
    elif isinstance(exc, (KeyError, ValueError)):
        status_code = 422
    else:
        status_code = 500
    # KeyError.__str__ wraps the message in quotes
    message = exc.args[0] if type(exc) is KeyError and exc.args else str(exc)
    return HTTPException(status_code=status_code, detail={"message": str(message), "display": display})
