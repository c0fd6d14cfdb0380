from __future__ import annotations


class JobApiError(Exception):
    """Base class for failures talking to the remote job API."""


class HttpError(JobApiError):
    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"HTTP error! status: {status_code}")
        self.status_code = status_code
        self.body = body


class NotFound(HttpError):
    def __init__(self, resource: str, body: str = ""):
        super().__init__(404, body)
        self.resource = resource


class NetworkError(JobApiError):
    pass


class MalformedResponse(JobApiError):
    """The job API answered 2xx with a body that does not fit the expected shape."""


class ScriptValidationError(ValueError):
    """Raised locally before submission; never reaches the network."""


class MissingFileName(ScriptValidationError):
    def __init__(self):
        super().__init__("File name is required")


class InvalidParameter(ScriptValidationError):
    def __init__(self, indexes: list[int]):
        # Only names are enforced; the message predates that relaxation.
        super().__init__("All parameters must have a name and description")
        self.indexes = indexes


class SessionBusy(RuntimeError):
    pass


class SessionNotFound(KeyError):
    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Edit session '{self.session_id}' not found."
