"""
Caller-facing exceptions for persistence operations.
"""

from .failures import FailureKind

# canonical persistence-level exception

class PersistenceError(Exception):
    """
    Base exception for persistence errors that are safe to surface.

    - message: human-friendly message (safe to show to clients and support logs)
    - error_code: correlation code for the failure (the local timestamp it was caught at)
    - kind: which failure kind produced it, when known
    """

    # Map failure kind -> default HTTP status.
    KIND_TO_STATUS = {
        FailureKind.VALIDATION: 422,
        FailureKind.UPDATE: 409,
        # fallback: default to 400 for anything else
    }

    def __init__(self, message: str, *, error_code: str | None = None, kind: FailureKind | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.kind = kind

    def __str__(self) -> str:
        # The message already embeds the error code; keep it as the only text.
        return self.message

    # ------------------------
    # structured payload for API responses
    # ------------------------
    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses.
        Standard shape:
            {
                "detail": "Error code 2025-11-02T22:09:44.047. Cannot update the data.",
                "error_code": "2025-11-02T22:09:44.047",   # optional
                "kind": "update",                          # optional
            }
        Never includes the original exception or raw store messages beyond `detail`.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["error_code"] = self.error_code
        if self.kind is not None:
            payload["kind"] = self.kind.value
        return payload

    def http_status(self) -> int:
        """
        Return the HTTP status code that should accompany this error (400 when the kind is unknown).
        """
        return self.KIND_TO_STATUS.get(self.kind, 400)


class SaveChangesError(PersistenceError):
    """
    Raised when a commit fails with a validation or update failure.

    Carries exactly one message: the clarified one when translation succeeded, otherwise
    the basic `Error code <ts>. Cannot ... the data.` message. The original exception is
    chained as `__cause__`.
    """

    def __init__(self, message: str, *, error_code: str, kind: FailureKind, clarified: bool = False):
        super().__init__(message, error_code=error_code, kind=kind)
        self.clarified = clarified


__all__ = [
    "PersistenceError",
    "SaveChangesError",
]
