"""Exception types raised by diagnav."""

from __future__ import annotations


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that must be unreachable.

    Raising this exception signals a broken internal contract, not a user
    error. The keyword environment passed to ``never()`` is attached for
    diagnostics.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env = dict(env or {})

    @property
    def env_payload(self) -> dict[str, str]:
        return {str(key): repr(value) for key, value in sorted(self.env.items())}


class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""


class DocumentOpenError(RuntimeError):
    """The editor host could not open or focus a document."""

    def __init__(self, uri: str, detail: str = ""):
        message = f"could not open document: {uri}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.uri = uri
