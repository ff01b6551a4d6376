"""Expected failures raised by lab services and adapters.

Each failure carries a machine-readable ``code``, a message for the user and
an optional recovery hint. Unexpected errors are left as ordinary exceptions.
"""

from __future__ import annotations

from typing import Literal

ServiceFailureCode = Literal[
    "validation_failed",
    "dependency_missing",
    "not_found",
    "conflict",
    "upstream_error",
]


class ServiceFailure(Exception):
    """Base class for failures the CLI reports as "error: <message>"."""

    def __init__(
        self,
        code: ServiceFailureCode,
        message: str,
        *,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.recovery_hint = recovery_hint


class ValidationFailedError(ServiceFailure):
    """Validation failed (invalid arguments or configuration)."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("validation_failed", message, recovery_hint=recovery_hint)


class DependencyMissingError(ServiceFailure):
    """Required dependency (token, git executable) is missing or unavailable."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("dependency_missing", message, recovery_hint=recovery_hint)


class NotFoundError(ServiceFailure):
    """A requested record (merge request, project) does not exist."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("not_found", message, recovery_hint=recovery_hint)


class ConflictError(ServiceFailure):
    """Local state blocks the operation (e.g. branch already exists)."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("conflict", message, recovery_hint=recovery_hint)


class UpstreamError(ServiceFailure):
    """The GitLab API or a git command failed."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("upstream_error", message, recovery_hint=recovery_hint)
