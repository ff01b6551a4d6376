"""Common shape for lab services.

A service is constructed with its collaborators (GitLab API, git backend) and
called with a validated request model. It returns a typed outcome or raises a
``ServiceFailure``; the CLI is the only place failures become exit codes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

R = TypeVar("R")
T = TypeVar("T")


class BaseService(ABC, Generic[R, T]):
    """Callable service taking a request of type ``R`` and returning ``T``."""

    def __call__(self, request: R) -> T:
        return self._run(request)

    @abstractmethod
    def _run(self, request: R) -> T:
        """Do the work; raise ``ServiceFailure`` for expected failures."""
