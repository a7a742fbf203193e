"""Error taxonomy shared by the registration pipeline."""

from __future__ import annotations

from typing import Optional


class RegistrarError(RuntimeError):
    """Base class for template registrar failures."""


class HistoryUnavailable(RegistrarError):
    """Raised when a git query cannot be executed."""


class ParseError(RegistrarError, ValueError):
    """Raised when a version label is not ``v`` followed by digits."""


class RoutingError(RegistrarError):
    """Raised when no environment configuration matches a branch."""


class ScaffoldError(RegistrarError):
    """Raised when a template version cannot be scaffolded."""


class RegistrationFailure(RegistrarError):
    """Raised under the hard failure policy for a failed registration."""

    def __init__(
        self,
        code: str,
        cause: str,
        *,
        version: Optional[str] = None,
    ) -> None:
        label = f"{code}:{version}" if version else code
        super().__init__(f"Registration failed for {label}: {cause}")
        self.code = code
        self.version = version
        self.cause = cause
