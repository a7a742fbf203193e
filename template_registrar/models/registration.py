"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Models describing registration targets and their outcomes.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .environment import validate_endpoint_url


class FailurePolicy(str, Enum):
    """How a failed registration affects the rest of the batch."""

    SOFT = "soft"
    HARD = "hard"

    @classmethod
    def parse(cls, value: str) -> "FailurePolicy":
        normalized = value.strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ValueError(
            f"Unknown failure policy '{value}'. Expected 'soft' or 'hard'."
        )


class RunStatus(str, Enum):
    """Aggregate result of one pipeline invocation."""

    SUCCESS = "success"
    NO_OP = "no_op"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class RegistrationTarget:
    """Where and as whom templates are registered."""

    endpoint_url: str
    repo_identity: str
    labels: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        validate_endpoint_url(self.endpoint_url)
        if not self.repo_identity:
            raise ValueError("Repository identity cannot be empty")


@dataclass(frozen=True)
class RegistrationOutcome:
    """Success or failure of registering one resolved template."""

    code: str
    version: str
    succeeded: bool
    server_assigned_id: Optional[str] = None
    cause: Optional[str] = None

    @classmethod
    def success(
        cls,
        code: str,
        version: str,
        server_assigned_id: Optional[str] = None,
    ) -> "RegistrationOutcome":
        return cls(
            code=code,
            version=version,
            succeeded=True,
            server_assigned_id=server_assigned_id,
        )

    @classmethod
    def failure(
        cls, code: str, version: str, cause: str
    ) -> "RegistrationOutcome":
        return cls(code=code, version=version, succeeded=False, cause=cause)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RunOutcome:
    """Per-template outcomes plus the status the caller should report."""

    outcomes: Tuple[RegistrationOutcome, ...] = field(default_factory=tuple)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failure_count(self) -> int:
        return sum(1 for outcome in self.outcomes if not outcome.succeeded)

    @property
    def status(self) -> RunStatus:
        if not self.outcomes:
            return RunStatus.NO_OP
        if self.failure_count:
            return RunStatus.DEGRADED
        return RunStatus.SUCCESS

    def summary(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "registered": self.success_count,
            "failed": self.failure_count,
        }
