"""Domain model package exports."""

from .commit import CommitMetadata
from .environment import EnvironmentConfig, validate_endpoint_url
from .registration import (FailurePolicy, RegistrationOutcome,
                           RegistrationTarget, RunOutcome, RunStatus)
from .templates import (ArtifactVersionKey, ResolvedArtifact, Version,
                        validate_template_code)

__all__ = [
    "ArtifactVersionKey",
    "CommitMetadata",
    "EnvironmentConfig",
    "FailurePolicy",
    "RegistrationOutcome",
    "RegistrationTarget",
    "ResolvedArtifact",
    "RunOutcome",
    "RunStatus",
    "Version",
    "validate_endpoint_url",
    "validate_template_code",
]
