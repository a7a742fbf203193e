"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Domain models for template versions discovered in git history.
"""

from __future__ import annotations

from dataclasses import dataclass, field

RESERVED_CODES = frozenset({".", ".."})


def validate_template_code(code: str) -> str:
    """Ensure template codes are non-empty single path segments."""
    if not code:
        raise ValueError("Template code cannot be empty")
    if "/" in code:
        raise ValueError(
            f"Template code '{code}' must not contain path separators"
        )
    if code in RESERVED_CODES:
        raise ValueError(f"Template code '{code}' is not a directory name")
    return code


@dataclass(frozen=True, order=True)
class Version:
    """Integer template version together with the label it was read from.

    Equality and ordering use ``number`` only, so ``v02`` equals ``v2``.
    """

    number: int
    label: str = field(compare=False)

    def __post_init__(self) -> None:
        if self.number < 0:
            raise ValueError("Version numbers must be non-negative")

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class ArtifactVersionKey:
    """A path that matched ``<prefix>/templates/<code>/v<N>.tsx``."""

    code: str
    version: Version
    source_path: str

    def __post_init__(self) -> None:
        validate_template_code(self.code)


@dataclass(frozen=True)
class ResolvedArtifact:
    """Highest version of one template code within a single change."""

    code: str
    version: Version
    source_path: str

    @classmethod
    def from_key(cls, key: ArtifactVersionKey) -> "ResolvedArtifact":
        return cls(
            code=key.code,
            version=key.version,
            source_path=key.source_path,
        )
