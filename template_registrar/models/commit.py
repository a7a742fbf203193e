"""Commit metadata captured from the tip of history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class CommitMetadata:
    """Identifier, message and ISO-8601 timestamp of a commit."""

    hash: str
    message: str
    timestamp: str

    def __post_init__(self) -> None:
        if not self.hash:
            raise ValueError("Commit hash cannot be empty")

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def as_payload(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "message": self.message,
            "timestamp": self.timestamp,
        }
