"""Named deployment environment a branch routes to."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse


def validate_endpoint_url(url: str) -> str:
    """Minimal absolute URL validation for document service endpoints."""
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(
            f"Endpoint URL '{url}' is not a valid absolute http(s) URL"
        )
    return url


@dataclass(frozen=True)
class EnvironmentConfig:
    """Document service location for one environment."""

    short_name: str
    endpoint_url: str

    def __post_init__(self) -> None:
        if not self.short_name:
            raise ValueError("Environment short name cannot be empty")
        validate_endpoint_url(self.endpoint_url)
