"""Report the run result as a GitHub check run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, cast

import requests  # type: ignore[import]

from template_registrar.clients.base_client import BaseClient, preview_text
from template_registrar.config import GITHUB_API_URL


class _SessionWithPost(Protocol):
    def post(
        self,
        url: str,
        json: Any,
        timeout: float,
        headers: Optional[dict[str, str]] = None,
    ) -> Any: ...


@dataclass(frozen=True)
class CheckReport:
    """Fields of a completed check run."""

    name: str
    head_sha: str
    title: str
    summary: str
    conclusion: str
    details_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.conclusion not in {"success", "failure"}:
            raise ValueError(
                f"Check conclusion '{self.conclusion}' is not supported"
            )

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "head_sha": self.head_sha,
            "status": "completed",
            "conclusion": self.conclusion,
            "output": {"title": self.title, "summary": self.summary},
        }
        if self.details_url:
            payload["details_url"] = self.details_url
        return payload


class ChecksClient(BaseClient[Dict[str, Any]]):
    """Minimal wrapper around the GitHub check-runs API."""

    def __init__(
        self,
        token: str,
        *,
        session: Optional[_SessionWithPost] = None,
        logger: Optional[logging.Logger] = None,
        api_url: str = GITHUB_API_URL,
    ) -> None:
        super().__init__(logger=logger)
        if not token:
            raise ValueError("A GitHub token is required to report checks.")
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._session: _SessionWithPost = cast(
            _SessionWithPost, session or requests.Session()
        )

    def report(self, repo_slug: str, report: CheckReport) -> Dict[str, Any]:
        """Create a completed check run on ``owner/repo``."""
        parts = repo_slug.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Invalid GitHub repository slug: {repo_slug}")

        owner, repo = parts
        url = f"{self._api_url}/repos/{owner}/{repo}/check-runs"

        def _operation() -> Dict[str, Any]:
            response = self._session.post(
                url,
                json=report.as_payload(),
                timeout=10,
                headers={
                    "Authorization": f"token {self._token}",
                    "Accept": "application/vnd.github+json",
                },
            )
            if response.status_code != 201:
                raise RuntimeError(
                    "Failed to create check run: "
                    f"{response.status_code} "
                    f"{preview_text(getattr(response, 'text', ''))}"
                )
            return response.json()

        return self._execute_timed(
            _operation,
            name=f"github.check_run({repo_slug})",
        )
