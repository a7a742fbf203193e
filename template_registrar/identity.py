"""Derive the repository identity sent with each registration."""

from __future__ import annotations

import logging
import re
from typing import Optional, Protocol

from template_registrar.config import DEFAULT_REMOTE_NAME
from template_registrar.errors import HistoryUnavailable
from template_registrar.utils.env import fallback_repo_identity

_LOGGER = logging.getLogger(__name__)

# https://host/owner/repo(.git), ssh://git@host/owner/repo, git@host:owner/repo
_REMOTE_PATTERN = re.compile(
    r"^(?:[a-z+]+://(?:[^@/]+@)?[^/]+/|[^@/]+@[^:/]+:)"
    r"(?P<path>[^?#]+?)(?:\.git)?/?$"
)


class _RemoteLookup(Protocol):
    def remote_url(self, name: str = "origin") -> Optional[str]: ...


def parse_repo_slug(remote_url: str) -> Optional[str]:
    """Return ``owner/repo`` for a remote URL, ``None`` if unrecognised."""
    match = _REMOTE_PATTERN.match(remote_url.strip())
    if match is None:
        return None
    segments = [
        segment for segment in match.group("path").split("/") if segment
    ]
    if len(segments) < 2:
        return None
    return "/".join(segments[-2:])


def resolve_repo_identity(
    history: _RemoteLookup,
    *,
    remote: str = DEFAULT_REMOTE_NAME,
) -> str:
    """Prefer the git remote; fall back to the configured literal."""
    try:
        remote_url = history.remote_url(remote)
    except HistoryUnavailable as error:
        _LOGGER.info("Remote %s unavailable: %s", remote, error)
        remote_url = None

    if remote_url:
        slug = parse_repo_slug(remote_url)
        if slug:
            return slug
        _LOGGER.warning("Unrecognised remote URL %s", remote_url)

    identity = fallback_repo_identity()
    _LOGGER.info("Using fallback repository identity %s", identity)
    return identity
