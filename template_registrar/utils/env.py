from __future__ import annotations

"""Helpers for loading environment configuration."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Tuple, Union

from template_registrar.config import DEFAULT_REPO_IDENTITY
from template_registrar.models.registration import FailurePolicy

_ENV_LOADED = False

_LOGGER = logging.getLogger(__name__)

POLICY_ENV_KEY = "TEMPLATE_FAILURE_POLICY"
LABELS_ENV_KEY = "TEMPLATE_REGISTRATION_LABELS"
REPO_IDENTITY_ENV_KEY = "TEMPLATE_REPO_IDENTITY"
COMMIT_ENV_KEY = "GIT_COMMIT"


def load_dotenv(dotenv_path: Union[str, Path] = ".env") -> None:
    """Load environment variables from a simple ``.env`` file if present."""
    global _ENV_LOADED
    if _ENV_LOADED:
        return

    path = Path(dotenv_path)
    if path.exists():
        for line in path.read_text().splitlines():
            parsed = _parse_line(line)
            if parsed:
                key, value = parsed
                os.environ.setdefault(key, value)

    _ENV_LOADED = True


def _parse_line(line: str) -> Optional[Tuple[str, str]]:
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    if "=" not in stripped:
        return None

    key, value = stripped.split("=", 1)
    return (key.strip(), value.strip())


def _read(key: str) -> Optional[str]:
    load_dotenv()
    value = os.environ.get(key)
    if value is None or not value.strip():
        return None
    return value.strip()


def failure_policy() -> FailurePolicy:
    """Return the configured failure policy, ``soft`` when unset."""
    raw = _read(POLICY_ENV_KEY)
    if raw is None:
        return FailurePolicy.SOFT
    return FailurePolicy.parse(raw)


def registration_labels() -> Tuple[str, ...]:
    """Return the fixed labels attached to every registration payload."""
    raw = _read(LABELS_ENV_KEY)
    if raw is None:
        return ()
    return tuple(label.strip() for label in raw.split(",") if label.strip())


def fallback_repo_identity() -> str:
    """Literal repository identity used when the git remote is unknown."""
    return _read(REPO_IDENTITY_ENV_KEY) or DEFAULT_REPO_IDENTITY


def external_commit_ref() -> Optional[str]:
    """Commit id supplied by the CI job, e.g. Jenkins' ``GIT_COMMIT``."""
    return _read(COMMIT_ENV_KEY)


def branch_name() -> Optional[str]:
    """Branch or tag the CI job was triggered for."""
    return _read("BRANCH_NAME") or _read("TAG_NAME")


def endpoint_override(short_name: str) -> Optional[str]:
    """Document service URL configured for ``short_name``, if any."""
    return _read("DOCUMENT_SERVICE_URL") or _read(
        f"DOCUMENT_SERVICE_URL_{short_name.upper()}"
    )


def github_token() -> Optional[str]:
    return _read("GITHUB_TOKEN")


def build_url() -> Optional[str]:
    return _read("BUILD_URL")


def validate_runtime_environment() -> None:
    """Exit the process when required environment settings are invalid."""

    load_dotenv()

    def _fail(message: str) -> None:
        _LOGGER.error("Environment validation failed: %s", message)
        print(f"Environment validation failed: {message}", file=sys.stderr)
        raise SystemExit(1)

    try:
        failure_policy()
    except ValueError as error:
        _fail(str(error))

    log_path_raw = os.environ.get("LOG_FILE", "").strip()
    if not log_path_raw:
        return

    log_path = Path(log_path_raw)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(log_path, "a", encoding="utf-8"):
            pass
    except OSError as error:
        _fail(f"LOG_FILE is not writable: {error}")

    if not log_path.suffix:
        _LOGGER.warning(
            "LOG_FILE has no extension; continuing but consider using .log",
        )
