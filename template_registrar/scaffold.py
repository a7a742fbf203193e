"""Create new template versions in a templates repository."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Union

from template_registrar.config import DEFAULT_PUSH_BRANCH, TEMPLATES_ROOT
from template_registrar.errors import HistoryUnavailable, ScaffoldError
from template_registrar.models.templates import validate_template_code
from template_registrar.vcs.git_history import GitHistory

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScaffoldedVersion:
    """Files written for one new template version."""

    code: str
    version: str
    template_path: Path
    fixtures_path: Path
    commit_message: str


def list_templates(repo_root: Union[Path, str]) -> List[str]:
    """Names of the template directories under ``src/templates``."""
    templates_dir = Path(repo_root) / TEMPLATES_ROOT
    if not templates_dir.is_dir():
        return []
    return sorted(
        entry.name for entry in templates_dir.iterdir() if entry.is_dir()
    )


def add_template_version(
    repo_root: Union[Path, str],
    name: str,
    version_number: int,
    *,
    commit: bool = False,
    push: bool = False,
    branch: str = DEFAULT_PUSH_BRANCH,
    history: Optional[GitHistory] = None,
    now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
) -> ScaffoldedVersion:
    """Write ``v<N>.tsx`` and its fixtures, optionally committing them.

    Existing versions are never overwritten. ``push`` implies ``commit``.
    """
    try:
        validate_template_code(name)
    except ValueError as error:
        raise ScaffoldError(str(error)) from error
    if version_number < 0:
        raise ScaffoldError("Version number must be non-negative")

    root = Path(repo_root)
    templates_dir = root / TEMPLATES_ROOT
    if not templates_dir.is_dir():
        raise ScaffoldError(
            f"{TEMPLATES_ROOT} directory not found under {root}"
        )

    version = f"v{version_number}"
    template_dir = templates_dir / name
    template_path = template_dir / f"{version}.tsx"
    fixtures_path = template_dir / f"{version}.fixtures.json"
    if template_path.exists():
        raise ScaffoldError(f"{template_path} already exists")

    if not template_dir.exists():
        _LOGGER.info("Creating new template directory %s", template_dir)
        template_dir.mkdir(parents=True)

    stamp = now().isoformat()
    template_path.write_text(
        f"{name[:1].upper()}{name[1:]} Template {version} - {stamp}\n",
        encoding="utf-8",
    )
    fixtures = {
        "templateName": name,
        "version": version,
        "testData": f"Generated on {stamp}",
        "sampleValue": f"test-{version_number}",
    }
    fixtures_path.write_text(
        json.dumps(fixtures, indent=2) + "\n", encoding="utf-8"
    )

    scaffolded = ScaffoldedVersion(
        code=name,
        version=version,
        template_path=template_path,
        fixtures_path=fixtures_path,
        commit_message=f"Add {name} {version}",
    )

    if commit or push:
        git = history or GitHistory(root)
        _commit(git, root, scaffolded)
        if push:
            _push(git, branch)

    return scaffolded


def _commit(
    git: GitHistory, root: Path, scaffolded: ScaffoldedVersion
) -> None:
    files = [
        str(scaffolded.template_path.relative_to(root)),
        str(scaffolded.fixtures_path.relative_to(root)),
    ]
    try:
        git.run(["add", "--", *files])
        git.run(["commit", "-m", scaffolded.commit_message, "--", *files])
    except HistoryUnavailable as error:
        raise ScaffoldError(f"Unable to commit template: {error}") from error
    _LOGGER.info("Committed %s", scaffolded.commit_message)


def _push(git: GitHistory, branch: str) -> None:
    try:
        git.run(["push", "origin", branch])
    except HistoryUnavailable as error:
        raise ScaffoldError(f"Unable to push template: {error}") from error
    _LOGGER.info("Pushed to origin %s", branch)
