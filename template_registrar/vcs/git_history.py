"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Thin wrapper around the ``git`` executable for history queries.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from template_registrar.errors import HistoryUnavailable
from template_registrar.models.commit import CommitMetadata

_LOGGER = logging.getLogger(__name__)

GIT_BIN = "git"
DEFAULT_TIMEOUT_SECONDS = 60.0

# NUL never appears in commit ids, dates, messages or paths.
_FIELD_SEPARATOR = "\x00"


class GitHistory:
    """Answer the handful of history questions the registrar needs.

    Every query raises :class:`HistoryUnavailable` when git cannot be run or
    exits non-zero. An empty result is a successful answer, not an error.
    """

    def __init__(
        self,
        repo_root: Union[Path, str] = ".",
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._repo_root = Path(repo_root)
        self._timeout = timeout

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    def added_between(self, base: str, tip: str) -> List[str]:
        """Paths with status ``A`` between ``base`` and ``tip``.

        Renames are detected explicitly so a moved file is reported as
        ``R`` whatever the local ``diff.renames`` setting is.
        """
        output = self._run(
            [
                "diff",
                "--name-only",
                "-z",
                "--find-renames",
                "--diff-filter=A",
                base,
                tip,
            ]
        )
        return _split_paths(output)

    def added_in(self, commit: str) -> List[str]:
        """Paths added by ``commit`` itself, even when it has no parent.

        A file moved by ``commit`` is a rename, not an addition.
        """
        output = self._run(
            [
                "diff-tree",
                "--root",
                "-r",
                "--no-commit-id",
                "--name-only",
                "-z",
                "--find-renames",
                "--diff-filter=A",
                commit,
            ]
        )
        return _split_paths(output)

    def commit_count(self, ref: str = "HEAD") -> int:
        """Number of commits reachable from ``ref`` in this clone."""
        output = self._run(["rev-list", "--count", ref]).strip()
        try:
            return int(output)
        except ValueError as error:
            raise HistoryUnavailable(
                f"Unexpected rev-list output: {output!r}"
            ) from error

    def commit_metadata(self, ref: str = "HEAD") -> CommitMetadata:
        """Full hash, committer timestamp and message of ``ref``."""
        output = self._run(
            ["log", "-1", "--format=%H%x00%cI%x00%B", ref]
        )
        parts = output.split(_FIELD_SEPARATOR, 2)
        if len(parts) != 3:
            raise HistoryUnavailable(
                f"Unexpected git log output for {ref}: {output!r}"
            )
        commit_hash, timestamp, message = parts
        return CommitMetadata(
            hash=commit_hash.strip(),
            message=message.strip("\n"),
            timestamp=timestamp.strip(),
        )

    def remote_url(self, name: str = "origin") -> Optional[str]:
        """URL configured for remote ``name``, ``None`` when it is blank."""
        output = self._run(["config", "--get", f"remote.{name}.url"]).strip()
        return output or None

    def run(self, args: Sequence[str]) -> str:
        """Run an arbitrary git subcommand inside the repository."""
        return self._run(args)

    def _run(self, args: Sequence[str]) -> str:
        command = [GIT_BIN, "-c", "core.quotepath=off", *args]
        _LOGGER.debug("Running %s in %s", " ".join(command), self._repo_root)
        try:
            completed = subprocess.run(
                command,
                cwd=str(self._repo_root),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self._timeout,
            )
        except (OSError, subprocess.SubprocessError) as error:
            raise HistoryUnavailable(
                f"Unable to run {' '.join(command)}: {error}"
            ) from error

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            raise HistoryUnavailable(
                f"{' '.join(command)} exited with {completed.returncode}: "
                f"{stderr}"
            )
        return completed.stdout or ""


def _split_paths(output: str) -> List[str]:
    """Split NUL-separated ``-z`` output without trimming paths."""
    return [path for path in output.split(_FIELD_SEPARATOR) if path]
