"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Wire change detection, selection and registration into one run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from template_registrar.changeset import ChangeSetResolver
from template_registrar.dispatcher import RegistrationDispatcher
from template_registrar.identity import resolve_repo_identity
from template_registrar.models.commit import CommitMetadata
from template_registrar.models.environment import EnvironmentConfig
from template_registrar.models.registration import (FailurePolicy,
                                                    RegistrationTarget,
                                                    RunOutcome)
from template_registrar.models.templates import ResolvedArtifact
from template_registrar.selector import ArtifactSelector
from template_registrar.vcs.git_history import GitHistory

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything a caller needs to report on a finished run."""

    run: RunOutcome
    environment: EnvironmentConfig
    artifacts: Tuple[ResolvedArtifact, ...] = ()
    commit: Optional[CommitMetadata] = None
    target: Optional[RegistrationTarget] = None

    @property
    def repo_identity(self) -> Optional[str]:
        return self.target.repo_identity if self.target else None


class RegistrationPipeline:
    """Register the highest new version of each template added by a change.

    Stages run strictly in sequence: resolve added paths, select one
    version per template code, then dispatch registrations.
    """

    def __init__(
        self,
        history: GitHistory,
        environment: EnvironmentConfig,
        *,
        policy: FailurePolicy = FailurePolicy.SOFT,
        external_ref: Optional[str] = None,
        labels: Sequence[str] = (),
        dry_run: bool = False,
        selector: Optional[ArtifactSelector] = None,
        dispatcher: Optional[RegistrationDispatcher] = None,
    ) -> None:
        self._history = history
        self._environment = environment
        self._external_ref = external_ref
        self._labels = tuple(labels)
        self._dry_run = dry_run
        self._selector = selector or ArtifactSelector()
        self._dispatcher = dispatcher or RegistrationDispatcher(policy=policy)

    def run(self) -> PipelineResult:
        resolver = ChangeSetResolver(
            self._history,
            external_ref=self._external_ref,
        )
        paths = resolver.resolve()
        artifacts = self._selector.select(paths)
        if not artifacts:
            _LOGGER.info("Nothing to register for this change")
            return PipelineResult(
                run=RunOutcome(outcomes=()),
                environment=self._environment,
            )

        commit = self._history.commit_metadata(
            resolver.resolved_ref or "HEAD"
        )
        target = RegistrationTarget(
            endpoint_url=self._environment.endpoint_url,
            repo_identity=resolve_repo_identity(self._history),
            labels=self._labels,
        )

        if self._dry_run:
            _LOGGER.info(
                "Dry run: skipping registration of %d template(s)",
                len(artifacts),
            )
            run = RunOutcome(outcomes=())
        else:
            run = self._dispatcher.dispatch(artifacts, commit, target)

        return PipelineResult(
            run=run,
            environment=self._environment,
            artifacts=tuple(artifacts),
            commit=commit,
            target=target,
        )
