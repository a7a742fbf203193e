"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Dispatcher that registers resolved templates with the document service.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from template_registrar.clients.registration_client import RegistrationClient
from template_registrar.errors import RegistrationFailure
from template_registrar.models.commit import CommitMetadata
from template_registrar.models.registration import (FailurePolicy,
                                                    RegistrationOutcome,
                                                    RegistrationTarget,
                                                    RunOutcome)
from template_registrar.models.templates import ResolvedArtifact

_LOGGER = logging.getLogger(__name__)


class _RegistrationClientProtocol(Protocol):
    def register(self, payload: Dict[str, Any]) -> Optional[str]: ...


ClientFactory = Callable[[str], _RegistrationClientProtocol]


def build_payload(
    artifact: ResolvedArtifact,
    commit: CommitMetadata,
    target: RegistrationTarget,
) -> Dict[str, Any]:
    """Assemble the JSON body sent to the registration webhook."""
    payload: Dict[str, Any] = {
        "code": artifact.code,
        "version": str(artifact.version),
        "git": {
            "repo": target.repo_identity,
            "commit": commit.as_payload(),
        },
    }
    if target.labels:
        payload["labels"] = list(target.labels)
    return payload


class RegistrationDispatcher:
    """Register each resolved template with a single POST, in order.

    Under :attr:`FailurePolicy.SOFT` every template is attempted and failures
    are recorded. Under :attr:`FailurePolicy.HARD` the first failure is
    raised and the remaining templates are not attempted.
    """

    def __init__(
        self,
        *,
        policy: FailurePolicy = FailurePolicy.SOFT,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self._policy = policy
        self._client_factory: ClientFactory = (
            client_factory or RegistrationClient
        )

    @property
    def policy(self) -> FailurePolicy:
        return self._policy

    def dispatch(
        self,
        artifacts: Sequence[ResolvedArtifact],
        commit: CommitMetadata,
        target: RegistrationTarget,
    ) -> RunOutcome:
        if not artifacts:
            _LOGGER.info("No templates to register")
            return RunOutcome(outcomes=())

        client = self._client_factory(target.endpoint_url)
        outcomes: List[RegistrationOutcome] = []
        for artifact in artifacts:
            outcomes.append(self._register(client, artifact, commit, target))

        run = RunOutcome(outcomes=tuple(outcomes))
        _LOGGER.info(
            "Registration finished: %d registered, %d failed",
            run.success_count,
            run.failure_count,
        )
        return run

    def _register(
        self,
        client: _RegistrationClientProtocol,
        artifact: ResolvedArtifact,
        commit: CommitMetadata,
        target: RegistrationTarget,
    ) -> RegistrationOutcome:
        version = str(artifact.version)
        payload = build_payload(artifact, commit, target)
        _LOGGER.info(
            "Registering %s %s from %s",
            artifact.code,
            version,
            artifact.source_path,
        )
        try:
            template_id = client.register(payload)
        except RegistrationFailure as error:
            if self._policy is FailurePolicy.HARD:
                _LOGGER.error("Aborting batch: %s", error)
                raise
            _LOGGER.warning("%s", error)
            return RegistrationOutcome.failure(
                artifact.code, version, error.cause
            )

        _LOGGER.info(
            "Registered %s %s (templateId=%s)",
            artifact.code,
            version,
            template_id or "<none>",
        )
        return RegistrationOutcome.success(
            artifact.code, version, template_id
        )
