from __future__ import annotations

"""Utilities for turning registration outcomes into CLI and check output."""

import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

from template_registrar.clients.checks_client import CheckReport
from template_registrar.config import CHECK_RUN_NAME
from template_registrar.models.registration import RunOutcome, RunStatus
from template_registrar.models.templates import ResolvedArtifact

OUTPUT_FIELD_ORDER: Sequence[str] = (
    "code",
    "version",
    "status",
    "templateId",
    "error",
)


class ResultsFormatter:
    """Format resolved templates and outcomes into NDJSON rows."""

    def format_outcomes(self, run: RunOutcome) -> List[Dict[str, Any]]:
        formatted: List[Dict[str, Any]] = []
        for outcome in run.outcomes:
            record: Dict[str, Any] = {
                "code": outcome.code,
                "version": outcome.version,
                "status": "registered" if outcome.succeeded else "failed",
            }
            if outcome.server_assigned_id:
                record["templateId"] = outcome.server_assigned_id
            if outcome.cause:
                record["error"] = outcome.cause
            formatted.append(self._ordered(record))
        return formatted

    def format_artifacts(
        self, artifacts: Sequence[ResolvedArtifact]
    ) -> List[Dict[str, Any]]:
        return [
            self._ordered(
                {
                    "code": artifact.code,
                    "version": str(artifact.version),
                    "status": "pending",
                    "path": artifact.source_path,
                }
            )
            for artifact in artifacts
        ]

    def format_summary(
        self,
        run: RunOutcome,
        *,
        environment: str,
        repo_identity: Optional[str] = None,
    ) -> Dict[str, Any]:
        summary: Dict[str, Any] = {
            "summary": run.status.value,
            "environment": environment,
            "registered": run.success_count,
            "failed": run.failure_count,
        }
        if repo_identity:
            summary["repo"] = repo_identity
        return summary

    def _ordered(self, combined: Mapping[str, Any]) -> Dict[str, Any]:
        ordered: Dict[str, Any] = {}
        for field in OUTPUT_FIELD_ORDER:
            if field in combined:
                ordered[field] = combined[field]
        for key, value in combined.items():
            if key not in OUTPUT_FIELD_ORDER:
                ordered[key] = value
        return ordered


def to_ndjson_line(record: Mapping[str, Any]) -> str:
    """Serialize a record to a single compact JSON line."""
    return json.dumps(dict(record), separators=(",", ":"))


def build_check_report(
    run: RunOutcome,
    *,
    head_sha: str,
    environment: str,
    details_url: Optional[str] = None,
) -> CheckReport:
    """Translate a run into the check-run fields reported to GitHub."""
    if run.status is RunStatus.DEGRADED:
        conclusion = "failure"
        title = (
            f"{run.failure_count} template registration(s) failed "
            f"on {environment}"
        )
    elif run.status is RunStatus.NO_OP:
        conclusion = "success"
        title = "No new templates to register"
    else:
        conclusion = "success"
        title = (
            f"Registered {run.success_count} template(s) on {environment}"
        )

    lines = [
        f"- `{outcome.code}` {outcome.version}: "
        + ("registered" if outcome.succeeded else f"failed ({outcome.cause})")
        for outcome in run.outcomes
    ]
    summary = "\n".join(lines) if lines else "No added template versions."
    return CheckReport(
        name=CHECK_RUN_NAME,
        head_sha=head_sha,
        title=title,
        summary=summary,
        conclusion=conclusion,
        details_url=details_url,
    )


def build_failure_check_report(
    message: str,
    *,
    head_sha: str,
    environment: str,
    details_url: Optional[str] = None,
) -> CheckReport:
    """Check-run fields for a run aborted by a hard failure."""
    return CheckReport(
        name=CHECK_RUN_NAME,
        head_sha=head_sha,
        title=f"Template registration aborted on {environment}",
        summary=message,
        conclusion="failure",
        details_url=details_url,
    )
