"""CLI wiring that registers new template versions and scaffolds new ones."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .clients.checks_client import CheckReport, ChecksClient
from .errors import (HistoryUnavailable, RegistrarError, RegistrationFailure,
                     RoutingError, ScaffoldError)
from .identity import parse_repo_slug
from .logging_config import configure_logging
from .models.environment import EnvironmentConfig
from .models.registration import FailurePolicy, RunStatus
from .pipeline import PipelineResult, RegistrationPipeline
from .results import (ResultsFormatter, build_check_report,
                      build_failure_check_report, to_ndjson_line)
from .routing import EnvironmentRouter
from .scaffold import add_template_version, list_templates
from .utils import env
from .vcs.git_history import GitHistory

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_DEGRADED = 2


class CLIApp:
    """Command-line entry point for the template registrar."""

    def __init__(
        self,
        repo_root: Path,
        *,
        router: Optional[EnvironmentRouter] = None,
        history: Optional[GitHistory] = None,
    ) -> None:
        self._repo_root = Path(repo_root)
        self._router = router
        self._history = history or GitHistory(self._repo_root)
        self._formatter = ResultsFormatter()

    def register(
        self,
        *,
        branch: Optional[str] = None,
        environment: Optional[str] = None,
        endpoint: Optional[str] = None,
        policy: Optional[str] = None,
        commit: Optional[str] = None,
        dry_run: bool = False,
        report_check: bool = False,
    ) -> int:
        """Run the registration pipeline and emit NDJSON to stdout."""
        try:
            target_env = self._select_environment(
                branch, environment, endpoint
            )
        except RoutingError as error:
            print(str(error), file=sys.stderr)
            return EXIT_FAILED

        if target_env is None:
            print(
                "No environment configured for this branch; "
                "nothing to register."
            )
            return EXIT_OK

        failure_policy = (
            FailurePolicy.parse(policy) if policy else env.failure_policy()
        )
        pipeline = RegistrationPipeline(
            self._history,
            target_env,
            policy=failure_policy,
            external_ref=commit or env.external_commit_ref(),
            labels=env.registration_labels(),
            dry_run=dry_run,
        )

        try:
            result = pipeline.run()
        except RegistrationFailure as error:
            print(str(error), file=sys.stderr)
            if report_check:
                self._report_failure(str(error), target_env)
            return EXIT_FAILED
        except HistoryUnavailable as error:
            print(f"Unable to read git history: {error}", file=sys.stderr)
            return EXIT_FAILED

        self._emit(result, dry_run=dry_run)
        if report_check and not dry_run:
            self._report(result)

        if result.run.status is RunStatus.DEGRADED:
            return EXIT_DEGRADED
        return EXIT_OK

    def add(
        self,
        name: str,
        version: int,
        *,
        commit: bool = False,
        push: bool = False,
    ) -> int:
        """Scaffold a new template version, optionally committing it."""
        try:
            scaffolded = add_template_version(
                self._repo_root,
                name,
                version,
                commit=commit,
                push=push,
                history=self._history,
            )
        except ScaffoldError as error:
            print(f"Error: {error}", file=sys.stderr)
            existing = list_templates(self._repo_root)
            if existing:
                print("Available templates:", file=sys.stderr)
                for template in existing:
                    print(f"  {template}", file=sys.stderr)
            return EXIT_FAILED

        print(f"Template: {scaffolded.template_path}")
        print(f"Fixtures: {scaffolded.fixtures_path}")
        print(f"Added {scaffolded.code}:{scaffolded.version}")
        return EXIT_OK

    def _select_environment(
        self,
        branch: Optional[str],
        environment: Optional[str],
        endpoint: Optional[str],
    ) -> Optional[EnvironmentConfig]:
        if endpoint:
            return EnvironmentConfig(
                short_name=environment or "custom",
                endpoint_url=endpoint,
            )

        router = self._router or EnvironmentRouter()
        if environment:
            return router.by_name(environment)

        resolved_branch = branch or env.branch_name()
        if not resolved_branch:
            raise RoutingError(
                "A branch, environment or endpoint is required."
            )
        try:
            return router.for_branch(resolved_branch)
        except RoutingError as error:
            logger.info("%s", error)
            return None

    def _emit(self, result: PipelineResult, *, dry_run: bool) -> None:
        if dry_run:
            records = self._formatter.format_artifacts(result.artifacts)
        else:
            records = self._formatter.format_outcomes(result.run)
        for record in records:
            print(to_ndjson_line(record))

        summary = self._formatter.format_summary(
            result.run,
            environment=result.environment.short_name,
            repo_identity=result.repo_identity,
        )
        print(to_ndjson_line(summary))

    def _report(self, result: PipelineResult) -> None:
        commit = result.commit
        if commit is None:
            try:
                commit = self._history.commit_metadata()
            except HistoryUnavailable as error:
                logger.warning("Skipping check report: %s", error)
                return

        report = build_check_report(
            result.run,
            head_sha=commit.hash,
            environment=result.environment.short_name,
            details_url=env.build_url(),
        )
        self._send_check(report)

    def _report_failure(
        self, message: str, environment: EnvironmentConfig
    ) -> None:
        try:
            commit = self._history.commit_metadata()
        except HistoryUnavailable as error:
            logger.warning("Skipping check report: %s", error)
            return

        report = build_failure_check_report(
            message,
            head_sha=commit.hash,
            environment=environment.short_name,
            details_url=env.build_url(),
        )
        self._send_check(report)

    def _send_check(self, report: CheckReport) -> None:
        token = env.github_token()
        if not token:
            logger.warning("GITHUB_TOKEN is not set; skipping check report")
            return

        try:
            remote_url = self._history.remote_url()
        except HistoryUnavailable as error:
            logger.warning("Skipping check report: %s", error)
            return
        slug = parse_repo_slug(remote_url) if remote_url else None
        if slug is None:
            logger.warning("Unable to derive GitHub repository for checks")
            return

        try:
            ChecksClient(token).report(slug, report)
        except (RuntimeError, OSError) as error:
            # Status reporting never changes the registration result.
            logger.warning("Failed to report check run: %s", error)


def build_arg_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(
        prog="template-registrar",
        description=(
            "Register newly added template versions with the document "
            "service."
        ),
    )
    argument_parser.add_argument(
        "--repo",
        type=Path,
        default=Path("."),
        help="Path to the templates git repository (default: cwd).",
    )
    subcommands = argument_parser.add_subparsers(
        dest="command", required=True
    )

    register = subcommands.add_parser(
        "register",
        help="Register templates added by the latest commit.",
    )
    target = register.add_mutually_exclusive_group()
    target.add_argument("--branch", help="Branch or tag used for routing.")
    target.add_argument(
        "--environment",
        help="Environment short name (dev, staging, prod).",
    )
    register.add_argument(
        "--endpoint",
        help="Document service URL, overriding environment routing.",
    )
    register.add_argument(
        "--policy",
        choices=[policy.value for policy in FailurePolicy],
        help="Failure policy (default: TEMPLATE_FAILURE_POLICY or soft).",
    )
    register.add_argument(
        "--commit",
        help="Commit to inspect when the local history is unusable.",
    )
    register.add_argument(
        "--dry-run",
        action="store_true",
        help="List the templates that would be registered.",
    )
    register.add_argument(
        "--report-check",
        action="store_true",
        help="Report the result as a GitHub check run.",
    )

    add = subcommands.add_parser(
        "add", help="Scaffold a new template version."
    )
    add.add_argument("name", help="Template code, e.g. property-brochure.")
    add.add_argument("version", type=int, help="Version number, e.g. 3.")
    add.add_argument(
        "--commit",
        action="store_true",
        help="Commit the new files.",
    )
    add.add_argument(
        "--push",
        action="store_true",
        help="Commit and push the new files to origin.",
    )
    return argument_parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    env.validate_runtime_environment()
    argument_parser = build_arg_parser()
    parsed_args = argument_parser.parse_args(argv)

    app = CLIApp(parsed_args.repo)
    try:
        if parsed_args.command == "add":
            return app.add(
                parsed_args.name,
                parsed_args.version,
                commit=parsed_args.commit,
                push=parsed_args.push,
            )
        return app.register(
            branch=parsed_args.branch,
            environment=parsed_args.environment,
            endpoint=parsed_args.endpoint,
            policy=parsed_args.policy,
            commit=parsed_args.commit,
            dry_run=parsed_args.dry_run,
            report_check=parsed_args.report_check,
        )
    except (RegistrarError, ValueError) as error:
        print(f"Error: {error}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
