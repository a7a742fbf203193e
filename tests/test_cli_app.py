"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Tests for the command-line application.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

import pytest
from fakes import DummyResponse, FakeHistory, SequenceSession

from template_registrar import CLIApp as cli_module
from template_registrar.clients import registration_client
from template_registrar.config import DOCUMENT_SERVICE_URLS
from template_registrar.CLIApp import CLIApp, build_arg_parser, main

CHANGE = [
    "src/templates/property-brochure/v1.tsx",
    "src/templates/property-brochure/v2.tsx",
    "src/templates/cover-letter/v1.tsx",
]


def _parse_ndjson(text: str) -> list[dict[str, Any]]:
    lines = [line for line in text.strip().splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


def _install_session(
    monkeypatch: pytest.MonkeyPatch, responses: List[Any]
) -> SequenceSession:
    session = SequenceSession(responses)
    monkeypatch.setattr(
        registration_client.requests, "Session", lambda: session
    )
    return session


class RecordingChecksClient:
    reports: List[Any] = []

    def __init__(self, token: str) -> None:
        self.token = token

    def report(self, slug: str, report: Any) -> dict:
        RecordingChecksClient.reports.append((self.token, slug, report))
        return {}


@pytest.fixture
def checks(monkeypatch: pytest.MonkeyPatch) -> List[Any]:
    RecordingChecksClient.reports = []
    monkeypatch.setattr(cli_module, "ChecksClient", RecordingChecksClient)
    return RecordingChecksClient.reports


def test_register_outputs_one_line_per_template(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    session = _install_session(
        monkeypatch,
        [DummyResponse(201, {"templateId": "t-9"}), DummyResponse(201, {})],
    )
    history = FakeHistory(depth=1, added={"HEAD": CHANGE})
    app = CLIApp(tmp_path, history=history)  # type: ignore[arg-type]

    exit_code = app.register(branch="develop")
    records = _parse_ndjson(capsys.readouterr().out)

    assert exit_code == 0
    assert records == [
        {
            "code": "property-brochure",
            "version": "v2",
            "status": "registered",
            "templateId": "t-9",
        },
        {"code": "cover-letter", "version": "v1", "status": "registered"},
        {
            "summary": "success",
            "environment": "dev",
            "registered": 2,
            "failed": 0,
            "repo": "acme/templates",
        },
    ]
    assert session.calls[0]["url"] == (
        f"{DOCUMENT_SERVICE_URLS['dev']}/api/templates/register"
    )


def test_register_uses_branch_from_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("TAG_NAME", "v1.4.0")
    monkeypatch.setenv("DOCUMENT_SERVICE_URL_PROD", "https://docs.example")
    session = _install_session(monkeypatch, [DummyResponse(201, {})])
    history = FakeHistory(depth=1, added={"HEAD": CHANGE[:1]})

    exit_code = CLIApp(tmp_path, history=history).register()  # type: ignore[arg-type]

    assert exit_code == 0
    assert session.calls[0]["url"] == (
        "https://docs.example/api/templates/register"
    )
    summary = _parse_ndjson(capsys.readouterr().out)[-1]
    assert summary["environment"] == "prod"


def test_unrouted_branch_is_a_no_op(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    history = FakeHistory(depth=1, added={"HEAD": CHANGE})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        branch="feature/new-layout"
    )

    assert exit_code == 0
    assert "nothing to register" in capsys.readouterr().out
    assert history.calls == []


def test_missing_branch_is_a_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = CLIApp(tmp_path, history=FakeHistory()).register()  # type: ignore[arg-type]

    assert exit_code == 1
    assert "branch" in capsys.readouterr().err


def test_unknown_environment_fails(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = CLIApp(tmp_path, history=FakeHistory()).register(  # type: ignore[arg-type]
        environment="qa"
    )

    assert exit_code == 1
    assert "Unknown environment 'qa'" in capsys.readouterr().err


def test_soft_failure_exits_degraded(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _install_session(
        monkeypatch, [DummyResponse(409, {}), DummyResponse(201, {})]
    )
    history = FakeHistory(depth=1, added={"HEAD": CHANGE})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        environment="staging"
    )
    records = _parse_ndjson(capsys.readouterr().out)

    assert exit_code == 2
    assert records[0]["status"] == "failed"
    assert "409" in records[0]["error"]
    assert records[-1]["summary"] == "degraded"
    assert records[-1]["failed"] == 1


def test_hard_failure_exits_with_error(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("TEMPLATE_FAILURE_POLICY", "hard")
    session = _install_session(
        monkeypatch, [DummyResponse(500, {}), DummyResponse(201, {})]
    )
    history = FakeHistory(depth=1, added={"HEAD": CHANGE})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        environment="dev"
    )

    assert exit_code == 1
    assert len(session.calls) == 1
    assert "Registration failed for property-brochure:v2" in (
        capsys.readouterr().err
    )


def test_policy_argument_overrides_environment(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("TEMPLATE_FAILURE_POLICY", "hard")
    session = _install_session(
        monkeypatch, [DummyResponse(500, {}), DummyResponse(201, {})]
    )
    history = FakeHistory(depth=1, added={"HEAD": CHANGE})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        environment="dev", policy="soft"
    )

    assert exit_code == 2
    assert len(session.calls) == 2


def test_dry_run_lists_pending_templates(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    session = _install_session(monkeypatch, [])
    history = FakeHistory(depth=1, added={"HEAD": CHANGE})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        environment="dev", dry_run=True
    )
    records = _parse_ndjson(capsys.readouterr().out)

    assert exit_code == 0
    assert session.calls == []
    assert records[0] == {
        "code": "property-brochure",
        "version": "v2",
        "status": "pending",
        "path": "src/templates/property-brochure/v2.tsx",
    }
    assert records[-1]["summary"] == "no_op"


def test_report_check_posts_run_result(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    checks: List[Any],
) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_example")
    monkeypatch.setenv("BUILD_URL", "https://ci.example/job/1")
    _install_session(monkeypatch, [DummyResponse(201, {})])
    history = FakeHistory(depth=1, added={"HEAD": CHANGE[:1]})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        environment="dev", report_check=True
    )

    assert exit_code == 0
    assert len(checks) == 1
    token, slug, report = checks[0]
    assert (token, slug) == ("ghp_example", "acme/templates")
    assert report.conclusion == "success"
    assert report.details_url == "https://ci.example/job/1"


def test_report_check_on_hard_failure(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    checks: List[Any],
) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_example")
    _install_session(monkeypatch, [DummyResponse(500, {})])
    history = FakeHistory(depth=1, added={"HEAD": CHANGE[:1]})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        environment="dev", policy="hard", report_check=True
    )

    assert exit_code == 1
    assert checks[0][2].conclusion == "failure"


def test_report_check_skipped_without_token(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    checks: List[Any],
) -> None:
    _install_session(monkeypatch, [DummyResponse(201, {})])
    history = FakeHistory(depth=1, added={"HEAD": CHANGE[:1]})

    exit_code = CLIApp(tmp_path, history=history).register(  # type: ignore[arg-type]
        environment="dev", report_check=True
    )

    assert exit_code == 0
    assert checks == []


def test_add_scaffolds_template(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "src" / "templates").mkdir(parents=True)

    exit_code = CLIApp(tmp_path, history=FakeHistory()).add(  # type: ignore[arg-type]
        "letter", 1
    )

    assert exit_code == 0
    assert (tmp_path / "src/templates/letter/v1.tsx").exists()
    assert "Added letter:v1" in capsys.readouterr().out


def test_add_existing_version_lists_templates(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "src" / "templates" / "letter").mkdir(parents=True)
    (tmp_path / "src" / "templates" / "letter" / "v1.tsx").write_text("x")
    app = CLIApp(tmp_path, history=FakeHistory())  # type: ignore[arg-type]

    exit_code = app.add("letter", 1)
    err = capsys.readouterr().err

    assert exit_code == 1
    assert "already exists" in err
    assert "Available templates:" in err
    assert "  letter" in err


def test_main_runs_add_command(tmp_path: Path) -> None:
    (tmp_path / "src" / "templates").mkdir(parents=True)

    exit_code = main(["--repo", str(tmp_path), "add", "invoice", "2"])

    assert exit_code == 0
    assert (tmp_path / "src/templates/invoice/v2.fixtures.json").exists()


def test_main_rejects_invalid_policy(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("TEMPLATE_FAILURE_POLICY", "sometimes")

    with pytest.raises(SystemExit) as excinfo:
        main(["--repo", str(tmp_path), "register", "--environment", "dev"])

    assert excinfo.value.code == 1
    assert "Unknown failure policy" in capsys.readouterr().err


def test_build_arg_parser_register_options() -> None:
    parser = build_arg_parser()
    namespace = parser.parse_args(
        ["register", "--branch", "main", "--policy", "hard", "--dry-run"]
    )

    assert namespace.command == "register"
    assert namespace.branch == "main"
    assert namespace.policy == "hard"
    assert namespace.dry_run is True
    assert namespace.repo == Path(".")


def test_build_arg_parser_branch_and_environment_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args(
            ["register", "--branch", "main", "--environment", "dev"]
        )
