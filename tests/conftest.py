"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Shared fixtures for the test suite.
"""

from __future__ import annotations

import pytest

from template_registrar import logging_config
from template_registrar.utils import env

_MANAGED_ENV_KEYS = (
    "BRANCH_NAME",
    "BUILD_URL",
    "DOCUMENT_SERVICE_URL",
    "DOCUMENT_SERVICE_URL_DEV",
    "DOCUMENT_SERVICE_URL_STAGING",
    "DOCUMENT_SERVICE_URL_PROD",
    "GITHUB_TOKEN",
    "GIT_COMMIT",
    "LOG_FILE",
    "TAG_NAME",
    "TEMPLATE_FAILURE_POLICY",
    "TEMPLATE_REGISTRATION_LABELS",
    "TEMPLATE_REPO_IDENTITY",
)


@pytest.fixture(autouse=True)
def _isolated_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of the caller's CI variables and .env file."""

    for key in _MANAGED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "0")
    monkeypatch.setattr(env, "_ENV_LOADED", True)
    monkeypatch.setattr(logging_config, "_CONFIGURED", False)
