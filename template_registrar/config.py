"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Central configuration constants for the template registrar.
"""

from __future__ import annotations

import re
from typing import Dict, Pattern

# Document service --------------------------------------------------------

REGISTRATION_PATH = "/api/templates/register"
"""Path appended to an environment's endpoint URL for registrations."""

REGISTRATION_TIMEOUT_SECONDS = 30
"""Timeout applied to each registration POST."""

REGISTRATION_SUCCESS_STATUS = 201
"""The only status code treated as a successful registration."""

# Environments ------------------------------------------------------------

DOCUMENT_SERVICE_URLS: Dict[str, str] = {
    "dev": "https://f0ed9cc2a917.ngrok-free.app",
    "staging": "https://f0ed9cc2a917.ngrok-free.app",
    "prod": "https://f0ed9cc2a917.ngrok-free.app",
}
"""Document service per environment; overridden by DOCUMENT_SERVICE_URL*."""

BRANCH_KEYWORDS: Dict[str, Pattern[str]] = {
    "develop": re.compile(r"^develop$"),
    "main": re.compile(r"^main$"),
    "production": re.compile(r"^v\d+\.\d+\.\d+"),
}
"""Named branch patterns, checked in declaration order."""

KEYWORD_ENVIRONMENTS: Dict[str, str] = {
    "develop": "dev",
    "main": "staging",
    "production": "prod",
}

# Repository identity -----------------------------------------------------

DEFAULT_REPO_IDENTITY = "templates-test-repo"
DEFAULT_REMOTE_NAME = "origin"

# Status reporting --------------------------------------------------------

CHECK_RUN_NAME = "template-registration"
GITHUB_API_URL = "https://api.github.com"

# Scaffolding -------------------------------------------------------------

TEMPLATES_ROOT = "src/templates"
DEFAULT_PUSH_BRANCH = "main"
