"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Tests for the template path matcher.
"""

from __future__ import annotations

import logging

import pytest

from template_registrar.parser import TemplatePathMatcher, is_template_candidate


@pytest.mark.parametrize(
    ("path", "code", "version"),
    [
        ("src/templates/property-brochure/v2.tsx", "property-brochure", "v2"),
        ("src/templates/cover-letter/v1.tsx", "cover-letter", "v1"),
        ("a/b/c/templates/x/v010.tsx", "x", "v010"),
        ("/templates/root-level/v3.tsx", "root-level", "v3"),
        ("x/templates/a/templates/b/v4.tsx", "b", "v4"),
    ],
)
def test_match_extracts_code_and_version(
    path: str, code: str, version: str
) -> None:
    key = TemplatePathMatcher().match(path)

    assert key is not None
    assert key.code == code
    assert key.version.label == version
    assert key.source_path == path


@pytest.mark.parametrize(
    "path",
    [
        "src/templates/property-brochure/v2.fixtures.json",
        "src/templates/property-brochure/v2.ts",
        "src/templates/property-brochure/2.tsx",
        "src/templates/property-brochure/va.tsx",
        "src/templates/property-brochure/v2.tsx.bak",
        "src/templates/property-brochure/v2/index.tsx",
        "src/templates/v2.tsx",
        "src/templates/./v2.tsx",
        "src/templates/../v2.tsx",
        "src/Templates/property-brochure/v2.tsx",
        "src/templates/property-brochure/V2.tsx",
        "src/templates/property-brochure/v2.tsx\n",
        "templates/property-brochure/v2.tsx",
        "README.md",
        "",
    ],
)
def test_match_rejects_paths_outside_grammar(path: str) -> None:
    assert TemplatePathMatcher().match(path) is None


def test_non_match_is_logged_not_raised(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.DEBUG, logger="template_registrar.parser"):
        result = TemplatePathMatcher().match("src/index.ts")

    assert result is None
    assert any("src/index.ts" in message for message in caplog.messages)


def test_match_all_preserves_order_and_skips_non_matches() -> None:
    keys = TemplatePathMatcher().match_all(
        [
            "src/templates/b/v1.tsx",
            "docs/readme.md",
            "src/templates/a/v3.tsx",
        ]
    )

    assert [(key.code, key.version.number) for key in keys] == [
        ("b", 1),
        ("a", 3),
    ]


def test_candidate_prefilter() -> None:
    assert is_template_candidate("src/templates/a/v1.tsx")
    assert is_template_candidate("src/templates/a/b/c.tsx")
    assert not is_template_candidate("src/templates/a/v1.fixtures.json")
    assert not is_template_candidate("src/components/a.tsx")
