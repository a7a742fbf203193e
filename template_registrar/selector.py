"""Reduce matched template paths to the highest version per code."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from template_registrar.models.templates import ResolvedArtifact
from template_registrar.parser import TemplatePathMatcher
from template_registrar.versions import compare_versions

_LOGGER = logging.getLogger(__name__)


class ArtifactSelector:
    """Keep exactly one :class:`ResolvedArtifact` per template code.

    A later path replaces the stored one only when its version is strictly
    greater, so equal versions keep the first path seen. Output follows the
    order in which each code first appeared.
    """

    def __init__(self, matcher: Optional[TemplatePathMatcher] = None) -> None:
        self._matcher = matcher or TemplatePathMatcher()

    def select(self, paths: Sequence[str]) -> List[ResolvedArtifact]:
        resolved: Dict[str, ResolvedArtifact] = {}
        skipped = 0
        for path in paths:
            key = self._matcher.match(path)
            if key is None:
                skipped += 1
                continue

            current = resolved.get(key.code)
            if current is None:
                resolved[key.code] = ResolvedArtifact.from_key(key)
            elif compare_versions(key.version, current.version) > 0:
                _LOGGER.debug(
                    "Replacing %s %s with %s",
                    key.code,
                    current.version,
                    key.version,
                )
                resolved[key.code] = ResolvedArtifact.from_key(key)

        _LOGGER.info(
            "Selected %d template(s) from %d path(s); %d skipped",
            len(resolved),
            len(paths),
            skipped,
        )
        return list(resolved.values())
