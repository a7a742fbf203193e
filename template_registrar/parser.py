"""Map added file paths onto template code and version pairs."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from .models.templates import RESERVED_CODES, ArtifactVersionKey
from .versions import parse_version

_LOGGER = logging.getLogger(__name__)

TEMPLATE_SEGMENT = "/templates/"
TEMPLATE_SUFFIX = ".tsx"

TEMPLATE_PATH_PATTERN = re.compile(
    r"(?P<prefix>.*)/templates/(?P<code>[^/]+)/(?P<version>v[0-9]+)\.tsx"
)


def is_template_candidate(path: str) -> bool:
    """Cheap pre-filter applied to git output before full matching."""
    return TEMPLATE_SEGMENT in path and path.endswith(TEMPLATE_SUFFIX)


class TemplatePathMatcher:
    """Extract ``(code, version)`` from ``<prefix>/templates/<code>/vN.tsx``.

    The match is anchored at both ends and case-sensitive. A path that does
    not match (fixtures, unrelated sources, nested files) yields ``None``.
    """

    def __init__(
        self, pattern: re.Pattern[str] = TEMPLATE_PATH_PATTERN
    ) -> None:
        self._pattern = pattern

    def match(self, path: str) -> Optional[ArtifactVersionKey]:
        matched = self._pattern.fullmatch(path)
        if matched is None or matched.group("code") in RESERVED_CODES:
            _LOGGER.debug("Path %s is not a template version", path)
            return None

        return ArtifactVersionKey(
            code=matched.group("code"),
            version=parse_version(matched.group("version")),
            source_path=path,
        )

    def match_all(self, paths: Sequence[str]) -> List[ArtifactVersionKey]:
        """Return keys for every matching path, preserving input order."""
        keys: List[ArtifactVersionKey] = []
        for path in paths:
            key = self.match(path)
            if key is not None:
                keys.append(key)
        return keys
