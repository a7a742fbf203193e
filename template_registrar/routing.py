"""Route a branch or tag name to an environment configuration."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Pattern

from template_registrar.config import (BRANCH_KEYWORDS,
                                       DOCUMENT_SERVICE_URLS,
                                       KEYWORD_ENVIRONMENTS)
from template_registrar.errors import RoutingError
from template_registrar.models.environment import EnvironmentConfig
from template_registrar.utils.env import endpoint_override

_LOGGER = logging.getLogger(__name__)


def load_environments(
    service_urls: Mapping[str, str] = DOCUMENT_SERVICE_URLS,
) -> Dict[str, EnvironmentConfig]:
    """Build every named environment, applying URL overrides."""
    environments: Dict[str, EnvironmentConfig] = {}
    for short_name, configured_url in service_urls.items():
        url = endpoint_override(short_name) or configured_url
        environments[short_name] = EnvironmentConfig(
            short_name=short_name,
            endpoint_url=url,
        )
    return environments


def match_keyword(
    branch: str,
    keywords: Mapping[str, Pattern[str]] = BRANCH_KEYWORDS,
) -> Optional[str]:
    for keyword, pattern in keywords.items():
        if pattern.search(branch):
            return keyword
    return None


class EnvironmentRouter:
    """Select the environment a branch deploys templates to."""

    def __init__(
        self,
        environments: Optional[Mapping[str, EnvironmentConfig]] = None,
        *,
        keywords: Mapping[str, Pattern[str]] = BRANCH_KEYWORDS,
        keyword_environments: Mapping[str, str] = KEYWORD_ENVIRONMENTS,
    ) -> None:
        self._environments = dict(
            environments if environments is not None else load_environments()
        )
        self._keywords = keywords
        self._keyword_environments = keyword_environments

    def by_name(self, short_name: str) -> EnvironmentConfig:
        try:
            return self._environments[short_name]
        except KeyError as error:
            known = ", ".join(sorted(self._environments))
            raise RoutingError(
                f"Unknown environment '{short_name}'. Known: {known}"
            ) from error

    def for_branch(self, branch: str) -> EnvironmentConfig:
        keyword = match_keyword(branch, self._keywords)
        if keyword is None:
            raise RoutingError(f"No environment configured for '{branch}'")

        short_name = self._keyword_environments[keyword]
        _LOGGER.info(
            "Branch %s matched %s; using environment %s",
            branch,
            keyword,
            short_name,
        )
        return self.by_name(short_name)
