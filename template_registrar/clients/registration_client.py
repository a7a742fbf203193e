"""
TemplateRegistrar Repository
Introductory remarks: This module is part of the TemplateRegistrar codebase.

Client for the document service template registration webhook.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol, cast

import requests  # type: ignore[import]

from template_registrar.clients.base_client import BaseClient, preview_text
from template_registrar.config import (REGISTRATION_PATH,
                                       REGISTRATION_SUCCESS_STATUS,
                                       REGISTRATION_TIMEOUT_SECONDS)
from template_registrar.errors import RegistrationFailure


class _SessionWithPost(Protocol):
    def post(
        self,
        url: str,
        json: Any,
        timeout: float,
        headers: Optional[dict[str, str]] = None,
    ) -> Any: ...


class RegistrationClient(BaseClient[Optional[str]]):
    """POST one template registration and return the server-assigned id."""

    def __init__(
        self,
        endpoint_url: str,
        *,
        session: Optional[_SessionWithPost] = None,
        logger: Optional[logging.Logger] = None,
        timeout: float = REGISTRATION_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(logger=logger)
        self._endpoint_url = endpoint_url.rstrip("/")
        self._timeout = timeout
        self._session: _SessionWithPost = cast(
            _SessionWithPost, session or requests.Session()
        )

    @property
    def registration_url(self) -> str:
        return f"{self._endpoint_url}{REGISTRATION_PATH}"

    def register(self, payload: Dict[str, Any]) -> Optional[str]:
        """Send ``payload`` once; raise :class:`RegistrationFailure` on error.

        Only HTTP 201 counts as success. The returned ``templateId`` is
        ``None`` when the body is missing or malformed.
        """
        code = str(payload.get("code", "<unknown>"))
        version = payload.get("version")

        def _operation() -> Optional[str]:
            try:
                response = self._session.post(
                    self.registration_url,
                    json=payload,
                    timeout=self._timeout,
                    headers={
                        "Accept": "application/json",
                        "Content-Type": "application/json",
                    },
                )
            except requests.RequestException as error:
                raise RegistrationFailure(
                    code,
                    f"request to {self.registration_url} failed: {error}",
                    version=version,
                ) from error

            if response.status_code != REGISTRATION_SUCCESS_STATUS:
                raise RegistrationFailure(
                    code,
                    f"document service returned {response.status_code}: "
                    f"{preview_text(getattr(response, 'text', ''))}",
                    version=version,
                )
            return self._template_id(response, code)

        return self._execute_timed(
            _operation,
            name=f"registration.register({code})",
        )

    def _template_id(self, response: Any, code: str) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            self._logger.warning(
                "Registration response for %s is not valid JSON", code
            )
            return None

        if not isinstance(body, dict):
            self._logger.warning(
                "Registration response for %s is not a JSON object", code
            )
            return None

        template_id = body.get("templateId")
        if isinstance(template_id, str) and template_id.strip():
            return template_id.strip()
        return None
