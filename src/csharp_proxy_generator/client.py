"""HTTP client for the application API description a server publishes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests
from requests import Response, Session

from csharp_proxy_generator.api_model import ApplicationApiDescriptionModel

logger = logging.getLogger(__name__)

API_DEFINITION_PATH = "api/abp/api-definition"
DEFAULT_TIMEOUT = 30


class ApiDescriptionError(RuntimeError):
    """Represents a non-success response when fetching the API description."""

    def __init__(self, status_code: int, message: str, *, payload: Any | None = None) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.payload = payload


@dataclass(slots=True)
class ApiDescriptionClient:
    """Small wrapper around :mod:`requests` that fetches the API description of a server."""

    base_url: str
    timeout: int = DEFAULT_TIMEOUT
    session: Session | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()

    def _join(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _handle_response(self, response: Response) -> Any:
        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            message = response.reason or "Request failed"
            if isinstance(payload, dict):
                error = payload.get("error")
                if isinstance(error, dict) and error.get("message"):
                    message = error["message"]
            raise ApiDescriptionError(response.status_code, message, payload=payload)
        return response.json()

    def get_application_api_description_model(self) -> ApplicationApiDescriptionModel:
        """Fetch and decode the server's application API description model.

        Raises:
            ApiDescriptionError: If the server answers with an error status.

        Returns:
            ApplicationApiDescriptionModel: The decoded model.
        """
        url = self._join(API_DEFINITION_PATH)
        logger.info(f"Fetching API description from: {url}")

        session = self.session or requests.Session()
        response = session.get(url, timeout=self.timeout, headers={"Accept": "application/json"})
        return ApplicationApiDescriptionModel.from_dict(self._handle_response(response))
