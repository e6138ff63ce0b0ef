from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response

from backend.core.errors import QuotaExceeded, TransportError, UpstreamError


@dataclass
class RequestConfig:
    timeout: float = 10.0


class HTTPWeatherProvider:
    """Base class that adds a shared session and error translation."""

    name = "http"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text[:500])
            raise QuotaExceeded("quota exceeded", status=429, payload=self._error_payload(response))
        if response.status_code >= 400:
            self._log.error("Provider returned %s: %s", response.status_code, response.text[:500])
            raise self._upstream_error(response)
        return response

    def _upstream_error(self, response: Response) -> UpstreamError:
        return UpstreamError(
            f"HTTP {response.status_code}",
            status=response.status_code,
            payload=self._error_payload(response),
        )

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise TransportError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise TransportError("request failed") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise TransportError("invalid json") from exc

    @staticmethod
    def _error_payload(response: Response) -> Optional[Any]:
        try:
            return response.json()
        except ValueError:
            return None


__all__ = ["HTTPWeatherProvider", "RequestConfig"]
