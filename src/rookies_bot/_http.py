"""Low-level HTTP transport for the SimGrid API, wrapping httpx."""

from __future__ import annotations

from typing import Any

import httpx

from rookies_bot.exceptions import (
    SimGridAPIError,
    SimGridConnectionError,
    SimGridTimeoutError,
    SimGridValidationError,
)

DEFAULT_BASE_URL = "https://www.thesimgrid.com/api/v1"
DEFAULT_TIMEOUT = 30.0


def _handle_response(response: httpx.Response) -> Any:
    """Validate response status and return parsed JSON."""
    if response.status_code >= 400:
        raise SimGridAPIError(
            status_code=response.status_code,
            message=response.text,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise SimGridValidationError(f"Response is not JSON: {exc}") from exc


class SyncTransport:
    """Synchronous HTTP transport using httpx.Client with bearer auth."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {token}",
            },
        )

    def get(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        """Perform a GET request and return parsed JSON."""
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.ConnectError as exc:
            raise SimGridConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise SimGridTimeoutError(str(exc)) from exc
        except httpx.TransportError as exc:
            raise SimGridConnectionError(str(exc)) from exc
        return _handle_response(response)

    def close(self) -> None:
        self._client.close()
