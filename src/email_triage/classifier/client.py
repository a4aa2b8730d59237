"""HTTP client for the remote classification service, sync and async.

No retries are performed here; callers decide what to do with a failure.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from email_triage.classifier.models import ClassificationResult, HealthResult
from email_triage.exceptions import (
    ClassificationError,
    ConfigurationError,
    ConnectivityError,
)
from email_triage.version import __version__

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
GENERIC_FAILURE_MESSAGE = "Request failed. Check the classification service URL."

_HEADERS = {
    "Accept": "application/json",
    "User-Agent": f"EmailTriage/{__version__}",
}


def normalize_base_url(base_url: str | None) -> str:
    """Strip surrounding whitespace and trailing slashes."""
    return (base_url or "").strip().rstrip("/")


def _extract_detail(response) -> str | None:
    """Return the ``detail`` string of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return None


def _parse_health(response) -> HealthResult:
    if not response.is_success:
        raise ConnectivityError(f"Health check returned HTTP {response.status_code}")
    try:
        payload = response.json()
    except ValueError as e:
        raise ConnectivityError("Health check returned a non-JSON body") from e
    return HealthResult(status_code=response.status_code, payload=payload)


def _parse_classification(response) -> ClassificationResult:
    if not response.is_success:
        detail = _extract_detail(response)
        logger.warning(
            f"Classify returned HTTP {response.status_code}"
            + (f": {detail}" if detail else "")
        )
        raise ClassificationError(
            GENERIC_FAILURE_MESSAGE,
            detail=detail,
            status_code=response.status_code,
        )
    try:
        data = response.json()
    except ValueError as e:
        raise ClassificationError(GENERIC_FAILURE_MESSAGE, status_code=response.status_code) from e
    if not isinstance(data, dict):
        raise ClassificationError(GENERIC_FAILURE_MESSAGE, status_code=response.status_code)
    return ClassificationResult.from_dict(data)


class _BaseClassificationClient:
    """Shared construction and URL handling.

    Args:
        base_url: Service root, e.g. ``https://example.ngrok.app``. May be empty,
            in which case every call raises ``ConfigurationError``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        base_url: str | None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Any = None,
    ):
        self.base_url = normalize_base_url(base_url)
        self.timeout = timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _url(self, path: str) -> str:
        if not self.configured:
            raise ConfigurationError(
                "Classification service URL is not set. "
                "Pass it directly or set EMAIL_TRIAGE_API_BASE in your environment."
            )
        return f"{self.base_url}/{path}"

    def _client_kwargs(self) -> dict:
        kwargs: dict[str, Any] = {"timeout": self.timeout, "headers": _HEADERS}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return kwargs


class ClassificationClient(_BaseClassificationClient):
    """Asynchronous classification service client."""

    async def health_check(self) -> HealthResult:
        """Call ``GET /healthz``."""
        url = self._url("healthz")
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.get(url)
            return _parse_health(response)
        except ConnectivityError:
            raise
        except httpx.TimeoutException as e:
            raise ConnectivityError(f"Health check timed out after {self.timeout}s") from e
        except Exception as e:
            raise ConnectivityError(f"Health check failed: {e}") from e

    async def classify(self, email: str) -> ClassificationResult:
        """Call ``POST /classify`` for a single email."""
        url = self._url("classify")
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.post(url, json={"email": email})
            return _parse_classification(response)
        except ClassificationError:
            raise
        except Exception as e:
            logger.warning(f"Classify request failed: {e}")
            raise ClassificationError(GENERIC_FAILURE_MESSAGE) from e


class SyncClassificationClient(_BaseClassificationClient):
    """Synchronous classification service client."""

    def health_check(self) -> HealthResult:
        """Call ``GET /healthz``."""
        url = self._url("healthz")
        try:
            with httpx.Client(**self._client_kwargs()) as client:
                response = client.get(url)
            return _parse_health(response)
        except ConnectivityError:
            raise
        except httpx.TimeoutException as e:
            raise ConnectivityError(f"Health check timed out after {self.timeout}s") from e
        except Exception as e:
            raise ConnectivityError(f"Health check failed: {e}") from e

    def classify(self, email: str) -> ClassificationResult:
        """Call ``POST /classify`` for a single email."""
        url = self._url("classify")
        try:
            with httpx.Client(**self._client_kwargs()) as client:
                response = client.post(url, json={"email": email})
            return _parse_classification(response)
        except ClassificationError:
            raise
        except Exception as e:
            logger.warning(f"Classify request failed: {e}")
            raise ClassificationError(GENERIC_FAILURE_MESSAGE) from e
