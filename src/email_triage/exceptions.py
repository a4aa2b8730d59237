"""Unified exception hierarchy for email-triage."""

from __future__ import annotations


class TriageError(Exception):
    """Base exception for all email-triage errors."""


# Input / setup
class ConfigurationError(TriageError):
    """Classification service endpoint is not configured."""


class EmptyInputError(TriageError):
    """No email units could be parsed from the input."""


class BatchInProgressError(TriageError):
    """A batch was started while another one is still running."""


# Classification service
class ServiceError(TriageError):
    """Base exception for classification service calls."""


class ConnectivityError(ServiceError):
    """Health check or network-level failure."""


class ClassificationError(ServiceError):
    """A single classify call failed.

    ``detail`` holds the server-supplied message when the response carried one.
    """

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(detail or message)
        self.detail = detail
        self.status_code = status_code
