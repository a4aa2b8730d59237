"""Operator session state: pasted text, rates, results and ping status."""

from __future__ import annotations

import logging
from dataclasses import replace

from email_triage.batch.cost import RateConfig, coerce_rate, estimate_cost
from email_triage.batch.runner import BatchOutcome, BatchRunner
from email_triage.batch.splitter import split_emails
from email_triage.classifier.client import ClassificationClient
from email_triage.classifier.models import ClassificationResult
from email_triage.config import TriageConfig
from email_triage.exceptions import BatchInProgressError, ConnectivityError, ConfigurationError

logger = logging.getLogger(__name__)

SAMPLE_INPUT = (
    "Hi, I want to know about your premium subscription plans.\n\n"
    "My package arrived damaged and I need a replacement.\n\n"
    "Do you offer discounts for teams or bulk purchases?\n\n"
    "I like the new update, but the interface is confusing."
)

_RATE_FIELDS = ("classify_per_email", "generate_per_email")


class TriageSession:
    """Everything the operator surface needs, without any rendering.

    Args:
        client: Classification client shared by batches and pings.
        rates: Initial per-email rates.
        raw_text: Initial pasted text.
        keep_partial_results: Passed through to ``BatchRunner``.
    """

    def __init__(
        self,
        client: ClassificationClient,
        rates: RateConfig | None = None,
        raw_text: str = SAMPLE_INPUT,
        keep_partial_results: bool = True,
    ):
        self.client = client
        # set_rate edits this copy, not the caller's RateConfig.
        self.rates = replace(rates) if rates is not None else RateConfig()
        self.raw_text = raw_text
        self.ping_message = ""
        self.runner = BatchRunner(client, keep_partial_results=keep_partial_results)

    @classmethod
    def from_config(cls, config: TriageConfig, raw_text: str = SAMPLE_INPUT, transport=None) -> TriageSession:
        client = ClassificationClient(config.api_base, timeout=config.timeout, transport=transport)
        return cls(
            client,
            rates=config.rates,
            raw_text=raw_text,
            keep_partial_results=config.keep_partial_results,
        )

    @property
    def emails(self) -> list[str]:
        return split_emails(self.raw_text)

    @property
    def results(self) -> list[ClassificationResult]:
        return self.runner.results

    @property
    def busy(self) -> bool:
        return self.runner.busy

    @property
    def total_cost(self) -> str:
        return estimate_cost(len(self.results), self.rates)

    @property
    def projected_cost(self) -> str:
        """Cost if every currently parsed email were classified."""
        return estimate_cost(len(self.emails), self.rates)

    @property
    def classify_label(self) -> str:
        if self.busy:
            return "Classifying..."
        count = len(self.emails)
        return f"Classify {count}" if count else "Classify"

    def set_rate(self, name: str, value) -> None:
        if name not in _RATE_FIELDS:
            raise ValueError(f"Unknown rate: {name}")
        setattr(self.rates, name, coerce_rate(value))

    async def classify_all(self) -> BatchOutcome:
        if self.busy:
            raise BatchInProgressError("A batch is already running.")
        return await self.runner.run(self.emails)

    async def ping(self) -> str:
        """Run a health check and record the status line."""
        self.ping_message = ""
        try:
            health = await self.client.health_check()
        except (ConnectivityError, ConfigurationError) as e:
            self.ping_message = f"Failed: {e}"
        else:
            self.ping_message = f"OK: {health.summary()}"
        logger.debug(self.ping_message)
        return self.ping_message
