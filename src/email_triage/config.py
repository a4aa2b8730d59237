"""Runtime configuration, resolved once and injected into the client and runner."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from email_triage.batch.cost import RateConfig, coerce_rate
from email_triage.classifier.client import DEFAULT_TIMEOUT, normalize_base_url

logger = logging.getLogger(__name__)

ENV_API_BASE = "EMAIL_TRIAGE_API_BASE"
ENV_TIMEOUT = "EMAIL_TRIAGE_TIMEOUT"
ENV_CLASSIFY_RATE = "EMAIL_TRIAGE_CLASSIFY_RATE"
ENV_GENERATE_RATE = "EMAIL_TRIAGE_GENERATE_RATE"
ENV_KEEP_PARTIAL = "EMAIL_TRIAGE_KEEP_PARTIAL"

_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class TriageConfig:
    api_base: str = ""
    timeout: float = DEFAULT_TIMEOUT
    rates: RateConfig = field(default_factory=RateConfig)
    keep_partial_results: bool = True

    def __post_init__(self):
        self.api_base = normalize_base_url(self.api_base)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TriageConfig:
        """Read settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ

        # Zero or unparseable timeouts fall back to the default.
        timeout = coerce_rate(env.get(ENV_TIMEOUT)) or DEFAULT_TIMEOUT
        if not env.get(ENV_API_BASE):
            logger.debug(f"{ENV_API_BASE} is not set")

        return cls(
            api_base=env.get(ENV_API_BASE, ""),
            timeout=timeout,
            rates=RateConfig.coerce(env.get(ENV_CLASSIFY_RATE), env.get(ENV_GENERATE_RATE)),
            keep_partial_results=env.get(ENV_KEEP_PARTIAL, "true").strip().lower() not in _FALSE_VALUES,
        )
