"""Email splitting, cost estimation and sequential batch classification."""

from email_triage.batch.cost import RateConfig, coerce_rate, estimate_cost
from email_triage.batch.runner import BatchOutcome, BatchRunner, BatchState
from email_triage.batch.splitter import split_emails

__all__ = [
    "RateConfig",
    "coerce_rate",
    "estimate_cost",
    "BatchOutcome",
    "BatchRunner",
    "BatchState",
    "split_emails",
]
