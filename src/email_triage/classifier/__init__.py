"""Client and models for the remote classification service."""

from email_triage.classifier.categories import CategoryStyle, category_style
from email_triage.classifier.client import ClassificationClient, SyncClassificationClient
from email_triage.classifier.models import ClassificationResult, HealthResult

__all__ = [
    "CategoryStyle",
    "category_style",
    "ClassificationClient",
    "SyncClassificationClient",
    "ClassificationResult",
    "HealthResult",
]
