"""Data models for the classification service."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ClassificationResult:
    """Category and suggested reply returned for one email."""

    email: str
    category: str
    auto_response: str

    @classmethod
    def from_dict(cls, data: dict) -> ClassificationResult:
        return cls(
            email=str(data.get("email") or ""),
            category=str(data.get("category") or ""),
            auto_response=str(data.get("auto_response") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "category": self.category,
            "auto_response": self.auto_response,
        }


@dataclass
class HealthResult:
    """Successful health check response. The payload is opaque."""

    status_code: int
    payload: Any = None

    def summary(self) -> str:
        return json.dumps(self.payload, separators=(",", ":"), ensure_ascii=False)
