"""Outbox dispatcher settings, overridable through ``OUTBOX_*`` variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

ENV_PREFIX = "OUTBOX_"


@dataclass
class DispatchConfig:
    batch_size: int = 50
    poll_interval: float = 5.0
    max_attempts: int = 5
    backoff_seconds: float = 5.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.batch_size < 1 or self.max_attempts < 1:
            raise ValueError("batch_size and max_attempts must be positive")
        if self.poll_interval < 0 or self.backoff_seconds < 0 or self.backoff_multiplier < 1:
            raise ValueError("invalid outbox timing settings")

    @classmethod
    def from_env(cls, environ=None) -> "DispatchConfig":
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw not in (None, ""):
                overrides[f.name] = int(raw) if f.type in (int, "int") else float(raw)
        return cls(**overrides)
