"""Mock prover configuration."""

import os
from dataclasses import dataclass
from typing import Optional

WORKERS_ENV = "PLONKISH_WORKERS"


@dataclass(frozen=True)
class MockProverConfig:
    """Settings for constraint checking.

    Attributes:
        workers: Threads used to check gates and lookups; 1 checks sequentially
        max_reported_failures: Cap on failures rendered by assert_satisfied
            (None renders all); the VerifyResult always holds every failure
    """
    workers: int = 1
    max_reported_failures: Optional[int] = 20

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    @classmethod
    def from_env(cls) -> "MockProverConfig":
        """Build a config from PLONKISH_WORKERS (defaults to 1)."""
        raw = os.environ.get(WORKERS_ENV, "1")
        try:
            workers = int(raw)
        except ValueError:
            raise ValueError(f"{WORKERS_ENV} must be an integer, got {raw!r}") from None
        return cls(workers=workers)
