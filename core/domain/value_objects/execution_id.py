"""Correlation id for the log lines of one request, webhook or sync run."""

from dataclasses import dataclass, field
import uuid


@dataclass(frozen=True)
class ExecutionID:
    """Short random hex id, generated per Unit of Work."""

    value: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    @classmethod
    def generate(cls) -> "ExecutionID":
        return cls()

    def __str__(self) -> str:
        return self.value
