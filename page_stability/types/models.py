"""Core type definitions for PageStability."""

from typing import Any, Callable, List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from enum import Enum

from ..core.errors import ConfigurationError, WaitTimeoutError, is_transient_fault


class ProbeResult(str, Enum):
    """Outcome of a single probe evaluation."""
    SATISFIED = "satisfied"
    NOT_SATISFIED = "not_satisfied"
    NOT_APPLICABLE = "not_applicable"

    @classmethod
    def from_value(cls, value: Any) -> "ProbeResult":
        """Coerce a check's return value (bool or ProbeResult) into a ProbeResult."""
        if isinstance(value, ProbeResult):
            return value
        return cls.SATISFIED if value else cls.NOT_SATISFIED


class WaitStatus(str, Enum):
    """Terminal status of a stability wait."""
    OK = "ok"
    TIMED_OUT = "timed_out"


class _SpecModel(BaseModel):
    """Base for per-call specs; validation failures surface as ConfigurationError."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e


class WaitSpec(_SpecModel):
    """
    What to wait for and for how long.

    Timeout and poll interval are in seconds. Probes run in the given order;
    plain callables are wrapped into probes named after the callable.
    """
    timeout: float = 30.0
    poll_interval: float = 0.1
    probes: List[Any] = Field(default_factory=list)
    description: str = "waiting for page stability"

    @field_validator("timeout", "poll_interval")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("probes", mode="before")
    @classmethod
    def _coerce_probes(cls, v: Any) -> List[Any]:
        # Import here to avoid circular dependency
        from ..core.probe import Probe

        probes = []
        for item in v or []:
            if isinstance(item, Probe):
                probes.append(item)
            elif callable(item):
                probes.append(Probe(getattr(item, "__name__", "probe"), item))
            else:
                raise ValueError(f"not a probe: {item!r}")
        return probes

    @model_validator(mode="after")
    def _interval_within_timeout(self) -> "WaitSpec":
        if self.poll_interval > self.timeout:
            raise ValueError("poll_interval must not exceed timeout")
        return self


class WaitResult(BaseModel):
    """Result from a stability wait."""
    status: WaitStatus
    description: str
    elapsed: float = 0.0
    polls: int = 0
    timeout: Optional[float] = None
    not_applicable: List[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is WaitStatus.OK

    def raise_for_timeout(self) -> "WaitResult":
        """Raise WaitTimeoutError if the wait did not resolve."""
        if self.status is WaitStatus.TIMED_OUT:
            raise WaitTimeoutError(self.description, self.timeout or self.elapsed, self.elapsed)
        return self


class RetrySpec(_SpecModel):
    """Bounded retry policy for lookups racing against stale references."""
    max_attempts: int = 2
    retryable: Callable[[BaseException], bool] = is_transient_fault
    description: str = "lookup"

    @field_validator("max_attempts")
    @classmethod
    def _at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_attempts must be at least 1")
        return v
