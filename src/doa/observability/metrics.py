"""
Metrics — Counters and distributions for validation runs.

All metric types are safe to update from concurrent validations.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Any


class Counter:
    """Monotonically increasing counter."""
    
    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()
    
    def inc(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value += amount
    
    @property
    def value(self) -> float:
        return self._value
    
    def reset(self) -> None:
        with self._lock:
            self._value = 0.0


class Gauge:
    """Value that can go up and down."""
    
    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()
    
    def inc(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value += amount
    
    def dec(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value -= amount
    
    @property
    def value(self) -> float:
        return self._value
    
    def reset(self) -> None:
        with self._lock:
            self._value = 0.0


class Histogram:
    """
    Running summary of observed values.
    
    Keeps count, sum, min and max; no buckets.
    """
    
    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._lock = Lock()
        self._reset_unlocked()
    
    def _reset_unlocked(self) -> None:
        self._count = 0
        self._sum = 0.0
        self._min = float("inf")
        self._max = float("-inf")
    
    def observe(self, value: float) -> None:
        with self._lock:
            self._count += 1
            self._sum += value
            self._min = min(self._min, value)
            self._max = max(self._max, value)
    
    @property
    def count(self) -> int:
        return self._count
    
    @property
    def avg(self) -> float:
        if self._count == 0:
            return 0.0
        return self._sum / self._count
    
    @property
    def min(self) -> float:
        return self._min if self._count > 0 else 0.0
    
    @property
    def max(self) -> float:
        return self._max if self._count > 0 else 0.0
    
    def reset(self) -> None:
        with self._lock:
            self._reset_unlocked()
    
    def to_dict(self) -> dict[str, float]:
        return {
            "count": self._count,
            "sum": self._sum,
            "avg": self.avg,
            "min": self.min,
            "max": self.max,
        }


@dataclass
class MetricsRegistry:
    """Process-wide validation metrics."""
    validations_total: Counter = field(
        default_factory=lambda: Counter("validations_total", "Property validations run")
    )
    validations_empty: Counter = field(
        default_factory=lambda: Counter("validations_empty", "Validations over an empty automaton")
    )
    transition_conflicts: Counter = field(
        default_factory=lambda: Counter(
            "transition_conflicts", "External transitions inserted over a different destination"
        )
    )
    active_validations: Gauge = field(
        default_factory=lambda: Gauge("active_validations", "Validations currently in flight")
    )
    validation_duration_seconds: Histogram = field(
        default_factory=lambda: Histogram("validation_duration_seconds", "Validation wall time")
    )
    result_size: Histogram = field(
        default_factory=lambda: Histogram("result_size", "States in set-valued results")
    )
    
    def _all(self) -> list[Counter | Gauge | Histogram]:
        return [
            self.validations_total,
            self.validations_empty,
            self.transition_conflicts,
            self.active_validations,
            self.validation_duration_seconds,
            self.result_size,
        ]
    
    def to_dict(self) -> dict[str, Any]:
        """Export all metrics as dict."""
        return {
            "validations": {
                "total": self.validations_total.value,
                "empty": self.validations_empty.value,
                "active": self.active_validations.value,
            },
            "store": {
                "transition_conflicts": self.transition_conflicts.value,
            },
            "distributions": {
                "duration_seconds": self.validation_duration_seconds.to_dict(),
                "result_size": self.result_size.to_dict(),
            },
        }
    
    def reset(self) -> None:
        """Reset all metrics (for testing)."""
        for metric in self._all():
            metric.reset()


_metrics = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get global metrics registry."""
    return _metrics


def reset_metrics() -> None:
    """Reset all metrics (for testing)."""
    _metrics.reset()
