"""Prometheus counters for webhook handling."""

import logging
import platform
import time
from abc import ABC, abstractmethod

from prometheus_client import CollectorRegistry, Counter, generate_latest

logger = logging.getLogger(__name__)

NAMESPACE = "updown"

HANDLER_TOTAL = "handler_total"
HANDLER_FAILURES = "handler_failures"

HANDLER_LABELS = ("subsystem", "handler", "event")
BUILD_LABELS = (
    "subsystem",
    "build_time",
    "git_commit",
    "python_version",
    "start_time",
)


class BaseMetrics(ABC):
    """Counter sink used by the event dispatcher."""

    @abstractmethod
    def increment(self, name: str, labels: dict[str, str]) -> None:
        """Increment counter ``name`` for the given label values."""
        ...


class PrometheusMetrics(BaseMetrics):
    """Handler counters registered on their own ``CollectorRegistry``."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self._registry = registry or CollectorRegistry()
        self._counters: dict[str, Counter] = {
            HANDLER_TOTAL: Counter(
                HANDLER_TOTAL,
                "The number of times the handler has been invoked",
                HANDLER_LABELS,
                namespace=NAMESPACE,
                registry=self._registry,
            ),
            HANDLER_FAILURES: Counter(
                HANDLER_FAILURES,
                "The number of times the handler has failed",
                HANDLER_LABELS,
                namespace=NAMESPACE,
                registry=self._registry,
            ),
        }
        self._build_info = Counter(
            "build_info",
            "A metric with a constant '1' value labeled by build|start time, "
            "git commit and Python version",
            BUILD_LABELS,
            namespace=NAMESPACE,
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def increment(self, name: str, labels: dict[str, str]) -> None:
        counter = self._counters.get(name)
        if counter is None:
            raise KeyError(f"Unknown counter: {name}")
        counter.labels(**labels).inc()

    def record_build_info(self, subsystem: str, build_time: str, git_commit: str) -> None:
        labels = {
            "subsystem": subsystem,
            "build_time": build_time,
            "git_commit": git_commit,
            "python_version": platform.python_version(),
            "start_time": str(int(time.time())),
        }
        logger.info("Build config", extra={"handler": "main", **labels})
        self._build_info.labels(**labels).inc()

    def exposition(self) -> bytes:
        return generate_latest(self._registry)
