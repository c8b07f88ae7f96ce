from __future__ import annotations

from typing import Any, Dict, Optional

from rolegate.core.ports import MetricsSink

try:
    from prometheus_client import Counter, Histogram  # type: ignore
except Exception:  # pragma: no cover
    Counter = Histogram = None  # type: ignore


class PrometheusMetrics(MetricsSink):
    """Prometheus-based MetricsSink.

    Exposes:
      - rolegate_checks_total{decision="allow|deny|error"}
      - rolegate_check_seconds (Histogram)

    Pass *registry* to keep the instruments out of the global default registry
    (useful when several evaluators live in one process).
    """

    _counter: Optional[Any]
    _hist: Optional[Any]

    def __init__(self, *, registry: Any = None) -> None:
        self._counter = None
        self._hist = None

        if Counter is None or Histogram is None:  # pragma: no cover
            return

        kwargs: Dict[str, Any] = {}
        if registry is not None:
            kwargs["registry"] = registry
        self._counter = Counter(
            "rolegate_checks_total",
            "Total rolegate access checks by decision.",
            labelnames=("decision",),
            **kwargs,
        )
        self._hist = Histogram(
            "rolegate_check_seconds",
            "rolegate access check duration in seconds.",
            **kwargs,
        )

    # -- MetricsSink ------------------------------------------------------------

    def inc(self, name: str, labels: Dict[str, str] | None = None) -> None:
        """Increment ``rolegate_checks_total``; *name* is ignored."""
        if self._counter is None:
            return
        decision = (labels or {}).get("decision", "unknown")
        try:
            self._counter.labels(decision=decision).inc()  # type: ignore[call-arg]
        except Exception:  # pragma: no cover
            # never raise from metrics path
            pass

    def observe(self, name: str, value: float, labels: Dict[str, str] | None = None) -> None:
        if self._hist is None:
            return
        try:
            self._hist.observe(float(value))
        except Exception:  # pragma: no cover
            pass
