"""Prometheus collectors for outbound API traffic."""

from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class RequestMetrics:
    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.attempts = Counter(
            "meli_sdk_request_attempts_total",
            "Outbound request attempts",
            ["backend", "method", "outcome"],
            registry=registry,
        )
        self.retries = Counter(
            "meli_sdk_request_retries_total",
            "Retries scheduled after a retryable failure",
            ["backend", "reason"],
            registry=registry,
        )
        self.latency = Histogram(
            "meli_sdk_request_latency_seconds",
            "Latency of a logical request including retries",
            ["backend"],
            registry=registry,
        )


default_metrics = RequestMetrics()

__all__ = ["RequestMetrics", "default_metrics"]
