"""CloudWatch custom metrics emitter with background batching.

What gets measured:

* ``Resolver/BranchHit`` — which intent branch answered each message
  (``command``, ``faq``, ``ai_fallback``, ...).
* ``Gateway/TierOutcome`` — success or exhaustion of every AI answer tier
  (``detailed``, ``reduced``, ``concise``), so degradation is visible.
* ``ExternalAPI/*`` — count, latency and error type of each call to the
  Anthropic and LINE APIs.

Metrics are buffered in memory under a lock.  When ``METRICS_ENABLED`` is
``"true"`` a daemon thread flushes the buffer to CloudWatch every
``FLUSH_INTERVAL_SECONDS``; otherwise data points are only logged at DEBUG
level and dropped on flush.

>>> from laborbot.services.metrics import metrics
>>> metrics.record_branch("faq")
>>> metrics.record_tier("detailed", succeeded=False)
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "LaborBot"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # CloudWatch API limit per PutMetricData call


class MetricsClient:
    """Batched CloudWatch metrics publisher."""

    def __init__(self) -> None:
        self._enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._cw_client = None  # lazy-init

        if self._enabled:
            self._start_flush_thread()

    def _get_cw_client(self):
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── Domain metrics ────────────────────────────────────────────────

    def record_branch(self, branch: str) -> None:
        """Count one message answered by *branch*."""
        self._append(
            {
                "MetricName": "Resolver/BranchHit",
                "Dimensions": [{"Name": "Branch", "Value": branch}],
                "Timestamp": datetime.now(UTC),
                "Value": 1,
                "Unit": "Count",
            }
        )
        logger.debug("Metric: branch=%s", branch)

    def record_tier(self, tier: str, *, succeeded: bool, attempts: int = 1) -> None:
        """Count one gateway tier outcome and how many calls it took."""
        now = datetime.now(UTC)
        outcome = "success" if succeeded else "exhausted"
        dims = [{"Name": "Tier", "Value": tier}]
        self._append(
            {
                "MetricName": "Gateway/TierOutcome",
                "Dimensions": dims + [{"Name": "Outcome", "Value": outcome}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        self._append(
            {
                "MetricName": "Gateway/Attempts",
                "Dimensions": dims,
                "Timestamp": now,
                "Value": attempts,
                "Unit": "Count",
            }
        )
        logger.debug("Metric: tier=%s outcome=%s attempts=%d", tier, outcome, attempts)

    # ── External API calls ────────────────────────────────────────────

    def record_success(
        self,
        service: str,
        operation: str,
        latency_ms: float,
    ) -> None:
        """Record a successful API call."""
        now = datetime.now(UTC)
        dims_base = [{"Name": "Service", "Value": service}]

        self._append(
            {
                "MetricName": "ExternalAPI/RequestCount",
                "Dimensions": dims_base + [{"Name": "Status", "Value": "success"}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        self._append(
            {
                "MetricName": "ExternalAPI/Latency",
                "Dimensions": dims_base + [{"Name": "Operation", "Value": operation}],
                "Timestamp": now,
                "Value": latency_ms,
                "Unit": "Milliseconds",
            }
        )
        logger.debug(
            "Metric: %s %s success latency=%.1fms", service, operation, latency_ms,
        )

    def record_failure(
        self,
        service: str,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        """Record a failed API call."""
        now = datetime.now(UTC)
        dims_base = [{"Name": "Service", "Value": service}]

        self._append(
            {
                "MetricName": "ExternalAPI/RequestCount",
                "Dimensions": dims_base + [{"Name": "Status", "Value": "failure"}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        self._append(
            {
                "MetricName": "ExternalAPI/ErrorCount",
                "Dimensions": dims_base + [{"Name": "ErrorType", "Value": error_type}],
                "Timestamp": now,
                "Value": 1,
                "Unit": "Count",
            }
        )
        if latency_ms > 0:
            self._append(
                {
                    "MetricName": "ExternalAPI/Latency",
                    "Dimensions": dims_base + [{"Name": "Operation", "Value": operation}],
                    "Timestamp": now,
                    "Value": latency_ms,
                    "Unit": "Milliseconds",
                }
            )
        logger.debug(
            "Metric: %s %s failure error=%s latency=%.1fms",
            service, operation, error_type, latency_ms,
        )

    def flush(self) -> int:
        """Send buffered metrics to CloudWatch.  Returns count sent."""
        with self._lock:
            if not self._buffer:
                return 0
            batch = self._buffer[:]
            self._buffer.clear()

        if not self._enabled:
            logger.debug("Metrics flush skipped (not enabled): %d items", len(batch))
            return 0

        sent = 0
        try:
            cw = self._get_cw_client()
            for i in range(0, len(batch), MAX_BATCH_SIZE):
                chunk = batch[i : i + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=NAMESPACE, MetricData=chunk)
                sent += len(chunk)
            logger.info("Flushed %d metrics to CloudWatch", sent)
        except Exception:
            logger.exception("Failed to flush metrics to CloudWatch")
        return sent

    # ── Internal ──────────────────────────────────────────────────────

    def _append(self, metric_data: dict[str, Any]) -> None:
        with self._lock:
            self._buffer.append(metric_data)

    def _start_flush_thread(self) -> None:
        def _loop():
            while True:
                time.sleep(FLUSH_INTERVAL_SECONDS)
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush thread error")

        t = threading.Thread(target=_loop, daemon=True, name="metrics-flush")
        t.start()
        atexit.register(self.flush)
        logger.info(
            "Metrics flush thread started (interval=%ds)", FLUSH_INTERVAL_SECONDS,
        )


# ── Module-level singleton ──────────────────────────────────────────
metrics = MetricsClient()
