"""Periodic producers of synthetic telemetry, driven by APScheduler."""

import logging
import random
import threading
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from logdemo import scenarios

logger = logging.getLogger(__name__)

HEALTH_SOURCE = "scheduled-health"
BUSINESS_SOURCE = "scheduled-business"
METRICS_SOURCE = "scheduled-api-metrics"


class ScheduledProducer:
    """Runs the health, business-operation and API-metrics ticks.

    The request counter belongs to this instance; only ``health_tick``
    writes it. Each tick is registered with ``max_instances=1`` so a slow
    run is never overlapped by its own next run.
    """

    def __init__(
        self,
        emitter,
        rng=None,
        health_interval: float = 5,
        business_interval: float = 15,
        metrics_interval: float = 10,
        cancel_event: threading.Event | None = None,
    ):
        self._emitter = emitter
        self._rng = rng or random.Random()
        self._health_interval = health_interval
        self._business_interval = business_interval
        self._metrics_interval = metrics_interval
        self._cancel = cancel_event or threading.Event()
        self._scheduler = None
        self._counter = 0

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def health_tick(self):
        self._counter += 1
        count = self._counter
        scenario = scenarios.draw_health_scenario(self._rng)

        self._emitter.emit(
            scenario.level, HEALTH_SOURCE,
            "Scheduled log generation #%d - %s", count, scenario.headline,
        )
        self._emitter.emit(scenario.level, HEALTH_SOURCE, scenario.detail)

        if count % 10 == 0:
            self._emitter.info(
                HEALTH_SOURCE, "Milestone reached: %d log generations completed", count
            )
        if count % 20 == 0:
            self._emitter.warn(HEALTH_SOURCE, "System check: Running for %d cycles", count)

    def business_tick(self):
        op = scenarios.business_operation(self._rng)
        self._emitter.info(BUSINESS_SOURCE, "Business operation started: %s", op.name)

        if self._cancel.wait(op.duration_seconds):
            self._emitter.error(BUSINESS_SOURCE, "Business operation interrupted: %s", op.name)
            return

        if op.succeeded:
            self._emitter.info(
                BUSINESS_SOURCE, "Business operation completed successfully: %s", op.name
            )
        else:
            self._emitter.error(
                BUSINESS_SOURCE, "Business operation failed: %s - Retry scheduled", op.name
            )

    def metrics_tick(self):
        metrics = scenarios.api_metrics(self._rng)
        self._emitter.info(
            METRICS_SOURCE,
            "API Metrics - Total Requests: %d, Success: %d, Failed: %d",
            metrics.total_requests, metrics.successful_requests, metrics.failed_requests,
        )
        self._emitter.info(
            METRICS_SOURCE, "API Metrics - Average Response Time: %.2fms", metrics.avg_response_ms
        )
        if metrics.degraded:
            self._emitter.warn(
                METRICS_SOURCE,
                "API performance degradation detected - Avg response time: %.2fms",
                metrics.avg_response_ms,
            )

    def start(self):
        if self.running:
            return
        self._cancel.clear()
        self._scheduler = BackgroundScheduler(timezone=timezone.utc)
        now = datetime.now(timezone.utc)
        jobs = [
            ("health", self.health_tick, self._health_interval),
            ("business", self.business_tick, self._business_interval),
            ("api-metrics", self.metrics_tick, self._metrics_interval),
        ]
        for job_id, func, interval in jobs:
            self._scheduler.add_job(
                func, "interval", seconds=interval, id=job_id,
                max_instances=1, coalesce=True, next_run_time=now,
            )
        self._scheduler.start()
        logger.info(
            "Scheduled producer started (health=%ss, business=%ss, metrics=%ss)",
            self._health_interval, self._business_interval, self._metrics_interval,
        )

    def job_ids(self) -> list[str]:
        if self._scheduler is None:
            return []
        return [job.id for job in self._scheduler.get_jobs()]

    def get_job(self, job_id: str):
        if self._scheduler is None:
            return None
        return self._scheduler.get_job(job_id)

    def shutdown(self):
        """Cancel in-flight waits and stop scheduling; does not drain."""
        self._cancel.set()
        if self.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduled producer stopped after %d health ticks", self._counter)
