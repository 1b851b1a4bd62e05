"""Synthetic scenario selection.

Every function here is pure apart from the random source it is handed,
so tests can pin draws with a seeded or stubbed ``random.Random``.
Numeric ranges are inclusive-low, exclusive-high.
"""

import random

from logdemo.models import ApiMetrics, BusinessOperation, Level, Scenario

HEALTH_BUCKETS = 10

CANNED_ERRORS = [
    "Connection pool exhausted",
    "Timeout waiting for response",
    "Failed to process request",
    "Database query failed",
]

OPERATIONS = [
    "User authentication",
    "Data synchronization",
    "Report generation",
    "Cache refresh",
    "Backup operation",
]

WARNINGS = [
    "Memory usage above 75%",
    "Response time exceeded threshold",
    "API rate limit approaching",
    "Cache hit ratio below optimal",
]

ERROR_DRAWS = 3
BUSINESS_SUCCESS_BUCKETS = 8  # out of 10
SUCCESS_RATIO = 0.95


def health_scenario(bucket: int, rng=random) -> Scenario:
    """Map a bucket in [0, 10) to a weighted health-tick scenario.

    0-5 normal operation (INFO), 6-7 resource pressure (WARN),
    8 canned error (ERROR), 9 thread-pool status (DEBUG).
    """
    if 0 <= bucket < 6:
        return Scenario(
            Level.INFO,
            "System operating normally",
            f"Active connections: {rng.randrange(100)}, "
            f"Memory usage: {rng.randrange(1024)}MB",
        )
    if 6 <= bucket < 8:
        return Scenario(
            Level.WARN,
            "Warning detected",
            f"Resource utilization high: CPU {rng.randrange(60, 100)}%, "
            f"Memory {rng.randrange(70, 100)}%",
        )
    if bucket == 8:
        return Scenario(
            Level.ERROR,
            "Error encountered",
            f"Error details: {rng.choice(CANNED_ERRORS)}",
        )
    if bucket == 9:
        return Scenario(
            Level.DEBUG,
            "Debug information",
            f"Thread pool status: Active={rng.randrange(20)}, "
            f"Queued={rng.randrange(50)}",
        )
    raise ValueError(f"Health bucket out of range: {bucket}")


def draw_health_scenario(rng=random) -> Scenario:
    return health_scenario(rng.randrange(HEALTH_BUCKETS), rng)


def business_operation(rng=random) -> BusinessOperation:
    name = rng.choice(OPERATIONS)
    duration = rng.random() * 2
    succeeded = rng.randrange(10) < BUSINESS_SUCCESS_BUCKETS
    return BusinessOperation(name=name, duration_seconds=duration, succeeded=succeeded)


def api_metrics(rng=random) -> ApiMetrics:
    total = rng.randrange(500, 1500)
    successful = int(total * SUCCESS_RATIO)
    return ApiMetrics(
        total_requests=total,
        successful_requests=successful,
        failed_requests=total - successful,
        avg_response_ms=rng.random() * 500 + 100,
    )


def error_scenario(draw: int) -> Exception | None:
    """Build the simulated exception for a draw; None if the draw is uncovered."""
    if draw == 0:
        return TimeoutError("Database connection timeout")
    if draw == 1:
        return ValueError("Invalid input parameter")
    if draw == 2:
        return AttributeError("Null reference exception")
    return None


def draw_error_scenario(rng=random) -> Exception | None:
    return error_scenario(rng.randrange(ERROR_DRAWS))


def warning_message(rng=random) -> str:
    return rng.choice(WARNINGS)


def performance_delay_ms(rng=random) -> int:
    return rng.randrange(100, 1100)
