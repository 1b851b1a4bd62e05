import random
import re

import pytest

from logdemo import scenarios
from logdemo.models import ApiMetrics, Level

from conftest import FixedRandom


class TestHealthScenario:
    @pytest.mark.parametrize("bucket", range(6))
    def test_normal_buckets_are_info(self, bucket):
        scenario = scenarios.health_scenario(bucket, random.Random(1))
        assert scenario.level == Level.INFO
        assert scenario.headline == "System operating normally"
        assert re.fullmatch(r"Active connections: \d+, Memory usage: \d+MB", scenario.detail)

    @pytest.mark.parametrize("bucket", [6, 7])
    def test_pressure_buckets_are_warn(self, bucket):
        scenario = scenarios.health_scenario(bucket, random.Random(1))
        assert scenario.level == Level.WARN
        assert scenario.detail.startswith("Resource utilization high")

    def test_bucket_eight_is_canned_error(self):
        scenario = scenarios.health_scenario(8, random.Random(1))
        assert scenario.level == Level.ERROR
        detail = scenario.detail.removeprefix("Error details: ")
        assert detail in scenarios.CANNED_ERRORS

    def test_bucket_nine_is_debug(self):
        scenario = scenarios.health_scenario(9, random.Random(1))
        assert scenario.level == Level.DEBUG
        assert scenario.detail.startswith("Thread pool status: Active=")

    @pytest.mark.parametrize("bucket", [-1, 10])
    def test_out_of_range_bucket_rejected(self, bucket):
        with pytest.raises(ValueError):
            scenarios.health_scenario(bucket)

    def test_sub_values_respect_ranges(self):
        rng = random.Random(7)
        for _ in range(200):
            cpu, mem = map(int, re.findall(r"\d+", scenarios.health_scenario(6, rng).detail))
            assert 60 <= cpu < 100
            assert 70 <= mem < 100
            conns, mb = map(int, re.findall(r"\d+", scenarios.health_scenario(0, rng).detail))
            assert 0 <= conns < 100
            assert 0 <= mb < 1024
            active, queued = map(int, re.findall(r"\d+", scenarios.health_scenario(9, rng).detail))
            assert 0 <= active < 20
            assert 0 <= queued < 50

    def test_pinned_draw_selects_bucket(self):
        assert scenarios.draw_health_scenario(FixedRandom(draw=8)).level == Level.ERROR
        assert scenarios.draw_health_scenario(FixedRandom(draw=0)).level == Level.INFO


class TestBusinessOperation:
    def test_fields(self):
        rng = random.Random(3)
        for _ in range(100):
            op = scenarios.business_operation(rng)
            assert op.name in scenarios.OPERATIONS
            assert 0 <= op.duration_seconds < 2

    def test_success_threshold(self):
        assert scenarios.business_operation(FixedRandom(draw=7)).succeeded is True
        assert scenarios.business_operation(FixedRandom(draw=8)).succeeded is False


class TestApiMetrics:
    def test_counts_add_up(self):
        metrics = scenarios.api_metrics(FixedRandom(draw=1000, fraction=0.5))
        assert metrics.total_requests == 1000
        assert metrics.successful_requests == 950
        assert metrics.failed_requests == 50
        assert metrics.avg_response_ms == 350.0

    def test_ranges(self):
        rng = random.Random(11)
        for _ in range(200):
            metrics = scenarios.api_metrics(rng)
            assert 500 <= metrics.total_requests < 1500
            assert 100 <= metrics.avg_response_ms < 600

    def test_degraded_only_above_400(self):
        assert ApiMetrics(1000, 950, 50, 400.0).degraded is False
        assert ApiMetrics(1000, 950, 50, 400.01).degraded is True


class TestErrorScenario:
    def test_covered_draws(self):
        timeout = scenarios.error_scenario(0)
        assert isinstance(timeout, TimeoutError)
        assert str(timeout) == "Database connection timeout"
        assert isinstance(scenarios.error_scenario(1), ValueError)
        assert isinstance(scenarios.error_scenario(2), AttributeError)

    def test_uncovered_draw_returns_none(self):
        assert scenarios.error_scenario(3) is None

    def test_drawn_scenarios_always_covered(self):
        rng = random.Random(5)
        for _ in range(100):
            assert scenarios.draw_error_scenario(rng) is not None


class TestCannedChoices:
    def test_warning_message(self):
        assert scenarios.warning_message(random.Random(2)) in scenarios.WARNINGS

    def test_performance_delay_range(self):
        rng = random.Random(9)
        for _ in range(200):
            assert 100 <= scenarios.performance_delay_ms(rng) < 1100
