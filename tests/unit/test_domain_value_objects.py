"""Unit tests for domain value objects and entities.

Tests cover:
- RateLimitRule validation
- RateLimitCheckResult retry-after rounding and the unrestricted result
- PhaseTiming validation and camelCase (de)serialization
- TraceFilters pagination validation
- AlertRule validation and WindowStats metric lookup
- AlertHistory resolution
- RateLimitEntry expiry
"""

import math
from datetime import UTC, datetime

import pytest

from src.domain.entities import AlertHistory, RateLimitEntry
from src.domain.enums import AlertChannelType, AlertMetric, RateLimitKeyStrategy
from src.domain.value_objects import (
    AlertRule,
    PhaseTiming,
    RateLimitCheckResult,
    RateLimitRule,
    TraceFilters,
    WindowStats,
)


# =============================================================================
# Rate limit
# =============================================================================


@pytest.mark.unit
class TestRateLimitRule:
    """Tests for RateLimitRule value object."""

    def test_create_valid_rule_defaults_to_ip_strategy(self):
        rule = RateLimitRule(path="/api/auth/login", window_ms=60_000, max_requests=5)

        assert rule.key_strategy is RateLimitKeyStrategy.IP
        assert rule.max_requests == 5

    def test_rejects_path_without_leading_slash(self):
        with pytest.raises(ValueError, match="path must start with '/'"):
            RateLimitRule(path="api/blog", window_ms=1000, max_requests=1)

    @pytest.mark.parametrize("window_ms", [0, -1])
    def test_rejects_non_positive_window(self, window_ms):
        with pytest.raises(ValueError, match="window_ms must be positive"):
            RateLimitRule(path="/api/blog", window_ms=window_ms, max_requests=1)

    def test_rejects_non_positive_max_requests(self):
        with pytest.raises(ValueError, match="max_requests must be positive"):
            RateLimitRule(path="/api/blog", window_ms=1000, max_requests=0)

    def test_rule_is_immutable(self):
        rule = RateLimitRule(path="/api/blog", window_ms=1000, max_requests=1)

        with pytest.raises(AttributeError):
            rule.max_requests = 2  # type: ignore[misc]


@pytest.mark.unit
class TestRateLimitCheckResult:
    """Tests for RateLimitCheckResult."""

    def test_unrestricted_result_has_infinite_quota(self):
        result = RateLimitCheckResult.unrestricted()

        assert result.allowed is True
        assert result.remaining == math.inf
        assert result.limit == math.inf
        assert result.reset_at == 0
        assert result.rule is None

    def test_retry_after_rounds_up_to_whole_seconds(self):
        result = RateLimitCheckResult(
            allowed=False, remaining=0, limit=5, reset_at=10_500
        )

        assert result.retry_after_seconds(now_ms=9_000) == 2

    def test_retry_after_is_never_negative(self):
        result = RateLimitCheckResult(allowed=False, remaining=0, limit=5, reset_at=1000)

        assert result.retry_after_seconds(now_ms=5000) == 0


# =============================================================================
# Traces
# =============================================================================


@pytest.mark.unit
class TestPhaseTiming:
    """Tests for PhaseTiming."""

    def test_total_sums_all_phases(self):
        timing = PhaseTiming(
            middleware=1.0,
            guard=2.0,
            interceptor_pre=3.0,
            handler=4.0,
            interceptor_post=5.0,
        )

        assert timing.total == 15.0

    def test_rejects_negative_phase(self):
        with pytest.raises(ValueError, match="handler must be non-negative"):
            PhaseTiming(handler=-0.1)

    def test_to_dict_uses_camel_case_keys(self):
        timing = PhaseTiming(interceptor_pre=1.5, interceptor_post=2.5)

        assert timing.to_dict() == {
            "middleware": 0.0,
            "guard": 0.0,
            "interceptorPre": 1.5,
            "handler": 0.0,
            "interceptorPost": 2.5,
        }

    def test_from_dict_fills_missing_phases_with_zero(self):
        timing = PhaseTiming.from_dict({"handler": 12.25})

        assert timing.handler == 12.25
        assert timing.middleware == 0.0
        assert timing.interceptor_post == 0.0

    def test_from_dict_accepts_none(self):
        assert PhaseTiming.from_dict(None) == PhaseTiming()


@pytest.mark.unit
class TestTraceFilters:
    """Tests for TraceFilters pagination validation."""

    def test_defaults(self):
        filters = TraceFilters()

        assert filters.limit == 100
        assert filters.offset == 0
        assert filters.method is None

    def test_rejects_zero_limit(self):
        with pytest.raises(ValueError, match="limit must be positive"):
            TraceFilters(limit=0)

    def test_rejects_negative_offset(self):
        with pytest.raises(ValueError, match="offset must be non-negative"):
            TraceFilters(offset=-1)


# =============================================================================
# Alerts
# =============================================================================


def _alert_rule(**overrides) -> AlertRule:
    values = {
        "name": "High Latency",
        "metric": AlertMetric.AVG_DURATION,
        "threshold": 500,
        "window_minutes": 5,
        "cooldown_minutes": 30,
        "channels": (AlertChannelType.LOG,),
    }
    values.update(overrides)
    return AlertRule(**values)


@pytest.mark.unit
class TestAlertRule:
    """Tests for AlertRule validation."""

    def test_enabled_by_default(self):
        assert _alert_rule().enabled is True

    def test_rejects_blank_name(self):
        with pytest.raises(ValueError, match="name must not be blank"):
            _alert_rule(name="   ")

    def test_rejects_negative_threshold(self):
        with pytest.raises(ValueError, match="threshold must be non-negative"):
            _alert_rule(threshold=-1)

    def test_rejects_non_positive_window(self):
        with pytest.raises(ValueError, match="window_minutes must be positive"):
            _alert_rule(window_minutes=0)

    def test_rejects_negative_cooldown(self):
        with pytest.raises(ValueError, match="cooldown_minutes must be non-negative"):
            _alert_rule(cooldown_minutes=-5)

    def test_zero_cooldown_is_allowed(self):
        assert _alert_rule(cooldown_minutes=0).cooldown_minutes == 0


@pytest.mark.unit
class TestWindowStats:
    """Tests for WindowStats.value_for."""

    @pytest.mark.parametrize(
        ("metric", "expected"),
        [
            (AlertMetric.AVG_DURATION, 120.0),
            (AlertMetric.ERROR_RATE, 7.5),
            (AlertMetric.P95_DURATION, 480.0),
        ],
    )
    def test_value_for_each_metric(self, metric, expected):
        stats = WindowStats(
            count=40, avg_duration=120.0, error_rate=7.5, p95_duration=480.0
        )

        assert stats.value_for(metric) == expected


@pytest.mark.unit
class TestAlertHistory:
    """Tests for AlertHistory.resolve."""

    def _history(self) -> AlertHistory:
        return AlertHistory(
            rule_name="High Latency",
            metric="avgDuration",
            threshold=500,
            actual_value=812.4,
            triggered_at=datetime(2025, 1, 15, 12, 0, tzinfo=UTC),
            channels=["sentry", "log"],
        )

    def test_new_history_is_unresolved(self):
        history = self._history()

        assert history.resolved is False
        assert history.resolved_at is None
        assert history.id is None

    def test_resolve_sets_timestamp_and_notes(self):
        history = self._history()
        resolved_at = datetime(2025, 1, 15, 13, 0, tzinfo=UTC)

        history.resolve("deployed fix", now=resolved_at)

        assert history.resolved is True
        assert history.resolved_at == resolved_at
        assert history.notes == "deployed fix"

    def test_resolve_without_notes_keeps_existing_notes(self):
        history = self._history()
        history.notes = "investigating"

        history.resolve()

        assert history.resolved is True
        assert history.notes == "investigating"
        assert history.resolved_at is not None


@pytest.mark.unit
class TestRateLimitEntry:
    """Tests for RateLimitEntry.is_expired."""

    def test_expired_only_after_expires_at(self):
        entry = RateLimitEntry(key="ip:1.2.3.4:/api/**", count=3, window_start=0, expires_at=1000)

        assert entry.is_expired(999) is False
        assert entry.is_expired(1000) is False
        assert entry.is_expired(1001) is True
