"""
Prometheus metrics for playback sessions.

Provides observability metrics for ad-break synchronization:
- Break start and start-failure counters
- Readiness signal counter
- Scheduler phase gauge
- Companion show/clear counters
- Content fallback and error counters by type
- Active session gauge
"""

from __future__ import annotations

import logging
from typing import ClassVar

from prometheus_client import Counter, Gauge

logger = logging.getLogger(__name__)


class PlaybackMetrics:
    """Prometheus metrics for one playback session.

    All metrics use the 'playback_service_session_' prefix and carry a
    session_id label (except the service-wide active session gauge).

    Note: Metrics are class-level singletons to avoid Prometheus
    "Duplicated timeseries" errors when creating multiple instances.
    """

    NAMESPACE = "playback_service"
    SUBSYSTEM = "session"

    _breaks_started: ClassVar[Counter | None] = None
    _break_start_failures: ClassVar[Counter | None] = None
    _readiness_signals: ClassVar[Counter | None] = None
    _scheduler_phase: ClassVar[Gauge | None] = None
    _companions_shown: ClassVar[Counter | None] = None
    _companions_cleared: ClassVar[Counter | None] = None
    _content_fallbacks: ClassVar[Counter | None] = None
    _errors: ClassVar[Counter | None] = None
    _active_sessions: ClassVar[Gauge | None] = None
    _metrics_initialized: ClassVar[bool] = False

    def __init__(self, session_id: str | None = None) -> None:
        """Initialize session metrics.

        Args:
            session_id: Session identifier for labels (optional)
        """
        self.session_id = session_id or "unknown"
        self._ensure_metrics_initialized()

    @classmethod
    def _ensure_metrics_initialized(cls) -> None:
        """Initialize all Prometheus metrics (once per class)."""
        if cls._metrics_initialized:
            return

        prefix = f"{cls.NAMESPACE}_{cls.SUBSYSTEM}"

        cls._breaks_started = Counter(
            f"{prefix}_breaks_started_total",
            "Total ad breaks started",
            ["session_id"],
        )

        cls._break_start_failures = Counter(
            f"{prefix}_break_start_failures_total",
            "Total start-break actions that raised",
            ["session_id"],
        )

        cls._readiness_signals = Counter(
            f"{prefix}_readiness_signals_total",
            "Total break-ready signals from the ad subsystem",
            ["session_id"],
        )

        cls._scheduler_phase = Gauge(
            f"{prefix}_scheduler_phase",
            "Scheduler phase (0=idle, 1=armed, 2=break_active)",
            ["session_id"],
        )

        # Companion metrics
        cls._companions_shown = Counter(
            f"{prefix}_companions_shown_total",
            "Total companion creatives rendered",
            ["session_id"],
        )

        cls._companions_cleared = Counter(
            f"{prefix}_companions_cleared_total",
            "Total companion creatives cleared by hold expiry",
            ["session_id"],
        )

        cls._content_fallbacks = Counter(
            f"{prefix}_content_fallbacks_total",
            "Total times ad scheduling was abandoned for plain content",
            ["session_id", "reason"],
        )

        # Error metrics
        cls._errors = Counter(
            f"{prefix}_errors_total",
            "Total errors by type",
            ["session_id", "error_type"],
        )

        cls._active_sessions = Gauge(
            f"{prefix}_active_sessions",
            "Number of active playback sessions",
        )

        cls._metrics_initialized = True

    @property
    def breaks_started(self) -> Counter:
        return self._breaks_started

    @property
    def break_start_failures(self) -> Counter:
        return self._break_start_failures

    @property
    def readiness_signals(self) -> Counter:
        return self._readiness_signals

    @property
    def scheduler_phase(self) -> Gauge:
        return self._scheduler_phase

    @property
    def companions_shown(self) -> Counter:
        return self._companions_shown

    @property
    def companions_cleared(self) -> Counter:
        return self._companions_cleared

    @property
    def content_fallbacks(self) -> Counter:
        return self._content_fallbacks

    @property
    def errors(self) -> Counter:
        return self._errors

    @property
    def active_sessions(self) -> Gauge:
        return self._active_sessions

    def record_break_started(self) -> None:
        """Record a break start."""
        self.breaks_started.labels(session_id=self.session_id).inc()

    def record_break_start_failure(self) -> None:
        """Record a start-break action failure."""
        self.break_start_failures.labels(session_id=self.session_id).inc()

    def record_readiness_signal(self) -> None:
        """Record a break-ready signal."""
        self.readiness_signals.labels(session_id=self.session_id).inc()

    def set_scheduler_phase(self, phase_value: int) -> None:
        """Set scheduler phase gauge.

        Args:
            phase_value: 0=idle, 1=armed, 2=break_active
        """
        self.scheduler_phase.labels(session_id=self.session_id).set(phase_value)

    def record_companion_shown(self) -> None:
        """Record a companion render."""
        self.companions_shown.labels(session_id=self.session_id).inc()

    def record_companion_cleared(self) -> None:
        """Record a companion cleared by hold expiry."""
        self.companions_cleared.labels(session_id=self.session_id).inc()

    def record_content_fallback(self, reason: str) -> None:
        """Record ad scheduling abandoned in favour of plain content.

        Args:
            reason: Error type that caused the fallback
        """
        self.content_fallbacks.labels(session_id=self.session_id, reason=reason).inc()

    def record_error(self, error_type: str) -> None:
        """Record error by type.

        Args:
            error_type: Error type identifier
        """
        self.errors.labels(
            session_id=self.session_id,
            error_type=error_type,
        ).inc()

    def set_active_sessions(self, count: int) -> None:
        """Set active session gauge.

        Args:
            count: Number of active sessions
        """
        self.active_sessions.set(count)
