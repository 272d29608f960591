"""Fake Time implementation for testing."""

from datetime import UTC, datetime, timedelta

from monosync.gateway.time.abc import Time


class FakeTime(Time):
    """In-memory time that records sleeps instead of blocking.

    Each sleep advances the fake clock so `now()` stays consistent.
    """

    def __init__(self, *, current_time: datetime | None = None) -> None:
        self._current_time = (
            current_time if current_time is not None else datetime(2024, 1, 1, tzinfo=UTC)
        )
        self._sleep_calls: list[float] = []

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        self._current_time = self._current_time + timedelta(seconds=seconds)

    def now(self) -> datetime:
        return self._current_time

    @property
    def sleep_calls(self) -> list[float]:
        """Durations passed to sleep(), in call order."""
        return list(self._sleep_calls)
