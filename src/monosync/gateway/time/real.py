"""Production Time implementation."""

import time
from datetime import UTC, datetime

from monosync.gateway.time.abc import Time


class RealTime(Time):
    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def now(self) -> datetime:
        return datetime.now(UTC)
