import asyncio


class HealthGauge:
    """
    Readiness gauge fed by resolver plugin errors.

    `InstrumentedObserver` calls `womp` for every plugin error seen while
    resolving, and `tick_health_task` drains the gauge by one each interval.
    While the value is above `threshold` the readiness probe fails, so a
    service whose resolvers keep failing is taken out of rotation until the
    errors die down.
    """

    def __init__(self, value: int = 0, health_threshold: int = 100) -> None:
        if health_threshold < 0:
            raise ValueError("health_threshold must not be negative")
        self._value = max(0, value)
        self._health_threshold = health_threshold
        self._lock = asyncio.Lock()

    @property
    def value(self) -> int:
        return self._value

    @property
    def threshold(self) -> int:
        return self._health_threshold

    async def womp(self, d=1) -> int:
        """Count `d` plugin errors and return the new value."""
        async with self._lock:
            self._value += int(d)
            return self._value

    async def tick(self) -> None:
        async with self._lock:
            self._value = max(0, self._value - 1)

    async def is_healthy(self) -> bool:
        async with self._lock:
            return self._value <= self._health_threshold

    def __repr__(self) -> str:
        return f"HealthGauge(value={self._value}, threshold={self._health_threshold})"


async def tick_health_task(health_gauge: HealthGauge, interval: float = 1.0) -> None:
    """Drain the gauge once per interval until cancelled."""
    while True:
        await asyncio.sleep(interval)
        await health_gauge.tick()
