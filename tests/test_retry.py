try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from campaign_analyst.utils.retry import (
    RetryConfig,
    RetryExhaustedError,
    backoff_delay,
    call_with_backoff,
    is_transient_error,
)


class FlakyOperation:
    def __init__(self, failures: list[Exception], result: str = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("429 Resource has been exhausted", True),
        ("503 Service Unavailable", True),
        ("400 Invalid argument", False),
        ("connection reset", False),
    ],
)
def test_is_transient_error_matches_status_codes(message, expected):
    assert is_transient_error(RuntimeError(message)) is expected


def test_backoff_delay_is_capped_and_jittered():
    assert backoff_delay(1, base_delay=1.0, max_delay=30.0, rand=lambda: 0.0) == 1.0
    assert backoff_delay(3, base_delay=1.0, max_delay=30.0, rand=lambda: 0.0) == 4.0
    assert backoff_delay(1, base_delay=1.0, max_delay=30.0, rand=lambda: 1.0) == pytest.approx(1.1)
    capped = backoff_delay(10, base_delay=1.0, max_delay=30.0, rand=lambda: 0.5)
    assert 30.0 <= capped <= 33.0


def test_retry_config_requires_an_attempt():
    with pytest.raises(ValueError):
        RetryConfig(attempts=0)


@pytest.mark.asyncio
async def test_call_with_backoff_recovers_after_transient_failures():
    operation = FlakyOperation(
        [RuntimeError("429 Too Many Requests"), RuntimeError("503 unavailable")]
    )
    sleep = RecordingSleep()

    result = await call_with_backoff(operation, sleep=sleep, rand=lambda: 0.0)

    assert result == "ok"
    assert operation.calls == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_call_with_backoff_exhausts_after_configured_attempts():
    operation = FlakyOperation([RuntimeError("503 overloaded")] * 10)
    sleep = RecordingSleep()

    with pytest.raises(RetryExhaustedError) as excinfo:
        await call_with_backoff(
            operation,
            retry_config=RetryConfig(attempts=5, base_delay=1.0, max_delay=30.0),
            sleep=sleep,
            rand=lambda: 1.0,
        )

    assert operation.calls == 5
    assert excinfo.value.attempts == 5
    assert "503" in str(excinfo.value.last_error)
    assert len(sleep.delays) == 4
    for attempt, delay in enumerate(sleep.delays, start=1):
        base = min(30.0, 2 ** (attempt - 1))
        assert base <= delay <= base * 1.1 + 1e-9


@pytest.mark.asyncio
async def test_call_with_backoff_propagates_fatal_errors_immediately():
    operation = FlakyOperation([ValueError("400 API key not valid")])
    sleep = RecordingSleep()

    with pytest.raises(ValueError, match="API key not valid"):
        await call_with_backoff(operation, sleep=sleep)

    assert operation.calls == 1
    assert sleep.delays == []
