import threading
import time

import pytest

from chat_gateway.domain.exceptions import GatewayError
from chat_gateway.infrastructure.retry import RetryOrchestrator, RetryPolicy, sleep_wait


class WaitRecorder:
    def __init__(self, cancel_on=None):
        self.waits = []
        self._cancel_on = cancel_on

    def __call__(self, seconds, cancel):
        self.waits.append(seconds)
        return self._cancel_on is not None and len(self.waits) >= self._cancel_on


class FlakyOperation:
    def __init__(self, failures, error=None, result="ok"):
        self.calls = 0
        self._failures = failures
        self._error = error or GatewayError("server error", "SERVER_ERROR", True)
        self._result = result

    def __call__(self):
        self.calls += 1
        if self._failures < 0 or self.calls <= self._failures:
            raise self._error
        return self._result


def test_exhausted_retries_make_max_plus_one_attempts():
    recorder = WaitRecorder()
    op = FlakyOperation(failures=-1)
    orch = RetryOrchestrator(RetryPolicy(max_retries=3, initial_delay_ms=1000, multiplier=2.0), wait=recorder)
    with pytest.raises(GatewayError) as exc:
        orch.run(op)
    assert exc.value is op._error
    assert op.calls == 4
    assert recorder.waits == pytest.approx([1.0, 2.0, 4.0])


def test_non_retryable_error_is_raised_after_one_attempt():
    recorder = WaitRecorder()
    op = FlakyOperation(failures=-1, error=GatewayError("bad key", "AUTH_ERROR", False))
    orch = RetryOrchestrator(RetryPolicy(max_retries=5), wait=recorder)
    with pytest.raises(GatewayError) as exc:
        orch.run(op)
    assert exc.value.code == "AUTH_ERROR"
    assert op.calls == 1
    assert recorder.waits == []


def test_success_after_transient_failures():
    recorder = WaitRecorder()
    op = FlakyOperation(failures=2, result="done")
    orch = RetryOrchestrator(RetryPolicy(max_retries=3, initial_delay_ms=10), wait=recorder)
    assert orch.run(op) == "done"
    assert op.calls == 3
    assert len(recorder.waits) == 2


def test_success_on_first_attempt_does_not_wait():
    recorder = WaitRecorder()
    op = FlakyOperation(failures=0)
    assert RetryOrchestrator(RetryPolicy(), wait=recorder).run(op) == "ok"
    assert op.calls == 1
    assert recorder.waits == []


def test_fractional_multiplier_compounds():
    recorder = WaitRecorder()
    op = FlakyOperation(failures=-1)
    policy = RetryPolicy(max_retries=3, initial_delay_ms=100, multiplier=1.5)
    with pytest.raises(GatewayError):
        RetryOrchestrator(policy, wait=recorder).run(op)
    assert recorder.waits == pytest.approx([0.1, 0.15, 0.225])
    expected = [policy.delay_before(i) / 1000.0 for i in range(1, 4)]
    assert recorder.waits == pytest.approx(expected)


def test_zero_retries_means_single_attempt():
    op = FlakyOperation(failures=-1)
    with pytest.raises(GatewayError):
        RetryOrchestrator(RetryPolicy(max_retries=0), wait=WaitRecorder()).run(op)
    assert op.calls == 1


def test_cancelled_wait_fails_fast_with_non_retryable_error():
    recorder = WaitRecorder(cancel_on=1)
    op = FlakyOperation(failures=-1)
    orch = RetryOrchestrator(RetryPolicy(max_retries=5), wait=recorder)
    with pytest.raises(GatewayError) as exc:
        orch.run(op, cancel=threading.Event())
    assert exc.value.retryable is False
    assert exc.value.code == "AI_ERROR"
    assert isinstance(exc.value.cause, InterruptedError)
    assert op.calls == 1


def test_cancel_set_before_start_skips_operation():
    cancel = threading.Event()
    cancel.set()
    op = FlakyOperation(failures=0)
    with pytest.raises(GatewayError) as exc:
        RetryOrchestrator(RetryPolicy()).run(op, cancel=cancel)
    assert exc.value.retryable is False
    assert op.calls == 0


def test_real_wait_is_interrupted_by_event():
    cancel = threading.Event()
    op = FlakyOperation(failures=-1)
    orch = RetryOrchestrator(RetryPolicy(max_retries=3, initial_delay_ms=10_000))
    timer = threading.Timer(0.05, cancel.set)
    timer.start()
    started = time.monotonic()
    try:
        with pytest.raises(GatewayError) as exc:
            orch.run(op, cancel=cancel)
    finally:
        timer.cancel()
    assert time.monotonic() - started < 5
    assert exc.value.retryable is False
    assert op.calls == 1


def test_sleep_wait_without_cancel():
    assert sleep_wait(0.0) is False
    assert sleep_wait(0.0, threading.Event()) is False


def test_policy_rejects_negative_retries():
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)


def test_cancelled_error_cause_matches_chained_cause():
    op = FlakyOperation(failures=-1)
    orch = RetryOrchestrator(RetryPolicy(max_retries=2), wait=WaitRecorder(cancel_on=1))
    with pytest.raises(GatewayError) as exc:
        orch.run(op, cancel=threading.Event())
    assert isinstance(exc.value.cause, InterruptedError)
    assert exc.value.__cause__ is exc.value.cause
