"""Tests for job executors and the lifecycle timers."""

import asyncio

import pytest

from propr.jobs.executor import BaseExecutor, SimulatedExecutor, transition_delays
from propr.jobs.payloads import SIMULATED_FAILURE, SIMULATED_RESULT
from propr.models.enums import JobStatus, SimulationMode
from propr.models.review import ReviewRequest

REQUEST = ReviewRequest(
    organization_url="https://dev.azure.com/acme/",
    project_id="p1",
    repository_id="r1",
    pull_request_id=7,
    iteration_id=1,
)


class RecordingExecutor(BaseExecutor):
    """Executor that only records submissions; tests drive begin/finish."""

    def __init__(self, store):
        super().__init__(store)
        self.submitted = []

    def submit(self, job):
        self.submitted.append(job.job_id)


@pytest.mark.parametrize(
    "delay_ms, expected",
    [
        (6000, (1.98, 6.0)),
        (100, (0.033, 0.1)),
        (10000, (2.0, 10.0)),
        (0, (0.0, 0.0)),
    ],
)
def test_transition_delays(delay_ms, expected):
    processing, terminal = transition_delays(delay_ms)
    assert processing == pytest.approx(expected[0])
    assert terminal == pytest.approx(expected[1])
    assert processing <= terminal


def test_begin_and_finish_drive_state_machine(store):
    executor = RecordingExecutor(store)
    job = store.create(REQUEST)
    executor.submit(job)
    assert executor.submitted == [job.job_id]

    assert executor.begin(job.job_id).status == JobStatus.PROCESSING
    done = executor.finish(job.job_id, result=SIMULATED_RESULT)
    assert done.status == JobStatus.COMPLETED
    assert executor.finish(job.job_id, error="late") is None
    assert store.get(job.job_id).status == JobStatus.COMPLETED


def test_finish_on_pending_job_passes_through_processing(store, caplog):
    executor = RecordingExecutor(store)
    job = store.create(REQUEST)

    with caplog.at_level("INFO", logger="propr.jobs.store"):
        failed = executor.finish(job.job_id, error="boom")

    assert failed.status == JobStatus.FAILED
    messages = [r.getMessage() for r in caplog.records]
    assert any("pending -> processing" in m for m in messages)
    assert any("processing -> failed" in m for m in messages)


def test_finish_requires_exactly_one_outcome(store):
    executor = RecordingExecutor(store)
    job = store.create(REQUEST)
    with pytest.raises(ValueError):
        executor.finish(job.job_id)
    with pytest.raises(ValueError):
        executor.finish(job.job_id, result=SIMULATED_RESULT, error="boom")


def test_finish_unknown_job_is_noop(store):
    executor = RecordingExecutor(store)
    assert executor.finish("missing", result=SIMULATED_RESULT) is None


@pytest.mark.asyncio
async def test_simulated_executor_success(store):
    executor = SimulatedExecutor(store, delay_ms=90, simulate=SimulationMode.SUCCESS)
    job = store.create(REQUEST)
    executor.submit(job)
    assert executor.pending_timers == 2

    seen = []
    for _ in range(40):
        status = store.get(job.job_id).status
        if not seen or seen[-1] != status:
            seen.append(status)
        if status.is_terminal:
            break
        await asyncio.sleep(0.005)

    assert seen == [JobStatus.PENDING, JobStatus.PROCESSING, JobStatus.COMPLETED]
    final = store.get(job.job_id)
    assert final.result == SIMULATED_RESULT
    assert final.error is None
    assert executor.pending_timers == 0


@pytest.mark.asyncio
async def test_simulated_executor_fail(store):
    executor = SimulatedExecutor(store, delay_ms=30, simulate="fail")
    job = store.create(REQUEST)
    executor.submit(job)

    await asyncio.sleep(0.1)

    final = store.get(job.job_id)
    assert final.status == JobStatus.FAILED
    assert final.error == SIMULATED_FAILURE
    assert final.result is None


@pytest.mark.asyncio
async def test_zero_delay_never_skips_processing(store, caplog):
    executor = SimulatedExecutor(store, delay_ms=0)
    job = store.create(REQUEST)

    with caplog.at_level("INFO", logger="propr.jobs.store"):
        executor.submit(job)
        await asyncio.sleep(0.02)

    assert store.get(job.job_id).status == JobStatus.COMPLETED
    assert any("pending -> processing" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_timer_for_removed_job_is_tolerated(store):
    executor = SimulatedExecutor(store, delay_ms=20)
    job = store.create(REQUEST)
    executor.submit(job)
    store._jobs.pop(job.job_id)

    await asyncio.sleep(0.06)

    assert store.get(job.job_id) is None
    assert executor.pending_timers == 0


@pytest.mark.asyncio
async def test_shutdown_cancels_outstanding_timers(store):
    executor = SimulatedExecutor(store, delay_ms=50)
    job = store.create(REQUEST)
    executor.submit(job)
    executor.shutdown()

    await asyncio.sleep(0.08)

    assert executor.pending_timers == 0
    assert store.get(job.job_id).status == JobStatus.PENDING
