import random

import pytest

from rrsim.engine import (
    DEFAULT_QUANTUM,
    InvalidConfiguration,
    InvariantViolation,
    NotFound,
    RoundRobinStrategy,
    Scheduler,
    SchedulerStateError,
    SchedulerType,
    Slice,
    create_scheduler,
)


def _ends(sched, *pids):
    return [sched.lookup(pid).completion_time for pid in pids]


def _waits(sched, *pids):
    return [sched.lookup(pid).waiting_time for pid in pids]


def test_single_process(make_scheduler):
    sched = make_scheduler(4, (0, 0, 4))
    sched.run()
    proc = sched.lookup(0)
    assert proc.completion_time == 4
    assert proc.waiting_time == 0
    assert proc.remaining_time == 0
    assert proc.state == "DONE"


def test_two_equal_processes(make_scheduler):
    sched = make_scheduler(4, (0, 0, 4), (1, 0, 4))
    sched.run()
    assert _ends(sched, 0, 1) == [4, 8]
    assert _waits(sched, 0, 1) == [0, 4]


def test_shorter_second_process(make_scheduler):
    sched = make_scheduler(4, (0, 0, 5), (1, 0, 3))
    sched.run()
    assert _ends(sched, 0, 1) == [8, 7]
    assert _waits(sched, 0, 1) == [3, 4]


def test_process_needs_several_quanta(make_scheduler):
    sched = make_scheduler(4, (0, 0, 7))
    sched.run()
    assert sched.lookup(0).completion_time == 7
    assert sched.lookup(0).waiting_time == 0
    assert sched.gantt_chart == [Slice(0, 0, 4), Slice(0, 4, 7)]


def test_three_processes_small_quantum(make_scheduler):
    sched = make_scheduler(2, (0, 0, 3), (1, 0, 3), (2, 0, 3))
    sched.run()
    assert [s.pid for s in sched.gantt_chart] == [0, 1, 2, 0, 1, 2]
    assert [s.length for s in sched.gantt_chart] == [2, 2, 2, 1, 1, 1]
    assert _ends(sched, 0, 1, 2) == [7, 8, 9]
    assert _waits(sched, 0, 1, 2) == [4, 5, 6]


def test_waiting_time_accumulation(make_scheduler):
    sched = make_scheduler(2, (0, 0, 4), (1, 0, 2))
    sched.run()
    assert _waits(sched, 0, 1) == [2, 2]


def test_late_arrival_idle_gap(make_scheduler):
    sched = make_scheduler(4, (0, 0, 2), (1, 3, 2))
    sched.run()
    assert _ends(sched, 0, 1) == [2, 5]
    assert sched.gantt_chart == [Slice(0, 0, 2), Slice(1, 3, 5)]
    assert _waits(sched, 0, 1) == [0, 0]


def test_idle_jumps_to_exact_arrival(make_scheduler):
    sched = make_scheduler(4, (0, 5, 2), (1, 10, 2))
    sched.run()
    assert sched.current_time() == 12
    assert [s.start for s in sched.gantt_chart] == [5, 10]
    assert sched.lookup(0).start_time == 5
    assert any("CPU idle until t=5" in e for e in sched.event_log)
    assert any("t=7: CPU idle until t=10" in e for e in sched.event_log)


def test_mixed_arrivals(make_scheduler):
    sched = make_scheduler(3, (0, 0, 5), (1, 2, 4), (2, 5, 2))
    sched.run()
    assert _ends(sched, 0, 1, 2) == [8, 11, 10]
    assert [s.pid for s in sched.gantt_chart] == [0, 1, 0, 2, 1]
    # arrivals during a slice only wait from their arrival onwards
    assert _waits(sched, 0, 1, 2) == [3, 5, 3]


def test_arrival_at_slice_end_queues_before_preempted(make_scheduler):
    sched = make_scheduler(2, (0, 0, 4), (1, 2, 1))
    sched.run()
    assert [s.pid for s in sched.gantt_chart] == [0, 1, 0]
    assert _ends(sched, 0, 1) == [5, 3]
    assert _waits(sched, 0, 1) == [1, 0]


def test_equal_arrivals_run_in_pid_order(make_scheduler):
    sched = make_scheduler(1, (7, 0, 1), (3, 0, 1), (5, 0, 1))
    sched.run()
    assert [s.pid for s in sched.gantt_chart] == [3, 5, 7]


def test_zero_burst_never_scheduled(make_scheduler):
    sched = make_scheduler(4, (0, 0, 0), (1, 0, 2))
    sched.run()
    with pytest.raises(NotFound):
        sched.lookup(0)
    assert [p.pid for p in sched.all_processes()] == [1]
    assert sched.current_time() == 2


def test_empty_run(make_scheduler):
    sched = make_scheduler(4)
    sched.run()
    assert sched.current_time() == 0
    assert sched.gantt_chart == []
    assert sched.done()


def test_clock_is_zero_before_run(make_scheduler):
    sched = make_scheduler(4, (0, 3, 2))
    assert sched.current_time() == 0
    assert not sched.done()


def test_reset_clears_state(make_scheduler):
    sched = make_scheduler(4, (0, 0, 2), (1, 1, 6))
    sched.run()
    sched.reset()
    assert sched.current_time() == 0
    assert sched.all_processes() == []
    assert sched.queued_pids() == []
    assert sched.gantt_chart == []
    assert sched.status == "IDLE"


def test_run_twice_needs_reset(make_scheduler):
    sched = make_scheduler(4, (0, 0, 2))
    sched.run()
    assert sched.status == "TERMINATED"
    with pytest.raises(SchedulerStateError):
        sched.run()

    sched.reset()
    sched.admit(0, 0, 3)
    sched.run()
    assert sched.lookup(0).completion_time == 3


@pytest.mark.parametrize("quantum", [0, -1, 2.5, "4", True, None])
def test_invalid_quantum(quantum):
    with pytest.raises(InvalidConfiguration):
        RoundRobinStrategy(quantum)


def test_factory_defaults():
    sched = create_scheduler()
    assert isinstance(sched, Scheduler)
    assert sched.strategy.quantum == DEFAULT_QUANTUM
    assert create_scheduler(SchedulerType.ROUND_ROBIN, quantum=2).strategy.quantum == 2
    with pytest.raises(InvalidConfiguration):
        create_scheduler(SchedulerType.ROUND_ROBIN, quantum=0)


def test_event_log_is_bounded():
    sched = Scheduler(RoundRobinStrategy(1), event_log_limit=5)
    for pid in range(10):
        sched.admit(pid, 0, 2)
    sched.run()
    assert len(sched.event_log) == 5


def _random_workload(rng, n):
    return [(pid, rng.randint(0, 30), rng.randint(0, 9)) for pid in rng.sample(range(100), n)]


@pytest.mark.parametrize("seed", range(25))
def test_invariants_on_random_workloads(make_scheduler, seed):
    rng = random.Random(seed)
    quantum = rng.randint(1, 6)
    workload = _random_workload(rng, rng.randint(1, 12))
    sched = make_scheduler(quantum, *workload)
    sched.run()

    slices = sched.gantt_chart
    for prev, cur in zip(slices, slices[1:]):
        assert prev.end <= cur.start
    assert all(1 <= s.length <= quantum for s in slices)

    for proc in sched.all_processes():
        own = [s for s in slices if s.pid == proc.pid]
        assert sum(s.length for s in own) == proc.burst_time
        assert proc.remaining_time == 0
        assert proc.completion_time == own[-1].end
        assert proc.completion_time >= proc.arrival_time + proc.burst_time
        assert proc.waiting_time == proc.completion_time - proc.arrival_time - proc.burst_time

        # waiting time equals the time other processes held the CPU while this one was in the system
        others = sum(
            max(0, min(s.end, proc.completion_time) - max(s.start, proc.arrival_time))
            for s in slices
            if s.pid != proc.pid
        )
        assert proc.waiting_time == others

    assert {p.pid for p in sched.all_processes()} == {pid for pid, _, burst in workload if burst > 0}
    if slices:
        assert sched.current_time() == slices[-1].end


def test_clock_never_moves_backwards(make_scheduler):
    sched = make_scheduler(4)
    sched.advance_to(6)
    assert sched.current_time() == 6
    with pytest.raises(InvariantViolation):
        sched.advance_to(5)
    assert sched.current_time() == 6


def test_completion_is_stamped_once(make_scheduler):
    sched = make_scheduler(4, (0, 0, 2))
    sched.run()
    with pytest.raises(InvariantViolation):
        sched.complete(sched.lookup(0))
    assert sched.lookup(0).completion_time == 2
