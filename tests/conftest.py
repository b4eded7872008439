import pytest

from rrsim import session
from rrsim.engine import DEFAULT_QUANTUM, RoundRobinStrategy, Scheduler


@pytest.fixture
def make_scheduler():
    def _make(quantum, *procs):
        sched = Scheduler(RoundRobinStrategy(quantum))
        for pid, arrival, burst in procs:
            sched.admit(pid, arrival, burst)
        return sched

    return _make


@pytest.fixture
def fresh_session():
    session.reset_session()
    session.settings["quantum"] = DEFAULT_QUANTUM
    session.settings["event_log_limit"] = 120
    session.scheduler = None
    yield session
    session.reset_session()
    session.scheduler = None
