import pytest

from regression_suite import FakeClock, make_engine
from spellduel import state
from spellduel.engine.models import REAL_TIME


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return make_engine(clock=clock)


@pytest.fixture
def dodge_engine(clock):
    return make_engine(dodging_enabled=True, clock=clock)


@pytest.fixture
def realtime_engine(clock):
    return make_engine(REAL_TIME, clock=clock)


@pytest.fixture(autouse=True)
def _clean_rooms():
    yield
    for room_id in list(state.duel_rooms):
        state.cleanup_room(room_id)
