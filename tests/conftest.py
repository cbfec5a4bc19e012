import pytest

from unmoved_mover.config import Config
from unmoved_mover.state import StateStore


class FakeGateway:
    """Records commands instead of talking to sway."""

    def __init__(self, reject=()):
        self.sent = []
        self.reject = set(reject)

    def send(self, command):
        self.sent.append(command)
        return command not in self.reject


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def config():
    return Config(mod_key='Mod1')


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def make_gateway():
    return FakeGateway


@pytest.fixture
def clock():
    return FakeClock()
