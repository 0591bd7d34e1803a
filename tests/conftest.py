import os
import sys

import pytest

# ensure workspace root is on sys.path so our application packages can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from store.registry import CacheRegistry


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def caches(clock):
    return CacheRegistry(clock=clock)


# Prevent pytest from attempting to collect any modules inside the engine
# package itself; collection stays focused on the tests directory.

def pytest_ignore_collect(collection_path, config):
    if os.path.sep + 'engine' + os.path.sep in str(collection_path):
        return True
