"""
Shared test fixtures for the job orchestration suite.

Provides: fake clock, stub gateways, job store, orchestrator and settings fixtures
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from app.core.config import Settings
from app.services.job_store import InMemoryJobStore
from app.services.orchestrator import JobOrchestrator
from app.services.transformation_gateway import GatewayError

RESULT_URL = "https://replicate.delivery/pbxt/generated.png"


class FakeClock:
    """Manually advanced clock returning timezone-aware datetimes."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class StubGateway:
    """Records calls; optionally waits on ``release`` before answering."""

    def __init__(self, result=RESULT_URL, error=None, release=None):
        self.result = result
        self.error = error
        self.release = release
        self.calls = []
        self._lock = threading.Lock()

    def generate(self, image_bytes, prompt):
        with self._lock:
            self.calls.append((image_bytes, prompt))
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.result


class EchoGateway:
    """Derives the result URL from the image bytes; fails for payloads starting with b"fail"."""

    def generate(self, image_bytes, prompt):
        name = image_bytes.decode()
        if name.startswith("fail"):
            raise GatewayError(f"provider rejected {name}")
        return f"https://cdn.example.test/{name}.png"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryJobStore(clock=clock)


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="test-transform")
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def make_orchestrator(store, executor):
    def _make(gateway):
        return JobOrchestrator(store, gateway, executor)

    return _make


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        replicate_api_key="test-key",
        replicate_api_url="https://replicate.test/v1/predictions",
        worker_pool_size=2,
        sweep_interval_seconds=3600,
    )
