"""Shared test fixtures for storage tests."""

import sys
from pathlib import Path

# Add project root to path so imports work without PYTHONPATH
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from typing import List

import pytest

from config.storage_config import StorageConfig
from services.storage_service import StorageService
from storage.memory_store import InMemoryObjectStore


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(bucket="reports", region="eu-west-1")


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore(bucket="reports")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage_service(
    memory_store: InMemoryObjectStore,
    storage_config: StorageConfig,
    fake_clock: FakeClock,
) -> StorageService:
    """StorageService over an in-memory bucket with a fake clock."""
    return StorageService(
        memory_store,
        storage_config,
        clock=fake_clock,
        sleep=fake_clock.sleep,
    )
