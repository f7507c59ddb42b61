"""Shared fixtures: in-memory storage, a manual clock, and a seeded RNG."""

from __future__ import annotations

import random

import pytest

from backend.engine.scheduler import ManualScheduler
from backend.models.records import BestRecordStore
from backend.storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> BestRecordStore:
    return BestRecordStore(storage)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
