"""Shared fixtures for capture booth tests."""

import pytest

from helpers import FakeScheduler, InlineExecutor, RecordingPublisher


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def executor():
    return InlineExecutor()


@pytest.fixture
def publisher():
    return RecordingPublisher()
