import pytest

from helpers import FakeClock
from src.agent.registry import AgentRegistry


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> AgentRegistry:
    return AgentRegistry()
