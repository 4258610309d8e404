"""
Pytest configuration and fixtures for Project Pulse tests.
"""

import pytest
from datetime import date
from typing import Any, List, Optional

from project_pulse.agents.base import BaseAgent
from project_pulse.models.core import ProjectData
from project_pulse.models.messaging import AgentMessage
from project_pulse.orchestration.registry import AgentDirectory
from project_pulse.sample_data import sample_project_data
from project_pulse.utils.config import set_config


@pytest.fixture(autouse=True)
def reset_global_config():
    """Keep the cached global configuration from leaking between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def sample_project_dict() -> dict:
    """The built-in sample project in camelCase form."""
    return sample_project_data()


@pytest.fixture
def sample_project(sample_project_dict: dict) -> ProjectData:
    """The built-in sample project validated into models."""
    return ProjectData.model_validate(sample_project_dict)


@pytest.fixture
def directory() -> AgentDirectory:
    """A fresh, empty agent directory."""
    return AgentDirectory()


@pytest.fixture
def fixed_today() -> date:
    """Reference date inside the sample project's schedule."""
    return date(2024, 1, 19)


class RecordingAgent(BaseAgent):
    """Agent that returns a canned result and records what it receives."""

    def __init__(self, agent_id: str, directory: Optional[AgentDirectory] = None,
                 result: Any = None, should_fail: bool = False):
        super().__init__(agent_id, f"Recording {agent_id}", directory)
        self.result = result
        self.should_fail = should_fail
        self.process_calls: List[Any] = []
        self.handled: List[AgentMessage] = []

    async def process(self, data: Any) -> Any:
        self.process_calls.append(data)
        return await self._run_tracked("record", self._operation)

    async def _operation(self):
        if self.should_fail:
            raise RuntimeError(f"Mock failure in {self.id}")
        return self.result

    async def handle_message(self, message: AgentMessage) -> None:
        self.handled.append(message)


class ExplodingHandlerAgent(RecordingAgent):
    """Agent whose message handler always raises."""

    async def handle_message(self, message: AgentMessage) -> None:
        raise RuntimeError("handler exploded")


@pytest.fixture
def recording_agent_cls():
    """The recording agent class, for tests that build their own instances."""
    return RecordingAgent


@pytest.fixture
def exploding_agent_cls():
    return ExplodingHandlerAgent


@pytest.fixture
def recording_agent(directory: AgentDirectory) -> RecordingAgent:
    agent = RecordingAgent("recorder", directory)
    directory.register(agent)
    return agent


@pytest.fixture
def failing_agent(directory: AgentDirectory) -> RecordingAgent:
    agent = RecordingAgent("failing-agent", directory, should_fail=True)
    directory.register(agent)
    return agent
