"""
Unit tests for the agent directory.
"""

from unittest.mock import MagicMock

from project_pulse.orchestration.registry import AgentDirectory


class TestAgentDirectory:
    """Test cases for AgentDirectory."""

    def test_register_and_lookup(self, directory, recording_agent_cls):
        agent = recording_agent_cls("dependency-tracker")

        assert directory.register(agent) is True
        assert directory.lookup("dependency-tracker") is agent
        assert "dependency-tracker" in directory
        assert len(directory) == 1

    def test_lookup_unknown_returns_none(self, directory):
        assert directory.lookup("missing") is None

    def test_register_rejects_invalid_agents(self, directory):
        no_id = MagicMock(spec=[])
        empty_id = MagicMock()
        empty_id.id = ""

        assert directory.register(None) is False
        assert directory.register(no_id) is False
        assert directory.register(empty_id) is False
        assert len(directory) == 0

    def test_register_replaces_same_id(self, directory, recording_agent_cls):
        first = recording_agent_cls("risk-detector")
        second = recording_agent_cls("risk-detector")

        directory.register(first)
        directory.register(second)

        assert directory.lookup("risk-detector") is second
        assert len(directory) == 1

    def test_remove_is_idempotent(self, directory, recording_agent_cls):
        directory.register(recording_agent_cls("team-a"))

        directory.remove("team-a")
        directory.remove("team-a")
        directory.remove("never-registered")

        assert directory.lookup("team-a") is None
        assert directory.list_ids() == []

    def test_list_and_clear(self, directory, recording_agent_cls):
        agents = [recording_agent_cls(agent_id) for agent_id in ("a", "b", "c")]
        for agent in agents:
            directory.register(agent)

        assert sorted(directory.list_ids()) == ["a", "b", "c"]
        assert set(directory.list_all()) == set(agents)

        directory.clear()
        assert len(directory) == 0

    def test_directories_are_independent(self, recording_agent_cls):
        first = AgentDirectory()
        second = AgentDirectory()

        first.register(recording_agent_cls("a"))

        assert "a" in first
        assert "a" not in second
