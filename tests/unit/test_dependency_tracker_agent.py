"""
Unit tests for the dependency tracker agent.
"""

import pytest

from project_pulse.agents.dependency_tracker_agent import DependencyGraph, DependencyTrackerAgent
from project_pulse.models.analysis import DependencyAnalysisInput
from project_pulse.models.core import Dependency, Task
from project_pulse.models.messaging import AgentStatus, MessageType


def _tasks(*ids):
    return [Task(id=task_id, title=f"Task {task_id}", estimated_hours=16) for task_id in ids]


class TestDependencyGraph:
    """Test cases for DependencyGraph."""

    def test_inline_and_explicit_edges_are_merged(self):
        tasks = [
            Task(id="a", title="A"),
            Task(id="b", title="B", dependencies=["a"]),
        ]
        graph = DependencyGraph(tasks, [Dependency(from_task="a", to_task="b")])

        assert len(graph.edges) == 1
        assert graph.dependents_count("a") == 1

    def test_find_cycle(self):
        graph = DependencyGraph(_tasks("a", "b", "c"), [
            Dependency(from_task="a", to_task="b"),
            Dependency(from_task="b", to_task="c"),
            Dependency(from_task="c", to_task="a"),
        ])

        assert graph.find_cycles() == [["a", "b", "c"]]
        assert graph.topological_order() is None

    def test_dangling_references(self):
        graph = DependencyGraph(_tasks("a"), [Dependency(from_task="a", to_task="ghost")])

        assert graph.dangling == ["ghost"]
        assert graph.edges == []

    def test_critical_path_includes_lag(self):
        graph = DependencyGraph(_tasks("a", "b", "c"), [
            Dependency(from_task="a", to_task="b", lag=0),
            Dependency(from_task="a", to_task="c", lag=5),
        ])

        assert graph.critical_path(hours_per_day=8) == ["a", "c"]


class TestDependencyTrackerAgent:
    """Test cases for DependencyTrackerAgent."""

    @pytest.mark.asyncio
    async def test_sample_project(self, sample_project):
        agent = DependencyTrackerAgent()

        analysis = await agent.process(DependencyAnalysisInput(
            tasks=sample_project.tasks,
            dependencies=sample_project.dependencies,
        ))

        assert analysis.circular_dependencies == []
        assert analysis.critical_path == ["task-1", "task-2", "task-3", "task-4"]
        assert analysis.bottlenecks == ["task-1"]
        assert analysis.health_score == 95
        assert agent.get_state().status == AgentStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_cycles_reduce_health_and_skip_critical_path(self):
        agent = DependencyTrackerAgent()

        analysis = await agent.process({
            "tasks": [task.model_dump() for task in _tasks("a", "b")],
            "dependencies": [
                {"fromTask": "a", "toTask": "b"},
                {"fromTask": "b", "toTask": "a"},
            ],
        })

        assert len(analysis.circular_dependencies) == 1
        assert analysis.critical_path == []
        assert analysis.health_score == 80

    @pytest.mark.asyncio
    async def test_health_is_clamped(self):
        agent = DependencyTrackerAgent()
        dependencies = [Dependency(from_task="a", to_task=f"missing-{i}") for i in range(30)]

        analysis = await agent.process(DependencyAnalysisInput(tasks=_tasks("a"), dependencies=dependencies))

        assert analysis.health_score == 0
        assert len(analysis.dangling_references) == 30

    @pytest.mark.asyncio
    async def test_long_chain(self):
        """A chain deeper than the interpreter recursion limit is analysed in full."""
        ids = [f"t{i}" for i in range(1500)]
        dependencies = [Dependency(from_task=a, to_task=b) for a, b in zip(ids, ids[1:])]

        analysis = await DependencyTrackerAgent().process(
            DependencyAnalysisInput(tasks=_tasks(*ids), dependencies=dependencies)
        )

        assert analysis.circular_dependencies == []
        assert analysis.critical_path == ids
        assert analysis.health_score == 100

    def test_cycle_at_end_of_long_chain(self):
        ids = [f"t{i}" for i in range(1500)]
        dependencies = [Dependency(from_task=a, to_task=b) for a, b in zip(ids, ids[1:])]
        dependencies.append(Dependency(from_task="t1499", to_task="t1498"))

        graph = DependencyGraph(_tasks(*ids), dependencies)

        assert graph.find_cycles() == [["t1498", "t1499"]]

    @pytest.mark.asyncio
    async def test_empty_input(self):
        analysis = await DependencyTrackerAgent().process(DependencyAnalysisInput())

        assert analysis.nodes == []
        assert analysis.critical_path == []
        assert analysis.health_score == 100

    @pytest.mark.asyncio
    async def test_records_dependency_changes(self, directory, recording_agent):
        agent = DependencyTrackerAgent(directory=directory)
        directory.register(agent)

        await recording_agent.send_message(agent.id, MessageType.DEPENDENCY_CHANGE, {"task": "a"})
        await recording_agent.send_message(agent.id, MessageType.STATUS_UPDATE, {})

        assert len(agent.dependency_changes) == 1
        assert len(agent.inbox) == 2
