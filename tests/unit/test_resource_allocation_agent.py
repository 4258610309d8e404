"""
Unit tests for the resource allocation agent.
"""

import pytest

from project_pulse.agents.resource_allocation_agent import ResourceAllocationAgent
from project_pulse.models.analysis import ResourceAnalysisInput
from project_pulse.models.core import Priority
from project_pulse.utils.config import AgentSettings


def _resource_input(project_data):
    return ResourceAnalysisInput(
        resources=project_data.resources,
        tasks=project_data.tasks,
        teams=project_data.teams,
        skill_requirements=project_data.skill_requirements,
    )


class TestResourceAllocationAgent:
    """Test cases for ResourceAllocationAgent."""

    @pytest.mark.asyncio
    async def test_sample_project_utilization(self, sample_project):
        optimization = await ResourceAllocationAgent().process(_resource_input(sample_project))

        balance = {entry.resource_id: entry for entry in optimization.workload_balancing}
        assert balance["user-1"].current_utilization == 0
        assert balance["user-1"].status == "underutilized"
        assert balance["user-2"].current_utilization == 52.5
        assert balance["user-2"].status == "balanced"
        assert balance["user-3"].current_utilization == 250
        assert balance["user-3"].status == "overallocated"
        assert balance["user-4"].current_utilization == 150

        allocations = {allocation.resource_id: allocation for allocation in optimization.allocations}
        assert allocations["user-2"].task_ids == ["task-2"]
        assert allocations["user-2"].allocated_hours == 42

        assert optimization.skill_gap_analysis == []
        assert optimization.urgent_requests == []
        assert optimization.reallocation_suggestions == []

    @pytest.mark.asyncio
    async def test_reallocation_within_team(self):
        optimization = await ResourceAllocationAgent().process({
            "resources": [
                {"id": "r1", "name": "Ana", "teamId": "web", "skills": ["React"], "capacity": 40},
                {"id": "r2", "name": "Ben", "teamId": "web", "skills": ["React"], "capacity": 40},
                {"id": "r3", "name": "Cy", "teamId": "ops", "skills": ["React"], "capacity": 40},
            ],
            "tasks": [
                {"id": "t1", "title": "Big", "assigneeId": "r1", "estimatedHours": 30, "status": "in-progress"},
                {"id": "t2", "title": "Small", "assigneeId": "r1", "estimatedHours": 20},
            ],
            "skill_requirements": [{"taskId": "t2", "skill": "React"}],
        })

        suggestions = optimization.reallocation_suggestions
        assert len(suggestions) == 1
        assert suggestions[0].task_id == "t2"
        assert suggestions[0].from_resource == "r1"
        assert suggestions[0].to_resource == "r2"

    @pytest.mark.asyncio
    async def test_skill_gap_and_urgent_requests(self):
        optimization = await ResourceAllocationAgent().process({
            "resources": [{"id": "r1", "name": "Ana", "skills": ["Python"]}],
            "tasks": [
                {"id": "t1", "title": "Rust port", "assigneeId": "r1", "priority": "critical"},
                {"id": "t2", "title": "Docs", "priority": "high"},
            ],
            "skill_requirements": [{"taskId": "t1", "skill": "Rust"}],
        })

        assert [gap.skill for gap in optimization.skill_gap_analysis] == ["Rust"]
        assert optimization.skill_gap_analysis[0].task_ids == ["t1"]

        requests = {(request.task_id, request.skill): request for request in optimization.urgent_requests}
        assert requests[("t1", "Rust")].priority == Priority.CRITICAL
        assert requests[("t2", "general")].reason == "High-priority task has no assignee"

    @pytest.mark.asyncio
    async def test_target_utilization_setting(self):
        agent = ResourceAllocationAgent(settings=AgentSettings(target_utilization_percent=50))

        optimization = await agent.process({
            "resources": [{"id": "r1", "name": "Ana", "capacity": 40}],
            "tasks": [{"id": "t1", "title": "Work", "assigneeId": "r1", "estimatedHours": 24}],
        })

        entry = optimization.workload_balancing[0]
        assert entry.current_utilization == 60
        assert entry.recommended_utilization == 50
        assert entry.status == "high"
