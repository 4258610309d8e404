"""
Resource Allocation Agent for Project Pulse.

Measures how loaded each person is, proposes moves within a team for the
overloaded ones, and reports skills the project needs but nobody can cover.
"""

import math
from typing import Any, Dict, List, Optional

from .base import BaseAgent
from ..models.analysis import (
    ReallocationSuggestion, ResourceAllocation, ResourceAnalysisInput,
    ResourceOptimization, SkillGap, UrgentRequest, WorkloadBalance
)
from ..models.core import Priority, Resource, Task, TaskStatus
from ..models.messaging import AgentMessage, MessageType
from ..utils.config import AgentSettings

UNAVAILABLE = "unavailable"
URGENT_PRIORITIES = (Priority.HIGH, Priority.CRITICAL)


def _is_assigned_to(task: Task, resource: Resource) -> bool:
    return task.assignee_id == resource.id or task.assignee == resource.name


class ResourceAllocationAgent(BaseAgent):
    """
    Agent responsible for workload balancing and skill coverage.
    """

    def __init__(self, agent_id: str = "resource-allocator", directory=None,
                 settings: Optional[AgentSettings] = None):
        super().__init__(agent_id, "Resource Allocator", directory)
        self.settings = settings or AgentSettings()
        self.resource_requests: List[AgentMessage] = []

    async def process(self, data: Any) -> ResourceOptimization:
        if not isinstance(data, ResourceAnalysisInput):
            data = ResourceAnalysisInput.model_validate(data)
        return await self._run_tracked("optimize_resources", self._optimize, data)

    async def handle_message(self, message: AgentMessage) -> None:
        if message.type == MessageType.RESOURCE_REQUEST:
            self.resource_requests.append(message)
            self.logger.info(f"Queued resource request from {message.sender}")
        else:
            self.logger.debug(f"Ignoring {message.type.value} message from {message.sender}")

    def weekly_load(self, task: Task) -> float:
        """Remaining hours of a task spread over its working weeks."""
        weeks = max(1, math.ceil(task.duration_days(self.settings.hours_per_day) / 7))
        return task.remaining_hours / weeks

    async def _optimize(self, data: ResourceAnalysisInput) -> ResourceOptimization:
        target = self.settings.target_utilization_percent
        open_tasks = [task for task in data.tasks if not task.is_completed]

        required_skills: Dict[str, List[str]] = {}
        for requirement in data.skill_requirements:
            required_skills.setdefault(requirement.task_id, []).append(requirement.skill)

        assignments: Dict[str, List[Task]] = {
            resource.id: [task for task in open_tasks if _is_assigned_to(task, resource)]
            for resource in data.resources
        }
        loads: Dict[str, float] = {
            resource.id: sum(self.weekly_load(task) for task in assignments[resource.id])
            for resource in data.resources
        }

        allocations = [
            ResourceAllocation(
                resource_id=resource.id,
                task_ids=[task.id for task in assignments[resource.id]],
                allocated_hours=round(sum(task.remaining_hours for task in assignments[resource.id]), 1),
            )
            for resource in data.resources
        ]

        balancing = []
        for resource in data.resources:
            utilization = round(loads[resource.id] / resource.capacity * 100, 1)
            balancing.append(WorkloadBalance(
                resource_id=resource.id,
                resource_name=resource.name,
                current_utilization=utilization,
                recommended_utilization=target,
                status=self._balance_status(utilization, target),
            ))

        suggestions = self._suggest_reallocations(data.resources, assignments, loads, required_skills)
        gaps = self._skill_gaps(data.resources, open_tasks, required_skills)
        urgent = self._urgent_requests(open_tasks, required_skills, {gap.skill for gap in gaps})

        overallocated = sum(1 for entry in balancing if entry.status == "overallocated")
        if overallocated:
            self.logger.warning(f"{overallocated} resources are overallocated")

        return ResourceOptimization(
            allocations=allocations,
            reallocation_suggestions=suggestions,
            workload_balancing=balancing,
            skill_gap_analysis=gaps,
            urgent_requests=urgent,
        )

    @staticmethod
    def _balance_status(utilization: float, target: float) -> str:
        if utilization > 100:
            return "overallocated"
        if utilization > target:
            return "high"
        if utilization < target / 2:
            return "underutilized"
        return "balanced"

    def _suggest_reallocations(self, resources: List[Resource], assignments: Dict[str, List[Task]],
                               loads: Dict[str, float],
                               required_skills: Dict[str, List[str]]) -> List[ReallocationSuggestion]:
        """Move not-yet-started work from overloaded people to teammates with room."""
        target = self.settings.target_utilization_percent
        loads = dict(loads)
        suggestions = []

        def utilization(resource: Resource) -> float:
            return loads[resource.id] / resource.capacity * 100

        for resource in resources:
            if utilization(resource) <= 100:
                continue

            movable = sorted(
                (task for task in assignments[resource.id] if task.status == TaskStatus.PENDING),
                key=lambda task: -task.remaining_hours
            )
            for task in movable:
                if utilization(resource) <= 100:
                    break

                needed = set(required_skills.get(task.id, []))
                load = self.weekly_load(task)
                candidates = [
                    other for other in resources
                    if other.id != resource.id
                    and other.team_id is not None
                    and other.team_id == resource.team_id
                    and other.availability != UNAVAILABLE
                    and needed.issubset(other.skills)
                    and (loads[other.id] + load) / other.capacity * 100 <= target
                ]
                if not candidates:
                    continue

                receiver = min(candidates, key=utilization)
                loads[resource.id] -= load
                loads[receiver.id] += load
                suggestions.append(ReallocationSuggestion(
                    task_id=task.id,
                    from_resource=resource.id,
                    to_resource=receiver.id,
                    reason=f"{resource.name} is overallocated; {receiver.name} has capacity",
                ))

        return suggestions

    def _skill_gaps(self, resources: List[Resource], open_tasks: List[Task],
                    required_skills: Dict[str, List[str]]) -> List[SkillGap]:
        open_ids = {task.id for task in open_tasks}
        tasks_by_skill: Dict[str, List[str]] = {}
        for task_id, skills in required_skills.items():
            if task_id not in open_ids:
                continue
            for skill in skills:
                tasks_by_skill.setdefault(skill, []).append(task_id)

        gaps = []
        for skill, task_ids in tasks_by_skill.items():
            available = sum(
                1 for resource in resources
                if skill in resource.skills and resource.availability != UNAVAILABLE
            )
            if available == 0:
                gaps.append(SkillGap(skill=skill, task_ids=task_ids, available_resources=0))
        return gaps

    def _urgent_requests(self, open_tasks: List[Task], required_skills: Dict[str, List[str]],
                         gap_skills: set) -> List[UrgentRequest]:
        requests = []
        for task in open_tasks:
            if task.priority not in URGENT_PRIORITIES:
                continue

            skills = required_skills.get(task.id, [])
            if not task.assignee and not task.assignee_id:
                for skill in skills or ["general"]:
                    requests.append(UrgentRequest(
                        task_id=task.id, skill=skill, priority=task.priority,
                        reason="High-priority task has no assignee",
                    ))
                continue

            for skill in skills:
                if skill in gap_skills:
                    requests.append(UrgentRequest(
                        task_id=task.id, skill=skill, priority=task.priority,
                        reason="No available resource has this skill",
                    ))
        return requests
