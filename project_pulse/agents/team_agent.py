"""
Team Agent for Project Pulse.

One instance per team. Looks only at the team's own tasks and members.
"""

from typing import Any, Dict, List

from .base import BaseAgent
from ..models.analysis import (
    RiskLevel, TeamAnalysisInput, TeamInsight, TeamMemberView, WorkloadShare
)
from ..models.core import TaskStatus
from ..models.messaging import AgentMessage, MessageType

BLOCKED_TASK_POINTS = 15
OVERLOADED_MEMBER_POINTS = 15
LOW_PRODUCTIVITY_POINTS = 20
LOW_PRODUCTIVITY_THRESHOLD = 60

TEAM_RISK_THRESHOLDS = [
    (60, RiskLevel.CRITICAL),
    (30, RiskLevel.HIGH),
    (15, RiskLevel.MEDIUM),
]


class TeamAgent(BaseAgent):
    """
    Agent producing the insight for a single team.
    """

    def __init__(self, team_id: str, team_name: str, directory=None):
        super().__init__(f"team-{team_id}", f"{team_name} Team Agent", directory)
        self.team_id = team_id
        self.team_name = team_name
        self.status_updates: List[AgentMessage] = []

    async def process(self, data: Any) -> TeamInsight:
        if not isinstance(data, TeamAnalysisInput):
            data = TeamAnalysisInput.model_validate(data)
        return await self._run_tracked("analyze_team", self._analyze, data)

    async def handle_message(self, message: AgentMessage) -> None:
        if message.type == MessageType.STATUS_UPDATE:
            self.status_updates.append(message)
        self.logger.debug(f"Received {message.type.value} from {message.sender}")

    async def _analyze(self, data: TeamAnalysisInput) -> TeamInsight:
        workload = [self._share(member) for member in data.members]
        overloaded = [share for share in workload if share.utilization > 100]

        blockers: List[str] = []
        for task in data.tasks:
            if task.status == TaskStatus.BLOCKED:
                blockers.append(f"{task.title} is blocked")
            blockers.extend(task.blockers)

        productivity = self._productivity(data)

        # Tasks inside the team that two or more teammates' tasks wait on
        waiting_on: Dict[str, int] = {}
        team_task_ids = {task.id for task in data.tasks}
        for task in data.tasks:
            for dependency in task.dependencies:
                if dependency in team_task_ids:
                    waiting_on[dependency] = waiting_on.get(dependency, 0) + 1

        bottlenecks = [f"{share.member_name} is over capacity" for share in overloaded]
        bottlenecks.extend(task_id for task_id, count in waiting_on.items() if count >= 2)

        points = (
            BLOCKED_TASK_POINTS * sum(1 for task in data.tasks if task.status == TaskStatus.BLOCKED)
            + OVERLOADED_MEMBER_POINTS * len(overloaded)
            + (LOW_PRODUCTIVITY_POINTS if productivity < LOW_PRODUCTIVITY_THRESHOLD else 0)
        )
        risk_level = RiskLevel.LOW
        for threshold, level in TEAM_RISK_THRESHOLDS:
            if points >= threshold:
                risk_level = level
                break

        recommendations = []
        if blockers:
            recommendations.append("Resolve blocked tasks before starting new work")
        if overloaded:
            recommendations.append("Redistribute work away from overloaded members")
        if productivity < LOW_PRODUCTIVITY_THRESHOLD:
            recommendations.append("Review estimates; effort is outpacing progress")
        if not recommendations:
            recommendations.append("Team is operating normally")

        return TeamInsight(
            team_id=self.team_id,
            risk_level=risk_level,
            confidence=self._confidence(data),
            productivity=productivity,
            bottlenecks=bottlenecks,
            recommendations=recommendations,
            blockers=blockers,
            workload_distribution=workload,
        )

    @staticmethod
    def _share(member: TeamMemberView) -> WorkloadShare:
        return WorkloadShare(
            member_id=member.id,
            member_name=member.name,
            assigned_hours=member.current_workload,
            capacity=member.max_capacity,
            utilization=round(member.current_workload / member.max_capacity * 100, 1) if member.max_capacity else 0,
        )

    @staticmethod
    def _productivity(data: TeamAnalysisInput) -> float:
        """Earned hours per hour spent, capped at 100."""
        earned = 0.0
        spent = 0.0
        for task in data.tasks:
            if task.actual_hours <= 0 or task.estimated_hours <= 0:
                continue
            completion = 100 if task.status == TaskStatus.COMPLETED else task.progress
            earned += task.estimated_hours * completion / 100
            spent += task.actual_hours

        if spent == 0:
            return 100.0
        return round(min(100.0, earned / spent * 100), 1)

    @staticmethod
    def _confidence(data: TeamAnalysisInput) -> float:
        confidence = 100
        if not data.members:
            confidence -= 30
        if not data.tasks:
            confidence -= 30
        if any(task.estimated_hours <= 0 for task in data.tasks):
            confidence -= 20
        return max(0, confidence)
