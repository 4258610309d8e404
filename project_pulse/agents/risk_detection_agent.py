"""
Risk Detection Agent for Project Pulse.

Scans the project snapshot for schedule, effort and staffing risks, turns them
into a capped risk score and predicts delays for tasks that are already late or
falling behind.
"""

import math
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from .base import BaseAgent
from ..models.analysis import PredictedDelay, Risk, RiskAssessment, RiskLevel
from ..models.core import Priority, ProjectData, Resource, Task, TaskStatus
from ..models.messaging import AgentMessage, MessageType
from ..utils.config import AgentSettings

SEVERITY_POINTS: Dict[RiskLevel, int] = {
    RiskLevel.LOW: 5,
    RiskLevel.MEDIUM: 10,
    RiskLevel.HIGH: 20,
    RiskLevel.CRITICAL: 30,
}

RISK_LEVEL_THRESHOLDS = [
    (75, RiskLevel.CRITICAL),
    (50, RiskLevel.HIGH),
    (25, RiskLevel.MEDIUM),
]

EFFORT_OVERRUN_RATIO = 1.2
SCHEDULE_SLIP_PERCENT = 20
SEVERE_SLIP_PERCENT = 40

CATEGORY_RECOMMENDATIONS: Dict[str, str] = {
    "overdue": "Re-plan overdue tasks and communicate revised dates to stakeholders",
    "schedule": "Review progress on tasks that are behind schedule",
    "effort": "Revisit estimates for tasks exceeding their planned effort",
    "staffing": "Assign owners to unassigned high-priority tasks",
    "blocked": "Escalate blocked tasks to remove impediments",
    "capacity": "Redistribute work from overloaded team members",
}


def risk_level_for(score: float) -> RiskLevel:
    for threshold, level in RISK_LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.LOW


def _is_assigned_to(task: Task, resource: Resource) -> bool:
    return task.assignee_id == resource.id or task.assignee == resource.name


class RiskDetectionAgent(BaseAgent):
    """
    Agent responsible for project risk assessment.

    ``today`` can be injected to make date-based risks reproducible.
    """

    def __init__(self, agent_id: str = "risk-detector", directory=None,
                 today: Optional[Callable[[], date]] = None,
                 settings: Optional[AgentSettings] = None):
        super().__init__(agent_id, "Risk Detector", directory)
        self._today = today or date.today
        self.settings = settings or AgentSettings()
        self.status_updates: List[AgentMessage] = []

    async def process(self, data: Any) -> RiskAssessment:
        if not isinstance(data, ProjectData):
            data = ProjectData.model_validate(data)
        return await self._run_tracked("assess_risks", self._assess, data)

    async def _assess(self, data: ProjectData) -> RiskAssessment:
        today = self._today()
        risks: List[Risk] = []
        delays: List[PredictedDelay] = []

        for task in data.tasks:
            if task.is_completed:
                continue

            overdue = self._check_overdue(task, today)
            if overdue:
                risks.append(overdue[0])
                delays.append(overdue[1])
            else:
                behind = self._check_behind_schedule(task, today)
                if behind:
                    risks.append(behind[0])
                    delays.append(behind[1])

            overrun = self._check_effort_overrun(task)
            if overrun:
                risks.append(overrun)

            if task.status == TaskStatus.BLOCKED:
                risks.append(Risk(
                    id=f"blocked-{task.id}",
                    category="blocked",
                    severity=RiskLevel.HIGH,
                    description=f"Task '{task.title}' is blocked",
                    affected_tasks=[task.id],
                    probability=0.8,
                    mitigation=["Identify and remove the blocking issue"],
                ))

            if not task.assignee and not task.assignee_id:
                severity = RiskLevel.MEDIUM if task.priority in (Priority.HIGH, Priority.CRITICAL) else RiskLevel.LOW
                risks.append(Risk(
                    id=f"staffing-{task.id}",
                    category="staffing",
                    severity=severity,
                    description=f"Task '{task.title}' has no assignee",
                    affected_tasks=[task.id],
                    probability=0.5,
                    mitigation=["Assign an owner"],
                ))

        risks.extend(self._check_capacity(data))

        score = min(100, sum(SEVERITY_POINTS[risk.severity] for risk in risks))
        level = risk_level_for(score)

        recommendations: List[str] = []
        for risk in sorted(risks, key=lambda r: -SEVERITY_POINTS[r.severity]):
            recommendation = CATEGORY_RECOMMENDATIONS.get(risk.category)
            if recommendation and recommendation not in recommendations:
                recommendations.append(recommendation)
        if not recommendations:
            recommendations.append("Continue monitoring project progress")

        self.logger.info(f"Assessed {len(risks)} risks", score=score, level=level.value)

        return RiskAssessment(
            overall_risk_score=score,
            risk_level=level,
            active_risks=risks,
            predicted_delays=delays,
            recommendations=recommendations,
        )

    def _check_overdue(self, task: Task, today: date):
        if task.end_date is None or task.end_date >= today:
            return None

        days_late = (today - task.end_date).days
        severity = RiskLevel.CRITICAL if task.priority == Priority.CRITICAL else RiskLevel.HIGH
        risk = Risk(
            id=f"overdue-{task.id}",
            category="overdue",
            severity=severity,
            description=f"Task '{task.title}' is {days_late} days overdue",
            affected_tasks=[task.id],
            probability=1.0,
            mitigation=["Re-plan the task", "Add resources to finish the remaining work"],
        )
        remaining_effort = task.duration_days(self.settings.hours_per_day) * (1 - task.progress / 100)
        remaining_days = math.ceil(remaining_effort)
        delay = PredictedDelay(
            task_id=task.id,
            delay_days=days_late + remaining_days,
            reason="Task is past its end date",
            confidence=0.9,
        )
        return risk, delay

    def _check_behind_schedule(self, task: Task, today: date):
        if task.start_date is None or task.end_date is None or today <= task.start_date:
            return None

        total_days = max(1, (task.end_date - task.start_date).days)
        elapsed = min(total_days, (today - task.start_date).days)
        expected_progress = elapsed / total_days * 100
        gap = expected_progress - task.progress
        if gap < SCHEDULE_SLIP_PERCENT:
            return None

        severity = RiskLevel.HIGH if gap >= SEVERE_SLIP_PERCENT else RiskLevel.MEDIUM
        risk = Risk(
            id=f"schedule-{task.id}",
            category="schedule",
            severity=severity,
            description=(
                f"Task '{task.title}' is {task.progress:.0f}% complete, "
                f"expected {expected_progress:.0f}%"
            ),
            affected_tasks=[task.id],
            probability=0.6,
            mitigation=["Review scope", "Pair additional team members on the task"],
        )
        delay = PredictedDelay(
            task_id=task.id,
            delay_days=math.ceil(total_days * gap / 100),
            reason="Progress is behind the planned pace",
            confidence=0.6,
        )
        return risk, delay

    def _check_effort_overrun(self, task: Task) -> Optional[Risk]:
        if task.estimated_hours <= 0 or task.actual_hours <= task.estimated_hours * EFFORT_OVERRUN_RATIO:
            return None

        return Risk(
            id=f"effort-{task.id}",
            category="effort",
            severity=RiskLevel.MEDIUM,
            description=(
                f"Task '{task.title}' used {task.actual_hours:g}h "
                f"of {task.estimated_hours:g}h estimated"
            ),
            affected_tasks=[task.id],
            probability=0.7,
            mitigation=["Re-estimate the remaining work"],
        )

    def _check_capacity(self, data: ProjectData) -> List[Risk]:
        risks = []
        for resource in data.resources:
            assigned = [
                task for task in data.tasks
                if not task.is_completed and _is_assigned_to(task, resource)
            ]
            remaining = sum(task.remaining_hours for task in assigned)
            if remaining <= resource.capacity:
                continue

            severity = RiskLevel.HIGH if remaining > resource.capacity * 1.5 else RiskLevel.MEDIUM
            risks.append(Risk(
                id=f"capacity-{resource.id}",
                category="capacity",
                severity=severity,
                description=(
                    f"{resource.name} has {remaining:g}h of remaining work "
                    f"against {resource.capacity:g}h capacity"
                ),
                affected_tasks=[task.id for task in assigned],
                probability=0.6,
                mitigation=["Rebalance assignments across the team"],
            ))
        return risks

    async def handle_message(self, message: AgentMessage) -> None:
        if message.type == MessageType.STATUS_UPDATE:
            self.status_updates.append(message)
        self.logger.debug(f"Received {message.type.value} from {message.sender}")
