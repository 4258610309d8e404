"""
Timeline Adjustment Agent for Project Pulse.

Computes the earliest feasible schedule from the dependency graph, compares it
with the planned dates and suggests adjustments and parallel work. Risk alerts
received from other agents turn into buffer recommendations on the next run.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Set

from .base import BaseAgent
from ..models.analysis import (
    ParallelizationOpportunity, TimelineAdjustment, TimelineAnalysisInput,
    TimelineOptimization
)
from ..models.core import DependencyType, Task, TaskStatus
from ..models.messaging import AgentMessage, MessageType
from ..utils.config import AgentSettings


class TimelineAdjustmentAgent(BaseAgent):
    """
    Agent responsible for schedule optimization.
    """

    def __init__(self, agent_id: str = "timeline-adjuster", directory=None,
                 settings: Optional[AgentSettings] = None):
        super().__init__(agent_id, "Timeline Adjuster", directory)
        self.settings = settings or AgentSettings()
        self.risk_alerts: List[Dict[str, Any]] = []

    async def process(self, data: Any) -> TimelineOptimization:
        if not isinstance(data, TimelineAnalysisInput):
            data = TimelineAnalysisInput.model_validate(data)
        return await self._run_tracked("optimize_timeline", self._optimize, data)

    async def handle_message(self, message: AgentMessage) -> None:
        if message.type == MessageType.RISK_ALERT:
            payload = message.data if isinstance(message.data, dict) else {}
            self.risk_alerts.append(payload)
            self.logger.info(
                f"Stored risk alert from {message.sender}",
                risks=len(payload.get("risks", []))
            )
        else:
            self.logger.debug(f"Ignoring {message.type.value} message from {message.sender}")

    async def _optimize(self, data: TimelineAnalysisInput) -> TimelineOptimization:
        tasks = {task.id: task for task in data.tasks}
        durations = {task_id: task.duration_days(self.settings.hours_per_day) for task_id, task in tasks.items()}
        predecessors = self._collect_predecessors(data)

        anchor = data.project.start_date or min(
            (task.start_date for task in data.tasks if task.start_date), default=None
        )

        adjustments: List[TimelineAdjustment] = []
        new_end: Optional[date] = None
        savings = 0

        if anchor is not None and tasks:
            starts = self._forward_pass(tasks, durations, predecessors, anchor)
            for task_id, task in tasks.items():
                suggested_start = starts[task_id]
                if task.start_date is None or task.start_date == suggested_start:
                    continue
                reason = (
                    "Dependencies allow an earlier start"
                    if suggested_start < task.start_date
                    else "Dependencies require a later start"
                )
                adjustments.append(TimelineAdjustment(
                    task_id=task_id,
                    original_start=task.start_date,
                    suggested_start=suggested_start,
                    original_end=task.end_date,
                    suggested_end=suggested_start + timedelta(days=durations[task_id]),
                    reason=reason,
                ))

            new_end = max(starts[task_id] + timedelta(days=durations[task_id]) for task_id in tasks)
            planned_end = data.project.end_date or max(
                (task.end_date for task in data.tasks if task.end_date), default=None
            )
            if planned_end is not None:
                savings = (planned_end - new_end).days

        opportunities = self._find_parallel_work(data.tasks, durations, predecessors)

        resource_notes = [
            f"{resource.name} is {resource.availability}; plan around reduced capacity"
            for resource in data.resources
            if resource.availability != "available"
        ]

        recommendations = self._recommend(savings, opportunities)
        recommendations.extend(self._buffer_recommendations(tasks))

        return TimelineOptimization(
            adjustments=adjustments,
            new_project_end_date=new_end,
            timeline_savings=savings,
            resource_optimizations=resource_notes,
            parallelization_opportunities=opportunities,
            recommendations=recommendations,
        )

    def _collect_predecessors(self, data: TimelineAnalysisInput) -> Dict[str, List[tuple]]:
        """Map task id to ``(predecessor, type, lag)`` for known tasks only."""
        known = {task.id for task in data.tasks}
        predecessors: Dict[str, List[tuple]] = {task_id: [] for task_id in known}
        seen = set()

        links = [(dep.from_task, dep.to_task, dep.type, dep.lag) for dep in data.dependencies]
        for task in data.tasks:
            links.extend((prerequisite, task.id, DependencyType.FINISH_TO_START, 0)
                         for prerequisite in task.dependencies)

        for from_task, to_task, dep_type, lag in links:
            if from_task not in known or to_task not in known or (from_task, to_task) in seen:
                continue
            seen.add((from_task, to_task))
            predecessors[to_task].append((from_task, dep_type, lag))
        return predecessors

    def _forward_pass(self, tasks: Dict[str, Task], durations: Dict[str, int],
                      predecessors: Dict[str, List[tuple]], anchor: date) -> Dict[str, date]:
        """Earliest start per task; started work keeps its actual start date."""
        starts: Dict[str, date] = {}
        remaining = list(tasks)

        while remaining:
            ready = [
                task_id for task_id in remaining
                if all(pred in starts for pred, _, _ in predecessors[task_id])
            ]
            if not ready:
                # Cycle: schedule the rest ignoring unresolved predecessors
                ready = remaining[:1]

            for task_id in ready:
                starts[task_id] = self._earliest_start(
                    tasks[task_id], durations, predecessors[task_id], starts, anchor
                )
                remaining.remove(task_id)

        return starts

    def _earliest_start(self, task: Task, durations: Dict[str, int], links: List[tuple],
                        starts: Dict[str, date], anchor: date) -> date:
        if task.status in (TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED) and task.start_date:
            return task.start_date

        duration = timedelta(days=durations[task.id])
        earliest = anchor
        for pred, dep_type, lag in links:
            if pred not in starts:
                continue
            pred_start = starts[pred]
            pred_end = pred_start + timedelta(days=durations[pred])
            offset = timedelta(days=lag)

            if dep_type == DependencyType.FINISH_TO_START:
                candidate = pred_end + offset
            elif dep_type == DependencyType.START_TO_START:
                candidate = pred_start + offset
            elif dep_type == DependencyType.FINISH_TO_FINISH:
                candidate = pred_end + offset - duration
            else:
                candidate = pred_start + offset - duration

            earliest = max(earliest, candidate)
        return earliest

    def _find_parallel_work(self, tasks: List[Task], durations: Dict[str, int],
                            predecessors: Dict[str, List[tuple]]) -> List[ParallelizationOpportunity]:
        """Independent tasks planned back to back for different people."""
        reachable = self._reachability(predecessors)
        planned = sorted(
            (task for task in tasks if task.start_date and task.end_date and not task.is_completed),
            key=lambda task: task.start_date
        )

        opportunities = []
        for first, second in zip(planned, planned[1:]):
            if second.start_date < first.end_date:
                continue
            if not first.assignee or not second.assignee or first.assignee == second.assignee:
                continue
            if second.id in reachable[first.id] or first.id in reachable[second.id]:
                continue
            opportunities.append(ParallelizationOpportunity(
                task_ids=[first.id, second.id],
                potential_savings_days=min(durations[first.id], durations[second.id]),
                reason=(
                    f"'{first.title}' and '{second.title}' are independent "
                    f"and owned by different people"
                ),
            ))
        return opportunities

    def _reachability(self, predecessors: Dict[str, List[tuple]]) -> Dict[str, Set[str]]:
        successors: Dict[str, Set[str]] = {task_id: set() for task_id in predecessors}
        for task_id, links in predecessors.items():
            for pred, _, _ in links:
                successors[pred].add(task_id)

        reachable: Dict[str, Set[str]] = {}
        for start in successors:
            seen: Set[str] = set()
            stack = list(successors[start])
            while stack:
                node = stack.pop()
                if node in seen:
                    continue
                seen.add(node)
                stack.extend(successors[node])
            reachable[start] = seen
        return reachable

    def _recommend(self, savings: int, opportunities: List[ParallelizationOpportunity]) -> List[str]:
        recommendations = []
        if savings > 0:
            recommendations.append(f"Project can finish {savings} days ahead of plan with the optimized schedule")
        elif savings < 0:
            recommendations.append(
                f"Project is projected to finish {abs(savings)} days late; "
                f"review scope or add capacity on the critical path"
            )
        if opportunities:
            recommendations.append(f"Run {len(opportunities)} independent task pairs in parallel")
        if not recommendations:
            recommendations.append("Timeline appears optimal")
        return recommendations

    def _buffer_recommendations(self, tasks: Dict[str, Task]) -> List[str]:
        """Consume stored risk alerts into buffer recommendations."""
        if not self.risk_alerts:
            return []

        delay_by_task: Dict[str, int] = {}
        alerted: List[str] = []
        for alert in self.risk_alerts:
            for delay in alert.get("predicted_delays", []):
                task_id = delay.get("task_id")
                if task_id:
                    delay_by_task[task_id] = max(delay_by_task.get(task_id, 0), int(delay.get("delay_days", 0)))
            for risk in alert.get("risks", []):
                for task_id in risk.get("affected_tasks", []):
                    if task_id not in alerted:
                        alerted.append(task_id)
        self.risk_alerts = []

        recommendations = []
        for task_id in alerted:
            label = tasks[task_id].title if task_id in tasks else task_id
            days = delay_by_task.get(task_id)
            if days:
                recommendations.append(f"Add a {days}-day buffer after '{label}'")
            else:
                recommendations.append(f"Add schedule buffer after '{label}'")
        return recommendations
