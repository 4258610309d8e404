"""
Core Pydantic data models for Project Pulse.

These models describe the project snapshot handed to the orchestrator. Input
keys may be given in snake_case or in the camelCase used by project exports
(``teamId``, ``fromTask``, ``estimatedHours`` ...).
"""

from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Any, Union
from datetime import date
from enum import Enum


class TaskStatus(str, Enum):
    """Status of project tasks."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class Priority(str, Enum):
    """Priority shared by tasks, risks and messages."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class DependencyType(str, Enum):
    """Scheduling relationship between two tasks."""
    FINISH_TO_START = "finish-to-start"
    START_TO_START = "start-to-start"
    FINISH_TO_FINISH = "finish-to-finish"
    START_TO_FINISH = "start-to-finish"


class ProjectModel(BaseModel):
    """Base for input models accepting both snake_case and camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class ProjectInfo(ProjectModel):
    """Project metadata."""
    id: Union[int, str]
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class Task(ProjectModel):
    """A unit of scheduled work."""
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    assignee: Optional[str] = None
    assignee_id: Optional[str] = None
    team_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    progress: float = Field(default=0, ge=0, le=100)
    dependencies: List[str] = Field(default_factory=list)
    estimated_hours: float = Field(default=0, ge=0)
    actual_hours: float = Field(default=0, ge=0)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def remaining_hours(self) -> float:
        """Estimated hours not yet covered by progress."""
        if self.is_completed:
            return 0.0
        return self.estimated_hours * (1 - self.progress / 100)

    def duration_days(self, hours_per_day: float = 8.0) -> int:
        """Calendar span of the task, or its effort in working days when undated."""
        if self.start_date and self.end_date:
            return max(1, (self.end_date - self.start_date).days)
        if self.estimated_hours:
            return max(1, round(self.estimated_hours / hours_per_day))
        return 1


class Team(ProjectModel):
    """A team working on the project."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    workload_utilization: Optional[float] = Field(default=None, ge=0)
    task_ids: List[str] = Field(default_factory=list)


class Dependency(ProjectModel):
    """Ordering constraint between two tasks."""
    id: Optional[str] = None
    from_task: str = Field(..., min_length=1)
    to_task: str = Field(..., min_length=1)
    type: DependencyType = DependencyType.FINISH_TO_START
    lag: int = 0


class Resource(ProjectModel):
    """A person available to the project."""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    team_id: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    capacity: float = Field(default=40, gt=0)
    availability: str = "available"


class SkillRequirement(ProjectModel):
    """A skill needed by a task."""
    task_id: str = Field(..., min_length=1)
    skill: str = Field(..., min_length=1)


class ProjectData(ProjectModel):
    """Complete project snapshot analysed in one orchestration run."""
    project: ProjectInfo
    tasks: List[Task] = Field(default_factory=list)
    teams: List[Team] = Field(default_factory=list)
    dependencies: List[Dependency] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)
    skill_requirements: List[SkillRequirement] = Field(default_factory=list)
    historical_projects: List[Dict[str, Any]] = Field(default_factory=list)

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        """Get a task by its ID."""
        return next((task for task in self.tasks if task.id == task_id), None)

    def tasks_for_team(self, team_id: str) -> List[Task]:
        return [task for task in self.tasks if task.team_id == team_id]

    def resources_for_team(self, team_id: str) -> List[Resource]:
        return [resource for resource in self.resources if resource.team_id == team_id]
