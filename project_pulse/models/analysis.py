"""
Analysis-specific data models for Project Pulse.

Each capability agent consumes one ``*Input`` slice of the project snapshot and
produces one result model. The orchestrator only reads the handful of fields it
needs for health scoring; everything else is passed through to the caller.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date
from enum import Enum

from .core import (
    DependencyType, Priority, ProjectInfo, Task, Team, Dependency, Resource,
    SkillRequirement, TaskStatus
)
from .messaging import AgentStateSnapshot


class RiskLevel(str, Enum):
    """Risk level reported by risk and team analysis."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class HealthLevel(str, Enum):
    """Overall project health band."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


# Agent inputs

class DependencyAnalysisInput(BaseModel):
    tasks: List[Task] = Field(default_factory=list)
    dependencies: List[Dependency] = Field(default_factory=list)


class TimelineAnalysisInput(BaseModel):
    project: ProjectInfo
    tasks: List[Task] = Field(default_factory=list)
    dependencies: List[Dependency] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)


class ResourceAnalysisInput(BaseModel):
    resources: List[Resource] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    teams: List[Team] = Field(default_factory=list)
    current_allocations: List["ResourceAllocation"] = Field(default_factory=list)
    skill_requirements: List[SkillRequirement] = Field(default_factory=list)


class TeamTaskView(BaseModel):
    """A task as seen by the team that owns it."""
    id: str
    title: str
    status: TaskStatus
    assignee: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    estimated_hours: float = 0
    actual_hours: float = 0
    dependencies: List[str] = Field(default_factory=list)
    blockers: List[str] = Field(default_factory=list)
    due_date: Optional[date] = None
    progress: float = 0


class TeamMemberView(BaseModel):
    """A team member with the workload derived from their assigned tasks."""
    id: str
    name: str
    skills: List[str] = Field(default_factory=list)
    current_workload: float = 0
    max_capacity: float = 40
    availability: str = "available"


class TeamAnalysisInput(BaseModel):
    tasks: List[TeamTaskView] = Field(default_factory=list)
    members: List[TeamMemberView] = Field(default_factory=list)


# Dependency analysis

class DependencyNode(BaseModel):
    task_id: str
    title: str
    status: TaskStatus
    duration_days: int = 1
    dependents: int = 0


class DependencyEdge(BaseModel):
    from_task: str
    to_task: str
    type: DependencyType = DependencyType.FINISH_TO_START
    lag: int = 0


class DependencyAnalysis(BaseModel):
    """Dependency graph health."""
    nodes: List[DependencyNode] = Field(default_factory=list)
    edges: List[DependencyEdge] = Field(default_factory=list)
    critical_path: List[str] = Field(default_factory=list)
    circular_dependencies: List[List[str]] = Field(default_factory=list)
    bottlenecks: List[str] = Field(default_factory=list)
    dangling_references: List[str] = Field(default_factory=list)
    health_score: float = Field(default=100, ge=0, le=100)


# Risk assessment

class Risk(BaseModel):
    id: str
    category: str
    severity: RiskLevel
    description: str
    affected_tasks: List[str] = Field(default_factory=list)
    probability: float = Field(default=0.5, ge=0, le=1)
    mitigation: List[str] = Field(default_factory=list)


class PredictedDelay(BaseModel):
    task_id: str
    delay_days: int = Field(..., ge=0)
    reason: str
    confidence: float = Field(default=0.5, ge=0, le=1)


class RiskAssessment(BaseModel):
    """Project-wide risk picture."""
    overall_risk_score: float = Field(default=0, ge=0, le=100)
    risk_level: RiskLevel = RiskLevel.LOW
    active_risks: List[Risk] = Field(default_factory=list)
    predicted_delays: List[PredictedDelay] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


# Timeline optimization

class TimelineAdjustment(BaseModel):
    task_id: str
    original_start: Optional[date] = None
    suggested_start: Optional[date] = None
    original_end: Optional[date] = None
    suggested_end: Optional[date] = None
    reason: str


class ParallelizationOpportunity(BaseModel):
    task_ids: List[str]
    potential_savings_days: int = Field(default=0, ge=0)
    reason: str


class TimelineOptimization(BaseModel):
    """Schedule re-planning result; ``timeline_savings`` is signed days."""
    adjustments: List[TimelineAdjustment] = Field(default_factory=list)
    new_project_end_date: Optional[date] = None
    timeline_savings: int = 0
    resource_optimizations: List[str] = Field(default_factory=list)
    parallelization_opportunities: List[ParallelizationOpportunity] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


# Resource optimization

class ResourceAllocation(BaseModel):
    resource_id: str
    task_ids: List[str] = Field(default_factory=list)
    allocated_hours: float = 0


class WorkloadBalance(BaseModel):
    resource_id: str
    resource_name: str
    current_utilization: float = Field(..., ge=0)
    recommended_utilization: float = 80
    status: str


class ReallocationSuggestion(BaseModel):
    task_id: str
    from_resource: str
    to_resource: str
    reason: str


class SkillGap(BaseModel):
    skill: str
    task_ids: List[str] = Field(default_factory=list)
    available_resources: int = 0


class UrgentRequest(BaseModel):
    task_id: str
    skill: str
    priority: Priority
    reason: str


class ResourceOptimization(BaseModel):
    """Resource allocation and workload result."""
    allocations: List[ResourceAllocation] = Field(default_factory=list)
    reallocation_suggestions: List[ReallocationSuggestion] = Field(default_factory=list)
    workload_balancing: List[WorkloadBalance] = Field(default_factory=list)
    skill_gap_analysis: List[SkillGap] = Field(default_factory=list)
    urgent_requests: List[UrgentRequest] = Field(default_factory=list)


ResourceAnalysisInput.model_rebuild()


# Team insight

class WorkloadShare(BaseModel):
    member_id: str
    member_name: str
    assigned_hours: float = 0
    capacity: float = 40
    utilization: float = 0


class TeamInsight(BaseModel):
    """Per-team analysis result."""
    team_id: str
    risk_level: RiskLevel = RiskLevel.LOW
    confidence: float = Field(default=100, ge=0, le=100)
    productivity: float = Field(default=100, ge=0, le=100)
    bottlenecks: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    blockers: List[str] = Field(default_factory=list)
    workload_distribution: List[WorkloadShare] = Field(default_factory=list)


# Orchestration output

class OverallHealth(BaseModel):
    score: int = Field(..., ge=0, le=100)
    level: HealthLevel
    summary: str
    recommendations: List[str] = Field(default_factory=list)
    issues: List[str] = Field(default_factory=list)


class OrchestrationResult(BaseModel):
    """Everything one orchestration run produced."""
    team_insights: List[TeamInsight] = Field(default_factory=list)
    dependency_analysis: DependencyAnalysis
    risk_assessment: RiskAssessment
    timeline_optimization: TimelineOptimization
    resource_optimization: ResourceOptimization
    overall_health: OverallHealth
    agent_states: List[AgentStateSnapshot] = Field(default_factory=list)
