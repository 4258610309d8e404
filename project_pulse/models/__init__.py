"""
Data models for Project Pulse.
"""

from .core import (
    TaskStatus,
    Priority,
    DependencyType,
    ProjectInfo,
    Task,
    Team,
    Dependency,
    Resource,
    SkillRequirement,
    ProjectData,
)
from .messaging import (
    MessageType,
    MessagePriority,
    AgentMessage,
    DeliveryResult,
    AgentStatus,
    AgentState,
    AgentStateSnapshot,
)
from .analysis import (
    RiskLevel,
    HealthLevel,
    DependencyAnalysisInput,
    TimelineAnalysisInput,
    ResourceAnalysisInput,
    TeamAnalysisInput,
    TeamTaskView,
    TeamMemberView,
    DependencyAnalysis,
    Risk,
    PredictedDelay,
    RiskAssessment,
    TimelineOptimization,
    WorkloadBalance,
    ResourceOptimization,
    TeamInsight,
    OverallHealth,
    OrchestrationResult,
)

__all__ = [
    'TaskStatus', 'Priority', 'DependencyType', 'ProjectInfo', 'Task', 'Team',
    'Dependency', 'Resource', 'SkillRequirement', 'ProjectData',
    'MessageType', 'MessagePriority', 'AgentMessage', 'DeliveryResult',
    'AgentStatus', 'AgentState', 'AgentStateSnapshot',
    'RiskLevel', 'HealthLevel', 'DependencyAnalysisInput', 'TimelineAnalysisInput',
    'ResourceAnalysisInput', 'TeamAnalysisInput', 'TeamTaskView', 'TeamMemberView',
    'DependencyAnalysis', 'Risk', 'PredictedDelay', 'RiskAssessment',
    'TimelineOptimization', 'WorkloadBalance', 'ResourceOptimization',
    'TeamInsight', 'OverallHealth', 'OrchestrationResult',
]
