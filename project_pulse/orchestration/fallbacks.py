"""
Static fallback values substituted when an analysis is unavailable.
"""

from typing import List

from ..models.analysis import (
    DependencyAnalysis, HealthLevel, OrchestrationResult, OverallHealth,
    ResourceOptimization, RiskAssessment, RiskLevel, TeamInsight,
    TimelineOptimization
)

TEAM_UNAVAILABLE_MESSAGE = "Team analysis temporarily unavailable"
FALLBACK_SUMMARY = "Project analysis temporarily unavailable, using fallback assessment"


def fallback_dependency_analysis() -> DependencyAnalysis:
    return DependencyAnalysis(health_score=75)


def fallback_risk_assessment() -> RiskAssessment:
    return RiskAssessment(
        overall_risk_score=30,
        risk_level=RiskLevel.MEDIUM,
        recommendations=["Monitor project progress closely"],
    )


def fallback_timeline_optimization() -> TimelineOptimization:
    return TimelineOptimization(
        timeline_savings=0,
        recommendations=["Timeline appears optimal"],
    )


def fallback_resource_optimization() -> ResourceOptimization:
    return ResourceOptimization()


def fallback_team_insights() -> List[TeamInsight]:
    return []


def fallback_team_insight(team_id: str) -> TeamInsight:
    """Fixed insight for a single team whose agent failed."""
    return TeamInsight(
        team_id=team_id,
        risk_level=RiskLevel.MEDIUM,
        confidence=50,
        productivity=75,
        recommendations=[TEAM_UNAVAILABLE_MESSAGE],
    )


def fallback_orchestration_result() -> OrchestrationResult:
    """Complete result used when no real analysis is available."""
    return OrchestrationResult(
        team_insights=fallback_team_insights(),
        dependency_analysis=fallback_dependency_analysis(),
        risk_assessment=fallback_risk_assessment(),
        timeline_optimization=fallback_timeline_optimization(),
        resource_optimization=fallback_resource_optimization(),
        overall_health=OverallHealth(
            score=75,
            level=HealthLevel.GOOD,
            summary=FALLBACK_SUMMARY,
            recommendations=["Check system status", "Retry analysis later"],
        ),
        agent_states=[],
    )
