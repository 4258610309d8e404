"""
Overall project health scoring.

Folds the five partial analysis results into a single 0-100 score, a health
level, a fixed summary sentence, and the top recommendations. The function is
pure: the same inputs always produce the same ``OverallHealth``.
"""

import math
from typing import Dict, List

from ..models.analysis import (
    DependencyAnalysis, HealthLevel, OverallHealth, ResourceOptimization,
    RiskAssessment, RiskLevel, TeamInsight, TimelineOptimization
)

DEPENDENCY_WEIGHT = 0.25
RISK_WEIGHT = 0.3

RISK_IMPACT: Dict[RiskLevel, float] = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 15,
    RiskLevel.HIGH: 30,
    RiskLevel.CRITICAL: 50,
}

TIMELINE_BONUS_CAP = 15
TIMELINE_PENALTY_THRESHOLD_DAYS = -5
OVERALLOCATION_PENALTY = 5
TEAM_RISK_PENALTY = 8
OVERALLOCATION_THRESHOLD = 100

LEVEL_THRESHOLDS = [
    (90, HealthLevel.EXCELLENT),
    (75, HealthLevel.GOOD),
    (60, HealthLevel.FAIR),
    (40, HealthLevel.POOR),
]

LEVEL_SUMMARIES: Dict[HealthLevel, str] = {
    HealthLevel.EXCELLENT: "Project is performing exceptionally well with minimal risks and optimal resource utilization.",
    HealthLevel.GOOD: "Project is on track with minor issues that can be easily addressed.",
    HealthLevel.FAIR: "Project has some challenges that require attention to prevent delays.",
    HealthLevel.POOR: "Project faces significant challenges that need immediate intervention.",
    HealthLevel.CRITICAL: "Project is in critical condition and requires urgent action to prevent failure.",
}

ELEVATED_RISK_LEVELS = (RiskLevel.HIGH, RiskLevel.CRITICAL)


def health_level_for(score: float) -> HealthLevel:
    """Map a score to its health band."""
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return HealthLevel.CRITICAL


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_overall_health(
    dependency_analysis: DependencyAnalysis,
    risk_assessment: RiskAssessment,
    timeline_optimization: TimelineOptimization,
    resource_optimization: ResourceOptimization,
    team_insights: List[TeamInsight],
    recommendation_limit: int = 5,
) -> OverallHealth:
    """
    Calculate the weighted project health.

    The timeline rule is asymmetric: savings earn a bonus capped
    at 15 points, while delays beyond five days cost two points per day with
    no cap.

    Args:
        dependency_analysis: Dependency graph health
        risk_assessment: Risk picture
        timeline_optimization: Schedule analysis
        resource_optimization: Workload analysis
        team_insights: One insight per team
        recommendation_limit: Maximum number of recommendations returned

    Returns:
        OverallHealth: Integer score in [0, 100] with a consistent level
    """
    score = 100.0
    issues: List[str] = []
    recommendations: List[str] = []

    # Dependencies
    score -= (100 - dependency_analysis.health_score) * DEPENDENCY_WEIGHT

    circular_count = len(dependency_analysis.circular_dependencies)
    if circular_count > 0:
        issues.append(f"{circular_count} circular dependencies detected")
        recommendations.append("Resolve circular dependencies immediately")

    # Risk
    risk_level = risk_assessment.risk_level
    score -= RISK_IMPACT[risk_level] * RISK_WEIGHT

    if risk_level in ELEVATED_RISK_LEVELS:
        issues.append(f"Project risk level: {risk_level.value}")
        recommendations.extend(risk_assessment.recommendations[:2])

    # Timeline
    savings = timeline_optimization.timeline_savings
    if savings > 0:
        score += min(TIMELINE_BONUS_CAP, savings * 2)
    elif savings < TIMELINE_PENALTY_THRESHOLD_DAYS:
        score -= abs(savings) * 2
        issues.append(f"Project timeline extended by {abs(savings)} days")

    # Resources
    overallocated = [
        entry for entry in resource_optimization.workload_balancing
        if entry.current_utilization > OVERALLOCATION_THRESHOLD
    ]
    score -= len(overallocated) * OVERALLOCATION_PENALTY

    if overallocated:
        issues.append(f"{len(overallocated)} resources are overallocated")
        recommendations.append("Rebalance resource allocation")

    # Teams
    risky_teams = [insight for insight in team_insights if insight.risk_level in ELEVATED_RISK_LEVELS]
    score -= len(risky_teams) * TEAM_RISK_PENALTY
    if risky_teams:
        issues.append(f"{len(risky_teams)} teams report elevated risk")

    final_score = max(0, min(100, _round_half_up(score)))
    level = health_level_for(final_score)

    return OverallHealth(
        score=final_score,
        level=level,
        summary=LEVEL_SUMMARIES[level],
        recommendations=recommendations[:recommendation_limit],
        issues=issues,
    )
