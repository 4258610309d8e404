"""
Unit tests for fallback values.
"""

from project_pulse.models.analysis import HealthLevel, RiskLevel
from project_pulse.orchestration import fallbacks


class TestFallbacks:
    """Test cases for the fixed fallback values."""

    def test_capability_fallbacks(self):
        assert fallbacks.fallback_dependency_analysis().health_score == 75
        assert fallbacks.fallback_dependency_analysis().circular_dependencies == []

        risk = fallbacks.fallback_risk_assessment()
        assert risk.overall_risk_score == 30
        assert risk.risk_level == RiskLevel.MEDIUM
        assert risk.recommendations == ["Monitor project progress closely"]

        timeline = fallbacks.fallback_timeline_optimization()
        assert timeline.timeline_savings == 0
        assert timeline.recommendations == ["Timeline appears optimal"]

        resources = fallbacks.fallback_resource_optimization()
        assert resources.workload_balancing == []
        assert resources.allocations == []

        assert fallbacks.fallback_team_insights() == []

    def test_team_fallback(self):
        insight = fallbacks.fallback_team_insight("backend")

        assert insight.team_id == "backend"
        assert insight.risk_level == RiskLevel.MEDIUM
        assert insight.confidence == 50
        assert insight.productivity == 75
        assert insight.recommendations == ["Team analysis temporarily unavailable"]

    def test_full_fallback_result(self):
        result = fallbacks.fallback_orchestration_result()

        assert result.overall_health.score == 75
        assert result.overall_health.level == HealthLevel.GOOD
        assert result.overall_health.summary == fallbacks.FALLBACK_SUMMARY
        assert result.overall_health.recommendations == ["Check system status", "Retry analysis later"]
        assert result.agent_states == []
        assert result.team_insights == []

    def test_fallbacks_are_fresh_instances(self):
        first = fallbacks.fallback_orchestration_result()
        first.overall_health.recommendations.append("mutated")

        assert fallbacks.fallback_orchestration_result().overall_health.recommendations == [
            "Check system status", "Retry analysis later"
        ]
