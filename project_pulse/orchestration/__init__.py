"""
Agent Orchestration System for Project Pulse.

This package provides:
- The agent directory used for lookup and message delivery
- Concurrent fan-out of the capability analyses with per-capability fallbacks
- Overall health scoring
"""

from .registry import AgentDirectory
from .health import calculate_overall_health, health_level_for
from .orchestrator import (
    AgentOrchestrator,
    OrchestrationConfig,
    AnalysisOutcome,
    CollectedResults,
    notify_timeline_of_risks,
    build_team_analysis_input,
)

__all__ = [
    'AgentDirectory',
    'calculate_overall_health',
    'health_level_for',
    'AgentOrchestrator',
    'OrchestrationConfig',
    'AnalysisOutcome',
    'CollectedResults',
    'notify_timeline_of_risks',
    'build_team_analysis_input',
]
