"""
Analysis agents for Project Pulse.
"""

from .base import BaseAgent
from .dependency_tracker_agent import DependencyTrackerAgent, DependencyGraph
from .risk_detection_agent import RiskDetectionAgent
from .timeline_adjustment_agent import TimelineAdjustmentAgent
from .resource_allocation_agent import ResourceAllocationAgent
from .team_agent import TeamAgent

__all__ = [
    'BaseAgent',
    'DependencyTrackerAgent',
    'DependencyGraph',
    'RiskDetectionAgent',
    'TimelineAdjustmentAgent',
    'ResourceAllocationAgent',
    'TeamAgent',
]
