"""
Error handling models and exceptions for Project Pulse.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from datetime import datetime
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Categories of errors."""
    VALIDATION = "validation"
    INITIALIZATION = "initialization"
    AGENT_PROCESSING = "agent_processing"
    AGENT_COMMUNICATION = "agent_communication"
    TIMEOUT = "timeout"
    SYSTEM = "system"


class ErrorDetails(BaseModel):
    """Detailed error information."""
    error_id: str = Field(..., min_length=1)
    category: ErrorCategory
    severity: ErrorSeverity
    message: str = Field(..., min_length=1)
    details: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)
    agent_id: Optional[str] = None
    project_id: Optional[str] = None
    recoverable: bool = True


class ErrorResponse(BaseModel):
    """Standardized error response."""
    success: bool = False
    error: ErrorDetails
    fallback_used: bool = False
    suggested_actions: List[str] = Field(default_factory=list)


# Custom exceptions
class ProjectPulseError(Exception):
    """Base exception for Project Pulse."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.SYSTEM,
                 severity: ErrorSeverity = ErrorSeverity.MEDIUM, **kwargs):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = kwargs


class OrchestratorNotInitializedError(ProjectPulseError):
    """Raised when the orchestrator failed to construct its capability agents."""

    def __init__(self, message: str = "Agent orchestrator not initialized", **kwargs):
        super().__init__(message, ErrorCategory.INITIALIZATION, ErrorSeverity.CRITICAL, **kwargs)


class AgentNotFoundError(ProjectPulseError):
    """Raised when a capability agent cannot be resolved from the directory."""

    def __init__(self, agent_id: str, **kwargs):
        super().__init__(
            f"Agent {agent_id} not found or invalid",
            ErrorCategory.AGENT_PROCESSING,
            ErrorSeverity.HIGH,
            agent_id=agent_id,
            **kwargs
        )
        self.agent_id = agent_id
