"""
Agent state and inter-agent message envelopes.
"""

from pydantic import BaseModel, Field
from typing import Any, Optional
from datetime import datetime
from enum import Enum

from .core import Priority


class MessageType(str, Enum):
    """Kinds of notifications exchanged between agents."""
    STATUS_UPDATE = "status_update"
    RISK_ALERT = "risk_alert"
    RESOURCE_REQUEST = "resource_request"
    DEPENDENCY_CHANGE = "dependency_change"
    TIMELINE_UPDATE = "timeline_update"


MessagePriority = Priority


class AgentMessage(BaseModel):
    """Typed, prioritized, timestamped unit of inter-agent communication."""
    id: str = Field(..., min_length=1)
    sender: str = Field(..., min_length=1)
    recipient: str = Field(..., min_length=1)
    type: MessageType
    data: Any = None
    timestamp: datetime = Field(default_factory=datetime.now)
    priority: MessagePriority = MessagePriority.MEDIUM


class DeliveryResult(BaseModel):
    """Outcome of delivering one message to one recipient."""
    message_id: str
    recipient: str
    delivered: bool
    error: Optional[str] = None


class AgentStatus(str, Enum):
    """Agent lifecycle status."""
    ACTIVE = "active"
    IDLE = "idle"
    PROCESSING = "processing"
    ERROR = "error"


class AgentState(BaseModel):
    """Observable state owned by a single agent."""
    id: str
    name: str
    status: AgentStatus = AgentStatus.IDLE
    last_update: datetime = Field(default_factory=datetime.now)
    confidence: float = Field(default=100, ge=0, le=100)
    current_task: Optional[str] = None


class AgentStateSnapshot(BaseModel):
    """Agent state as collected by the orchestrator, keyed by its local agent id."""
    agent_id: str
    id: Optional[str] = None
    name: Optional[str] = None
    status: AgentStatus
    last_update: datetime = Field(default_factory=datetime.now)
    confidence: float = Field(..., ge=0, le=100)
    current_task: Optional[str] = None
