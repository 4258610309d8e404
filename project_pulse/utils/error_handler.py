"""
Centralized classification and bookkeeping for agent failures.

Failures inside the orchestration protocol are never retried: each one is
classified, logged at a severity-appropriate level, counted per agent, and
replaced by a fallback value by the caller.
"""

import asyncio
import uuid
from typing import Any, Dict, List, Optional

from ..models.errors import (
    ErrorDetails, ErrorResponse, ErrorCategory, ErrorSeverity,
    ProjectPulseError
)
from .logging import get_logger


class ErrorHandler:
    """Centralized error handling system."""

    def __init__(self):
        self.logger = get_logger(__name__)
        self.error_stats: Dict[str, Dict[str, int]] = {}

    def handle_agent_error(
        self,
        agent_id: str,
        error: BaseException,
        project_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        fallback_used: bool = True
    ) -> ErrorResponse:
        """Handle errors from agents with standardized response."""
        context = dict(context or {})
        context.update({
            "agent_id": agent_id,
            "project_id": project_id
        })

        error_details = self._create_error_details(error, context, agent_id=agent_id)
        self._log_error(error_details)
        self._update_error_stats(agent_id, error_details.category.value)

        return ErrorResponse(
            error=error_details,
            fallback_used=fallback_used,
            suggested_actions=self._get_recovery_strategies(error_details)
        )

    def _create_error_details(
        self,
        error: BaseException,
        context: Dict[str, Any],
        agent_id: Optional[str] = None
    ) -> ErrorDetails:
        """Create standardized error details."""
        if isinstance(error, ProjectPulseError):
            category = error.category
            severity = error.severity
            message = error.message
            details = str(error)
        else:
            category = self._classify_error(error)
            severity = self._determine_severity(category)
            message = str(error) or type(error).__name__
            details = f"{type(error).__name__}: {error}"

        project_id = context.get("project_id")

        return ErrorDetails(
            error_id=str(uuid.uuid4()),
            category=category,
            severity=severity,
            message=message,
            details=details,
            context=context,
            agent_id=agent_id,
            project_id=str(project_id) if project_id is not None else None,
            recoverable=category != ErrorCategory.INITIALIZATION
        )

    def _classify_error(self, error: BaseException) -> ErrorCategory:
        """Classify error into appropriate category."""
        if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
            return ErrorCategory.TIMEOUT

        error_type = type(error).__name__.lower()

        if any(keyword in error_type for keyword in ["validation", "value", "type", "key"]):
            return ErrorCategory.VALIDATION
        elif any(keyword in error_type for keyword in ["message", "delivery", "communication"]):
            return ErrorCategory.AGENT_COMMUNICATION
        else:
            return ErrorCategory.AGENT_PROCESSING

    def _determine_severity(self, category: ErrorCategory) -> ErrorSeverity:
        """Determine error severity based on category."""
        if category == ErrorCategory.INITIALIZATION:
            return ErrorSeverity.CRITICAL
        elif category == ErrorCategory.VALIDATION:
            return ErrorSeverity.HIGH
        elif category in [ErrorCategory.AGENT_PROCESSING, ErrorCategory.TIMEOUT]:
            return ErrorSeverity.MEDIUM
        else:
            return ErrorSeverity.LOW

    def _get_recovery_strategies(self, error_details: ErrorDetails) -> List[str]:
        """Get suggested recovery strategies for error."""
        strategies = []

        if error_details.category == ErrorCategory.VALIDATION:
            strategies.extend([
                "Validate project data format",
                "Check required task and team fields"
            ])
        elif error_details.category == ErrorCategory.TIMEOUT:
            strategies.append("Retry analysis later")
        elif error_details.category == ErrorCategory.AGENT_PROCESSING:
            strategies.extend([
                "Check agent directory status",
                "Review agent input slice for malformed records"
            ])
        elif error_details.category == ErrorCategory.INITIALIZATION:
            strategies.append("Recreate the orchestrator")

        return strategies

    def _log_error(self, error_details: ErrorDetails):
        """Log error with appropriate level."""
        log_message = (
            f"Error {error_details.error_id}: {error_details.message} "
            f"[{error_details.category.value}/{error_details.severity.value}]"
        )

        if error_details.agent_id:
            log_message += f" Agent: {error_details.agent_id}"

        if error_details.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(log_message)
        elif error_details.severity == ErrorSeverity.HIGH:
            self.logger.error(log_message)
        elif error_details.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(log_message)
        else:
            self.logger.info(log_message)

    def _update_error_stats(self, agent_id: str, category: str):
        """Update error statistics."""
        agent_stats = self.error_stats.setdefault(agent_id, {})
        agent_stats[category] = agent_stats.get(category, 0) + 1

    def get_error_stats(self) -> Dict[str, Dict[str, int]]:
        """Get current error statistics."""
        return {agent_id: dict(stats) for agent_id, stats in self.error_stats.items()}
