"""
Unit tests for logging utilities.
"""

import pytest
import structlog
from unittest.mock import MagicMock

from project_pulse.orchestration.orchestrator import DEPENDENCY_TRACKER, AgentOrchestrator
from project_pulse.utils.logging import LoggerMixin, project_log_context


class Worker(LoggerMixin):
    pass


class TestLoggerMixin:
    """Test cases for LoggerMixin."""

    def test_agents_bind_their_id(self, recording_agent):
        assert recording_agent.log_context == {"agent_id": "recorder"}

    def test_bind_log_context_merges_and_rebuilds_logger(self):
        worker = Worker()
        first = worker.logger

        worker.bind_log_context(agent_id="a")
        worker.bind_log_context(team="t")

        assert worker.log_context == {"agent_id": "a", "team": "t"}
        assert worker.logger is not first

    def test_operation_events(self):
        worker = Worker()
        worker._logger = MagicMock()

        worker.log_operation_start("analyze", tasks=3)
        worker.log_operation_success("analyze", 12)
        worker.log_operation_error("analyze", ValueError("bad input"))

        worker.logger.info.assert_any_call("Operation started", operation="analyze", tasks=3)
        worker.logger.info.assert_any_call(
            "Operation completed successfully", operation="analyze", duration_ms=12
        )
        worker.logger.error.assert_called_once_with(
            "Operation failed", operation="analyze", error="bad input", error_type="ValueError"
        )

    @pytest.mark.asyncio
    async def test_run_tracked_logs_operation(self, recording_agent):
        recording_agent._logger = MagicMock()

        await recording_agent.process({})

        _, kwargs = recording_agent.logger.info.call_args
        assert kwargs["operation"] == "record"
        assert isinstance(kwargs["duration_ms"], int)


class TestProjectLogContext:
    """Test cases for project-scoped log context."""

    def test_context_is_removed_after_block(self):
        with project_log_context("p-9"):
            assert structlog.contextvars.get_contextvars()["project_id"] == "p-9"

        assert "project_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_project_id_is_visible_inside_agents(self, sample_project, recording_agent_cls):
        seen = {}

        class ContextAgent(recording_agent_cls):
            async def process(self, data):
                seen.update(structlog.contextvars.get_contextvars())
                return await super().process(data)

        orchestrator = AgentOrchestrator(agent_factories={
            DEPENDENCY_TRACKER: lambda d: ContextAgent(DEPENDENCY_TRACKER, d),
        })

        await orchestrator.orchestrate_project(sample_project)

        assert seen["project_id"] == sample_project.project.id
        assert "project_id" not in structlog.contextvars.get_contextvars()
        await orchestrator.shutdown_agents()
