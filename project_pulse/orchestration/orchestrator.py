"""
Agent Orchestration System for Project Pulse.

This module fans a project snapshot out to the capability agents, joins their
settled outcomes, substitutes fallbacks for failed capabilities, relays
cross-agent alerts, and folds everything into one health report.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from ..agents.base import BaseAgent, deliver_message
from ..agents.dependency_tracker_agent import DependencyTrackerAgent
from ..agents.resource_allocation_agent import ResourceAllocationAgent
from ..agents.risk_detection_agent import RiskDetectionAgent
from ..agents.team_agent import TeamAgent
from ..agents.timeline_adjustment_agent import TimelineAdjustmentAgent
from ..models.analysis import (
    DependencyAnalysis, DependencyAnalysisInput, OrchestrationResult,
    ResourceAnalysisInput, ResourceOptimization, RiskAssessment, RiskLevel,
    TeamAnalysisInput, TeamInsight, TeamMemberView, TeamTaskView,
    TimelineAnalysisInput, TimelineOptimization
)
from ..models.core import ProjectData, Team
from ..models.errors import (
    AgentNotFoundError, ErrorCategory, ErrorResponse, ErrorSeverity, OrchestratorNotInitializedError,
    ProjectPulseError
)
from ..models.messaging import AgentMessage, AgentStateSnapshot, AgentStatus, MessagePriority, MessageType
from ..utils.config import AgentSettings, SystemConfig, get_config
from ..utils.error_handler import ErrorHandler
from ..utils.logging import LoggerMixin, project_log_context
from . import fallbacks
from .health import calculate_overall_health
from .registry import AgentDirectory

DEPENDENCY_TRACKER = "dependency-tracker"
RISK_DETECTOR = "risk-detector"
TIMELINE_ADJUSTER = "timeline-adjuster"
RESOURCE_ALLOCATOR = "resource-allocator"
TEAM_INSIGHTS = "team-insights"
TEAM_AGENT_PREFIX = "team-"

CAPABILITY_AGENTS = (DEPENDENCY_TRACKER, RISK_DETECTOR, TIMELINE_ADJUSTER, RESOURCE_ALLOCATOR)

AgentFactory = Callable[[AgentDirectory], BaseAgent]
TeamAgentFactory = Callable[[Team, AgentDirectory], BaseAgent]

ResultT = TypeVar("ResultT", bound=BaseModel)


def default_agent_factories(settings: Optional[AgentSettings] = None) -> Dict[str, AgentFactory]:
    """Factories for the four fixed capability agents."""
    settings = settings or AgentSettings()
    return {
        DEPENDENCY_TRACKER: lambda directory: DependencyTrackerAgent(directory=directory, settings=settings),
        RISK_DETECTOR: lambda directory: RiskDetectionAgent(directory=directory, settings=settings),
        TIMELINE_ADJUSTER: lambda directory: TimelineAdjustmentAgent(directory=directory, settings=settings),
        RESOURCE_ALLOCATOR: lambda directory: ResourceAllocationAgent(directory=directory, settings=settings),
    }


def default_team_agent_factory(team: Team, directory: AgentDirectory) -> BaseAgent:
    return TeamAgent(team.id, team.name, directory=directory)


def team_agent_key(team_id: str) -> str:
    return f"{TEAM_AGENT_PREFIX}{team_id}"


@dataclass
class OrchestrationConfig:
    """Configuration for the orchestration system."""
    recommendation_limit: int = 5
    log_phase_timings: bool = True
    agent_settings: AgentSettings = field(default_factory=AgentSettings)

    @classmethod
    def from_system_config(cls, config: SystemConfig) -> "OrchestrationConfig":
        return cls(
            recommendation_limit=config.orchestration.recommendation_limit,
            log_phase_timings=config.orchestration.log_phase_timings,
            agent_settings=config.agents,
        )


@dataclass
class AnalysisOutcome:
    """Settled outcome of one fan-out task: either a value or the failure reason."""
    capability: str
    value: Any = None
    error: Optional[BaseException] = None
    duration_ms: int = 0
    error_response: Optional[ErrorResponse] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TeamInsightBatch:
    """Insights from the sequential team loop, with the teams that fell back."""
    insights: List[TeamInsight] = field(default_factory=list)
    failed_team_ids: List[str] = field(default_factory=list)

    @property
    def has_real_insight(self) -> bool:
        return len(self.insights) > len(self.failed_team_ids)


@dataclass
class CollectedResults:
    """Fan-in view handed to cross-agent rules and the health scorer."""
    dependency_analysis: DependencyAnalysis
    risk_assessment: RiskAssessment
    timeline_optimization: TimelineOptimization
    resource_optimization: ResourceOptimization
    team_insights: List[TeamInsight]


CrossAgentRule = Callable[["AgentOrchestrator", CollectedResults], Awaitable[None]]


async def notify_timeline_of_risks(orchestrator: "AgentOrchestrator", results: CollectedResults) -> None:
    """Risk detector alerts the timeline adjuster about high and critical risks."""
    risk = results.risk_assessment
    if risk.risk_level not in (RiskLevel.HIGH, RiskLevel.CRITICAL):
        return

    sender = orchestrator.resolve_agent(RISK_DETECTOR)
    timeline_agent = orchestrator.resolve_agent(TIMELINE_ADJUSTER)
    if sender is None or timeline_agent is None:
        orchestrator.logger.warning("Risk alert skipped, risk or timeline agent unavailable")
        return

    data = {
        "risks": [
            r.model_dump(mode="json") for r in risk.active_risks
            if r.severity in (RiskLevel.HIGH, RiskLevel.CRITICAL)
        ],
        "predicted_delays": [d.model_dump(mode="json") for d in risk.predicted_delays],
    }

    send = getattr(sender, "send_message", None)
    if callable(send):
        await send(timeline_agent.id, MessageType.RISK_ALERT, data, MessagePriority.HIGH)
        return

    # Agents that only implement process/handle_message get the envelope routed for them
    message = AgentMessage(
        id=f"{sender.id}-{time.monotonic_ns()}",
        sender=sender.id,
        recipient=timeline_agent.id,
        type=MessageType.RISK_ALERT,
        data=data,
        priority=MessagePriority.HIGH,
    )
    delivery = await deliver_message(orchestrator.directory, message)
    if not delivery.delivered:
        orchestrator.logger.warning("Risk alert delivery failed", recipient=delivery.recipient,
                                    error=delivery.error)


def build_team_analysis_input(team_id: str, project_data: ProjectData) -> TeamAnalysisInput:
    """Slice the project snapshot down to one team's tasks and members."""
    tasks = [
        TeamTaskView(
            id=task.id,
            title=task.title,
            status=task.status,
            assignee=task.assignee,
            priority=task.priority,
            estimated_hours=task.estimated_hours,
            actual_hours=task.actual_hours,
            dependencies=list(task.dependencies),
            due_date=task.end_date,
            progress=task.progress,
        )
        for task in project_data.tasks_for_team(team_id)
    ]

    members = []
    for resource in project_data.resources_for_team(team_id):
        workload = sum(
            task.estimated_hours for task in project_data.tasks_for_team(team_id)
            if task.assignee == resource.name or task.assignee_id == resource.id
        )
        members.append(TeamMemberView(
            id=resource.id,
            name=resource.name,
            skills=list(resource.skills),
            current_workload=workload,
            max_capacity=resource.capacity,
            availability=resource.availability,
        ))

    return TeamAnalysisInput(tasks=tasks, members=members)


def _coerce(result: Any, result_type: Type[ResultT]) -> ResultT:
    if isinstance(result, result_type):
        return result
    return result_type.model_validate(result)


class AgentOrchestrator(LoggerMixin):
    """
    Coordinator for the project analysis agents.

    Owns one agent per fixed capability plus one agent per team, runs the
    analyses concurrently, and never lets a single capability failure fail the
    whole request.
    """

    def __init__(
        self,
        directory: Optional[AgentDirectory] = None,
        config: Optional[OrchestrationConfig] = None,
        agent_factories: Optional[Mapping[str, AgentFactory]] = None,
        team_agent_factory: Optional[TeamAgentFactory] = None,
        cross_agent_rules: Optional[Sequence[CrossAgentRule]] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self.directory = directory if directory is not None else AgentDirectory()
        self.error_handler = error_handler or ErrorHandler()
        self.cross_agent_rules: List[CrossAgentRule] = (
            list(cross_agent_rules) if cross_agent_rules is not None else [notify_timeline_of_risks]
        )
        self.config = config
        self._agent_factories: Dict[str, AgentFactory] = {}
        self._team_agent_factory = team_agent_factory or default_team_agent_factory

        self._agents: Dict[str, BaseAgent] = {}
        self._last_outcomes: Dict[str, AnalysisOutcome] = {}
        self._is_initialized = False

        try:
            if self.config is None:
                self.config = OrchestrationConfig.from_system_config(get_config())
            self._agent_factories = default_agent_factories(self.config.agent_settings)
            if agent_factories:
                self._agent_factories.update(agent_factories)
            self._initialize_agents()
        except Exception as e:
            self.log_operation_error("initialize_agents", e)
            if self.config is None:
                self.config = OrchestrationConfig()
            self._is_initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def _initialize_agents(self):
        """Create and register the fixed capability agents."""
        for capability in CAPABILITY_AGENTS:
            agent = self._agent_factories[capability](self.directory)
            if not self.directory.register(agent):
                raise ProjectPulseError(
                    f"Invalid agent produced for {capability}",
                    ErrorCategory.INITIALIZATION,
                    ErrorSeverity.CRITICAL,
                )
            self._agents[capability] = agent

        self._is_initialized = True
        self.logger.info("Capability agents initialized", agents=list(self._agents))

    async def orchestrate_project(self, project_data: Union[ProjectData, Dict[str, Any]]) -> OrchestrationResult:
        """
        Run every analysis for a project and fold the results into one report.

        Args:
            project_data: Project snapshot, or a mapping that validates into one

        Returns:
            OrchestrationResult: Always a complete result; failed capabilities
            are replaced by their fallback values

        Raises:
            OrchestratorNotInitializedError: If the capability agents could not be created
        """
        if not self._is_initialized:
            self.logger.error("Agent orchestrator not initialized")
            raise OrchestratorNotInitializedError()

        started = time.perf_counter()

        try:
            if not isinstance(project_data, ProjectData):
                project_data = ProjectData.model_validate(project_data)

            with project_log_context(project_data.project.id):
                return await self._analyze_project(project_data, started)

        except Exception as e:
            self.log_operation_error("orchestrate_project", e)
            return fallbacks.fallback_orchestration_result()

    async def _analyze_project(self, project_data: ProjectData, started: float) -> OrchestrationResult:
        project_id = project_data.project.id
        self.log_operation_start("orchestrate_project")

        team_agents = self._create_team_agents(project_data.teams)

        outcomes = await asyncio.gather(
            self._settle(DEPENDENCY_TRACKER, self._safe_agent_process(
                DEPENDENCY_TRACKER,
                DependencyAnalysisInput(
                    tasks=project_data.tasks,
                    dependencies=project_data.dependencies,
                ),
                DependencyAnalysis,
            )),
            self._settle(RISK_DETECTOR, self._safe_agent_process(
                RISK_DETECTOR, project_data, RiskAssessment,
            )),
            self._settle(TIMELINE_ADJUSTER, self._safe_agent_process(
                TIMELINE_ADJUSTER,
                TimelineAnalysisInput(
                    project=project_data.project,
                    tasks=project_data.tasks,
                    dependencies=project_data.dependencies,
                    resources=project_data.resources,
                    constraints=[],
                ),
                TimelineOptimization,
            )),
            self._settle(RESOURCE_ALLOCATOR, self._safe_agent_process(
                RESOURCE_ALLOCATOR,
                ResourceAnalysisInput(
                    resources=project_data.resources,
                    tasks=project_data.tasks,
                    teams=project_data.teams,
                    current_allocations=[],
                    skill_requirements=project_data.skill_requirements,
                ),
                ResourceOptimization,
            )),
            self._settle(TEAM_INSIGHTS, self._process_team_insights(team_agents, project_data)),
        )

        self._last_outcomes = {outcome.capability: outcome for outcome in outcomes}
        for outcome in outcomes:
            if outcome.ok:
                if self.config.log_phase_timings:
                    self.logger.info(
                        f"Agent {outcome.capability} completed successfully",
                        duration_ms=outcome.duration_ms
                    )
            else:
                outcome.error_response = self.error_handler.handle_agent_error(
                    outcome.capability, outcome.error, project_id=project_id
                )

        dependency_outcome, risk_outcome, timeline_outcome, resource_outcome, team_outcome = outcomes
        team_batch: TeamInsightBatch = team_outcome.value if team_outcome.ok else TeamInsightBatch()

        if not any(o.ok for o in outcomes[:4]) and not team_batch.has_real_insight:
            self.logger.warning("No analysis produced a result, returning fallback assessment")
            return fallbacks.fallback_orchestration_result()

        results = CollectedResults(
            dependency_analysis=(dependency_outcome.value if dependency_outcome.ok
                                 else fallbacks.fallback_dependency_analysis()),
            risk_assessment=(risk_outcome.value if risk_outcome.ok
                             else fallbacks.fallback_risk_assessment()),
            timeline_optimization=(timeline_outcome.value if timeline_outcome.ok
                                   else fallbacks.fallback_timeline_optimization()),
            resource_optimization=(resource_outcome.value if resource_outcome.ok
                                   else fallbacks.fallback_resource_optimization()),
            team_insights=(team_batch.insights if team_outcome.ok
                           else fallbacks.fallback_team_insights()),
        )

        await self._facilitate_cross_agent_communication(results)

        overall_health = calculate_overall_health(
            results.dependency_analysis,
            results.risk_assessment,
            results.timeline_optimization,
            results.resource_optimization,
            results.team_insights,
            recommendation_limit=self.config.recommendation_limit,
        )

        result = OrchestrationResult(
            team_insights=results.team_insights,
            dependency_analysis=results.dependency_analysis,
            risk_assessment=results.risk_assessment,
            timeline_optimization=results.timeline_optimization,
            resource_optimization=results.resource_optimization,
            overall_health=overall_health,
            agent_states=self._collect_agent_states(),
        )

        duration_ms = int((time.perf_counter() - started) * 1000)
        self.log_operation_success(
            "orchestrate_project", duration_ms,
            score=overall_health.score,
            level=overall_health.level.value,
        )
        return result

    async def _settle(self, capability: str, operation: Awaitable[Any]) -> AnalysisOutcome:
        """Await one fan-out task and turn its failure into a value."""
        started = time.perf_counter()
        try:
            value = await operation
        except Exception as e:
            return AnalysisOutcome(
                capability=capability,
                error=e,
                duration_ms=int((time.perf_counter() - started) * 1000),
            )
        return AnalysisOutcome(
            capability=capability,
            value=value,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )

    def resolve_agent(self, capability: str) -> Optional[BaseAgent]:
        """Look up the live agent for a capability through the directory."""
        agent = self._agents.get(capability)
        if agent is None:
            return None
        return self.directory.lookup(agent.id)

    async def _safe_agent_process(self, capability: str, data: Any, result_type: Type[ResultT]) -> ResultT:
        agent = self.resolve_agent(capability)
        if agent is None or not callable(getattr(agent, "process", None)):
            raise AgentNotFoundError(capability)

        result = await agent.process(data)
        return _coerce(result, result_type)

    def _create_team_agents(self, teams: Sequence[Team]) -> List[Tuple[Team, BaseAgent]]:
        """Make sure every distinct team owns a registered agent."""
        team_agents: List[Tuple[Team, BaseAgent]] = []
        seen = set()

        for team in teams:
            if team.id in seen:
                continue
            seen.add(team.id)

            key = team_agent_key(team.id)
            existing = self._agents.get(key)
            if existing is not None:
                if self.directory.lookup(existing.id) is not existing:
                    self.logger.warning(f"Team agent {existing.id} missing from directory, re-registering")
                    self.directory.register(existing)
                team_agents.append((team, existing))
                continue

            try:
                agent = self._team_agent_factory(team, self.directory)
                if not self.directory.register(agent):
                    raise ProjectPulseError(f"Invalid agent produced for team {team.id}")
                self._agents[key] = agent
                team_agents.append((team, agent))
            except Exception as e:
                self.logger.error(f"Error creating team agent for {team.id}: {e}")

        return team_agents

    async def _process_team_insights(self, team_agents: List[Tuple[Team, BaseAgent]],
                                     project_data: ProjectData) -> TeamInsightBatch:
        """Analyse teams one after another; a failing team only loses its own insight."""
        batch = TeamInsightBatch()

        for team, agent in team_agents:
            try:
                result = await agent.process(build_team_analysis_input(team.id, project_data))
                if isinstance(result, TeamInsight):
                    insight = result.model_copy(update={"team_id": team.id})
                else:
                    insight = TeamInsight.model_validate({**dict(result), "team_id": team.id})
            except Exception as e:
                self.logger.error(f"Team agent {agent.id} failed: {e}")
                insight = fallbacks.fallback_team_insight(team.id)
                batch.failed_team_ids.append(team.id)
            batch.insights.append(insight)

        return batch

    async def _facilitate_cross_agent_communication(self, results: CollectedResults):
        for rule in self.cross_agent_rules:
            try:
                await rule(self, results)
            except Exception as e:
                self.logger.error(f"Cross-agent communication failed: {e}",
                                  rule=getattr(rule, "__name__", repr(rule)))

    def _collect_agent_states(self) -> List[AgentStateSnapshot]:
        states = []
        for agent_id, agent in list(self._agents.items()):
            try:
                state = agent.get_state()
                states.append(AgentStateSnapshot(agent_id=agent_id, **state.model_dump()))
            except Exception as e:
                self.logger.error(f"Failed to get state for agent {agent_id}: {e}")
                states.append(AgentStateSnapshot(
                    agent_id=agent_id,
                    status=AgentStatus.ERROR,
                    confidence=0,
                ))
        return states

    def get_agent(self, agent_id: str) -> Optional[BaseAgent]:
        return self._agents.get(agent_id)

    def get_all_agents(self) -> List[BaseAgent]:
        return list(self._agents.values())

    def get_orchestrator_status(self) -> Dict[str, Any]:
        """Get overall orchestrator status and the outcome of the last run."""
        return {
            "initialized": self._is_initialized,
            "agents": list(self._agents.keys()),
            "directory_size": len(self.directory),
            "last_run": {
                capability: self._describe_outcome(outcome)
                for capability, outcome in self._last_outcomes.items()
            },
            "error_stats": self.error_handler.get_error_stats(),
        }

    @staticmethod
    def _describe_outcome(outcome: AnalysisOutcome) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "ok": outcome.ok,
            "duration_ms": outcome.duration_ms,
            "error": str(outcome.error) if outcome.error else None,
        }
        if outcome.error_response is not None:
            entry["category"] = outcome.error_response.error.category.value
            entry["severity"] = outcome.error_response.error.severity.value
            entry["suggested_actions"] = list(outcome.error_response.suggested_actions)
        return entry

    async def shutdown_agents(self) -> None:
        """Unregister every owned agent. Safe to call repeatedly."""
        try:
            for agent_id, agent in list(self._agents.items()):
                try:
                    self.directory.remove(getattr(agent, "id", agent_id))
                except Exception as e:
                    self.logger.error(f"Error removing agent {agent_id}: {e}")
            self._agents.clear()
            self._is_initialized = False
            self.logger.info("Agents shut down")
        except Exception as e:
            self.logger.error(f"Error shutting down agents: {e}")
