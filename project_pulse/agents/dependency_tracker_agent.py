"""
Dependency Tracker Agent for Project Pulse.

Builds the task dependency graph and reports:
- Circular dependencies
- References to tasks that do not exist
- The critical path (longest duration plus lag chain) when the graph is acyclic
- Bottleneck tasks that many other tasks wait on
"""

from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from .base import BaseAgent
from ..models.analysis import (
    DependencyAnalysis, DependencyAnalysisInput, DependencyEdge, DependencyNode
)
from ..models.core import Dependency, DependencyType, Task
from ..models.messaging import AgentMessage, MessageType
from ..utils.config import AgentSettings

CYCLE_PENALTY = 20
DANGLING_PENALTY = 5
BOTTLENECK_PENALTY = 5


class DependencyGraph:
    """
    Directed graph of task dependencies.

    An edge ``a -> b`` means ``b`` depends on ``a``.
    """

    def __init__(self, tasks: List[Task], dependencies: List[Dependency]):
        self.tasks: Dict[str, Task] = {task.id: task for task in tasks}
        self.edges: List[DependencyEdge] = []
        self.successors: Dict[str, List[str]] = {task_id: [] for task_id in self.tasks}
        self.dangling: List[str] = []

        seen: Set[Tuple[str, str]] = set()

        for dependency in dependencies:
            self._add_edge(dependency.from_task, dependency.to_task, dependency.type, dependency.lag, seen)

        # Tasks may also list their prerequisites inline
        for task in tasks:
            for prerequisite in task.dependencies:
                self._add_edge(prerequisite, task.id, DependencyType.FINISH_TO_START, 0, seen)

    def _add_edge(self, from_task: str, to_task: str, dep_type: DependencyType, lag: int,
                  seen: Set[Tuple[str, str]]) -> None:
        if (from_task, to_task) in seen:
            return
        seen.add((from_task, to_task))

        missing = [task_id for task_id in (from_task, to_task) if task_id not in self.tasks]
        if missing:
            for task_id in missing:
                if task_id not in self.dangling:
                    self.dangling.append(task_id)
            return

        self.edges.append(DependencyEdge(from_task=from_task, to_task=to_task, type=dep_type, lag=lag))
        self.successors[from_task].append(to_task)

    def dependents_count(self, task_id: str) -> int:
        return len(self.successors.get(task_id, []))

    def find_cycles(self) -> List[List[str]]:
        """Find distinct cycles using an iterative depth-first search."""
        cycles: List[List[str]] = []
        seen_cycles: Set[frozenset] = set()
        visited: Set[str] = set()

        for root in self.tasks:
            if root in visited:
                continue

            visited.add(root)
            path: List[str] = [root]
            on_path: Set[str] = {root}
            stack: List[Tuple[str, Iterator[str]]] = [(root, iter(self.successors.get(root, [])))]

            while stack:
                node_id, neighbors = stack[-1]
                neighbor = next(neighbors, None)

                if neighbor is None:
                    stack.pop()
                    path.pop()
                    on_path.remove(node_id)
                elif neighbor in on_path:
                    cycle = path[path.index(neighbor):]
                    key = frozenset(cycle)
                    if key not in seen_cycles:
                        seen_cycles.add(key)
                        cycles.append(list(cycle))
                elif neighbor not in visited:
                    visited.add(neighbor)
                    path.append(neighbor)
                    on_path.add(neighbor)
                    stack.append((neighbor, iter(self.successors.get(neighbor, []))))

        return cycles

    def critical_path(self, hours_per_day: float) -> List[str]:
        """Longest duration-plus-lag chain; only meaningful for acyclic graphs."""
        order = self.topological_order()
        if order is None:
            return []

        lag_by_edge = {(edge.from_task, edge.to_task): edge.lag for edge in self.edges}
        finish: Dict[str, int] = {}
        previous: Dict[str, Optional[str]] = {}

        for task_id in order:
            finish.setdefault(task_id, self.tasks[task_id].duration_days(hours_per_day))
            previous.setdefault(task_id, None)

            for successor in self.successors[task_id]:
                candidate = (
                    finish[task_id]
                    + lag_by_edge.get((task_id, successor), 0)
                    + self.tasks[successor].duration_days(hours_per_day)
                )
                if candidate > finish.get(successor, 0):
                    finish[successor] = candidate
                    previous[successor] = task_id

        if not finish:
            return []

        end = max(order, key=lambda task_id: finish[task_id])
        path = []
        current: Optional[str] = end
        while current is not None:
            path.append(current)
            current = previous[current]
        return list(reversed(path))

    def topological_order(self) -> Optional[List[str]]:
        """Kahn ordering, or None when the graph has a cycle."""
        in_degree = {task_id: 0 for task_id in self.tasks}
        for edge in self.edges:
            in_degree[edge.to_task] += 1

        ready = [task_id for task_id in self.tasks if in_degree[task_id] == 0]
        order = []
        while ready:
            task_id = ready.pop(0)
            order.append(task_id)
            for successor in self.successors[task_id]:
                in_degree[successor] -= 1
                if in_degree[successor] == 0:
                    ready.append(successor)

        if len(order) != len(self.tasks):
            return None
        return order


class DependencyTrackerAgent(BaseAgent):
    """
    Agent responsible for task dependency analysis.
    """

    def __init__(self, agent_id: str = "dependency-tracker", directory=None,
                 settings: Optional[AgentSettings] = None):
        super().__init__(agent_id, "Dependency Tracker", directory)
        self.settings = settings or AgentSettings()
        self.dependency_changes: List[AgentMessage] = []

    async def process(self, data: Any) -> DependencyAnalysis:
        if not isinstance(data, DependencyAnalysisInput):
            data = DependencyAnalysisInput.model_validate(data)
        return await self._run_tracked("analyze_dependencies", self._analyze, data)

    async def _analyze(self, data: DependencyAnalysisInput) -> DependencyAnalysis:
        graph = DependencyGraph(data.tasks, data.dependencies)
        hours_per_day = self.settings.hours_per_day

        cycles = graph.find_cycles()
        critical_path = [] if cycles else graph.critical_path(hours_per_day)

        threshold = self.settings.bottleneck_dependent_threshold
        bottlenecks = [
            task_id for task_id in graph.tasks
            if graph.dependents_count(task_id) >= threshold
        ]

        nodes = [
            DependencyNode(
                task_id=task.id,
                title=task.title,
                status=task.status,
                duration_days=task.duration_days(hours_per_day),
                dependents=graph.dependents_count(task.id),
            )
            for task in graph.tasks.values()
        ]

        health_score = (
            100
            - CYCLE_PENALTY * len(cycles)
            - DANGLING_PENALTY * len(graph.dangling)
            - BOTTLENECK_PENALTY * len(bottlenecks)
        )

        if cycles:
            self.logger.warning(f"Detected {len(cycles)} circular dependencies")

        return DependencyAnalysis(
            nodes=nodes,
            edges=graph.edges,
            critical_path=critical_path,
            circular_dependencies=cycles,
            bottlenecks=bottlenecks,
            dangling_references=graph.dangling,
            health_score=max(0, min(100, health_score)),
        )

    async def handle_message(self, message: AgentMessage) -> None:
        if message.type == MessageType.DEPENDENCY_CHANGE:
            self.dependency_changes.append(message)
            self.logger.info(f"Recorded dependency change from {message.sender}")
        else:
            self.logger.debug(f"Ignoring {message.type.value} message from {message.sender}")
