"""
Agent directory for Project Pulse.

The directory maps agent ids to live agent instances. It is the only structure
shared between agents and the orchestrator, so every write is a single
lock-protected insert or delete.
"""

import threading
from typing import Dict, List, Optional, TYPE_CHECKING

from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..agents.base import BaseAgent


class AgentDirectory:
    """
    Registry of live agents used for lookup and message delivery.

    A fresh directory is created per orchestrator (or per test) and injected
    into every agent at construction time.
    """

    def __init__(self):
        self._agents: Dict[str, "BaseAgent"] = {}
        self._lock = threading.Lock()
        self.logger = get_logger(f"{__name__}.AgentDirectory")

    def register(self, agent: Optional["BaseAgent"]) -> bool:
        """
        Register an agent instance, replacing any agent with the same id.

        Args:
            agent: Agent instance to register

        Returns:
            bool: False when the agent or its id is invalid
        """
        agent_id = getattr(agent, "id", None)
        if agent is None or not isinstance(agent_id, str) or not agent_id:
            self.logger.error("Invalid agent provided for registration", agent=repr(agent))
            return False

        with self._lock:
            replaced = agent_id in self._agents
            self._agents[agent_id] = agent

        if replaced:
            self.logger.info(f"Replaced agent: {agent_id}")
        else:
            self.logger.info(f"Registered agent: {agent_id}")
        return True

    def lookup(self, agent_id: str) -> Optional["BaseAgent"]:
        """
        Retrieve an agent by id.

        Returns:
            BaseAgent: Agent instance or None if not registered
        """
        with self._lock:
            return self._agents.get(agent_id)

    def remove(self, agent_id: str) -> None:
        """Unregister an agent; removing an unknown id is a no-op."""
        with self._lock:
            removed = self._agents.pop(agent_id, None)
        if removed is not None:
            self.logger.debug(f"Removed agent: {agent_id}")

    def list_all(self) -> List["BaseAgent"]:
        with self._lock:
            return list(self._agents.values())

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._agents.keys())

    def clear(self) -> None:
        with self._lock:
            self._agents.clear()

    def __contains__(self, agent_id: object) -> bool:
        with self._lock:
            return agent_id in self._agents

    def __len__(self) -> int:
        with self._lock:
            return len(self._agents)
