"""
Base agent interface and messaging primitives for Project Pulse.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Optional, Set, TYPE_CHECKING, Union
import asyncio
import time
from datetime import datetime

from ..models.messaging import (
    AgentMessage, AgentState, AgentStatus, DeliveryResult, MessagePriority, MessageType
)
from ..utils.logging import LoggerMixin

if TYPE_CHECKING:
    from ..orchestration.registry import AgentDirectory


async def deliver_message(directory: "AgentDirectory", message: AgentMessage) -> DeliveryResult:
    """
    Hand a message to its recipient as registered in the directory.

    Recipients built on BaseAgent receive through ``receive_message`` so the
    message lands in their inbox; any other registered object only needs
    ``handle_message``.

    Returns:
        DeliveryResult: Never raises; failures are reported in the result
    """
    target = directory.lookup(message.recipient)
    receive = getattr(target, "receive_message", None)
    if not callable(receive):
        receive = getattr(target, "handle_message", None)

    if target is None or not callable(receive):
        return DeliveryResult(
            message_id=message.id, recipient=message.recipient, delivered=False,
            error=f"Recipient {message.recipient} is not registered"
        )

    try:
        await receive(message)
    except Exception as e:
        return DeliveryResult(
            message_id=message.id, recipient=message.recipient, delivered=False,
            error=str(e)
        )

    return DeliveryResult(message_id=message.id, recipient=message.recipient, delivered=True)


class BaseAgent(LoggerMixin, ABC):
    """
    Abstract base class for all Project Pulse agents.

    An agent exposes exactly two operations to the rest of the system:
    ``process`` (the analysis contract) and ``handle_message`` (the
    notification contract). Everything else here is shared plumbing: the
    agent's own state, its inbox, its subscribers, and fire-and-forget
    delivery through the injected agent directory.
    """

    def __init__(self, agent_id: str, name: str, directory: Optional["AgentDirectory"] = None):
        self.id = agent_id
        self.name = name
        self.directory = directory
        self.bind_log_context(agent_id=agent_id)
        self._state = AgentState(id=agent_id, name=name)
        self._inbox: List[AgentMessage] = []
        self._subscribers: Set[str] = set()
        self._last_message_ns = 0
        self.last_delivery: Optional[DeliveryResult] = None

    @abstractmethod
    async def process(self, data: Any) -> Any:
        """
        Run this agent's analysis.

        Args:
            data: Capability-specific input

        Returns:
            Capability-specific result
        """
        pass

    @abstractmethod
    async def handle_message(self, message: AgentMessage) -> None:
        """React to a message addressed to this agent."""
        pass

    @property
    def inbox(self) -> List[AgentMessage]:
        """Messages received so far, oldest first."""
        return list(self._inbox)

    @property
    def subscribers(self) -> Set[str]:
        return set(self._subscribers)

    def get_state(self) -> AgentState:
        """Return a snapshot of the agent state; mutating it has no effect on the agent."""
        return self._state.model_copy(deep=True)

    def _update_state(self, **updates: Any) -> None:
        updates["last_update"] = datetime.now()
        self._state = self._state.model_copy(update=updates)

    async def _run_tracked(self, task_name: str, operation: Callable[..., Awaitable[Any]],
                           *args: Any, **kwargs: Any) -> Any:
        """
        Run an analysis step while keeping the agent state current.

        The agent is marked ``processing`` for the duration of the call, then
        ``active`` on success or ``error`` (with reduced confidence) on failure.
        Exceptions are re-raised so the caller decides on fallbacks.

        Args:
            task_name: Label stored as the agent's current task
            operation: Coroutine function to execute
            *args, **kwargs: Arguments for the operation

        Returns:
            Whatever the operation returns
        """
        start_time = datetime.now()
        self._update_state(status=AgentStatus.PROCESSING, current_task=task_name)

        try:
            result = await operation(*args, **kwargs)
        except Exception as e:
            execution_time = int((datetime.now() - start_time).total_seconds() * 1000)
            self._update_state(
                status=AgentStatus.ERROR,
                current_task=None,
                confidence=max(0.0, self._state.confidence - 25)
            )
            self.log_operation_error(task_name, e, duration_ms=execution_time)
            raise

        execution_time = int((datetime.now() - start_time).total_seconds() * 1000)
        self._update_state(status=AgentStatus.ACTIVE, current_task=None)
        self.log_operation_success(task_name, execution_time)
        return result

    def subscribe(self, agent_id: str) -> None:
        self._subscribers.add(agent_id)

    def unsubscribe(self, agent_id: str) -> None:
        self._subscribers.discard(agent_id)

    def _next_message_id(self) -> str:
        # Strictly increasing per sender even on clocks with coarse resolution.
        stamp = max(time.monotonic_ns(), self._last_message_ns + 1)
        self._last_message_ns = stamp
        return f"{self.id}-{stamp}"

    def _build_message(self, to: str, type: Union[MessageType, str], data: Any,
                       priority: Union[MessagePriority, str]) -> AgentMessage:
        return AgentMessage(
            id=self._next_message_id(),
            sender=self.id,
            recipient=to,
            type=MessageType(type),
            data=data,
            timestamp=datetime.now(),
            priority=MessagePriority(priority),
        )

    async def send_message(
        self,
        to: str,
        type: Union[MessageType, str],
        data: Any,
        priority: Union[MessagePriority, str] = MessagePriority.MEDIUM
    ) -> AgentMessage:
        """
        Send a message to another agent through the directory.

        Delivery is fire-and-forget: a missing recipient or a failing receive
        path is logged and discarded, never raised to the sender.

        Args:
            to: Recipient agent id
            type: Message type
            data: Payload
            priority: Message priority

        Returns:
            AgentMessage: The envelope that was sent
        """
        message = self._build_message(to, type, data, priority)
        await self._dispatch(message)
        return message

    async def broadcast(
        self,
        type: Union[MessageType, str],
        data: Any,
        priority: Union[MessagePriority, str] = MessagePriority.MEDIUM
    ) -> List[DeliveryResult]:
        """
        Send the same message independently to every subscriber.

        Returns:
            One delivery result per subscriber; failures are collected, not raised
        """
        recipients = sorted(self._subscribers)
        if not recipients:
            return []

        messages = [self._build_message(recipient, type, data, priority) for recipient in recipients]
        outcomes = await asyncio.gather(
            *(self._dispatch(message) for message in messages),
            return_exceptions=True
        )

        results = []
        for message, outcome in zip(messages, outcomes):
            if isinstance(outcome, BaseException):
                self.logger.error(f"Failed to send message to {message.recipient}: {outcome}")
                outcome = DeliveryResult(
                    message_id=message.id,
                    recipient=message.recipient,
                    delivered=False,
                    error=str(outcome)
                )
            results.append(outcome)
        return results

    async def _dispatch(self, message: AgentMessage) -> DeliveryResult:
        result = await self._deliver_message(message)
        self.last_delivery = result
        if not result.delivered:
            self.logger.warning(
                "Message delivery failed",
                message_id=message.id,
                recipient=message.recipient,
                error=result.error
            )
        return result

    async def _deliver_message(self, message: AgentMessage) -> DeliveryResult:
        if self.directory is None:
            return DeliveryResult(
                message_id=message.id, recipient=message.recipient, delivered=False,
                error="No agent directory attached"
            )
        return await deliver_message(self.directory, message)

    async def receive_message(self, message: AgentMessage) -> None:
        """Enqueue a delivered message and let the agent react to it."""
        self._inbox.append(message)
        try:
            await self.handle_message(message)
        except Exception as e:
            self.logger.error(f"Error handling message {message.id} from {message.sender}: {e}")
