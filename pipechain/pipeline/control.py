"""Per-invocation state and the control surface handed to every step."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from .base import Pipe

TForward = TypeVar("TForward")
TReply = TypeVar("TReply")


@dataclass
class ExecutionContext:
    """
    State owned by a single send/blocking_send call.

    Created fresh for every invocation and never stored on the Pipe, so
    overlapping invocations of the same pipe cannot see each other's reply.
    """

    blocking: bool = False
    replied: bool = False
    reply_value: Any = None


class PipeControl(Generic[TForward, TReply]):
    """Lets a step either forward a value to the next step or reply."""

    def __init__(self, pipe: "Pipe", next_index: int, execution: ExecutionContext):
        self._pipe = pipe
        self._next_index = next_index
        self._execution = execution

    async def forward(self, value: TForward) -> None:
        """
        Run the rest of the chain with ``value``.

        A no-op once any step of this invocation has replied. Failures raised
        further down the chain surface here, so a step can catch them.
        """
        if self._execution.replied:
            return

        await self._pipe._run_from(self._next_index, value, self._execution)

    def reply(self, value: TReply) -> None:
        """Record ``value`` as the final result; later forwards are ignored."""
        self._execution.reply_value = value
        self._execution.replied = True

    @property
    def replied(self) -> bool:
        return self._execution.replied
