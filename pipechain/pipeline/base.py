import asyncio
import inspect
import logging
from typing import Any, Callable, Generic, List, Set, Tuple, TypeVar

from .control import ExecutionContext, PipeControl
from .errors import HasListenersError, InvalidStepError
from .steps import forwarding_step, replying_step, step_name

logger = logging.getLogger(__name__)

TPayload = TypeVar("TPayload")
TForward = TypeVar("TForward")
TReply = TypeVar("TReply")

Step = Callable[[Any, PipeControl], Any]
Listener = Callable[[Any], Any]


def is_pipe_like(value: Any) -> bool:
    """True if ``value`` can be used as a step: a Pipe or any callable."""
    return isinstance(value, Pipe) or callable(value)


class Pipe(Generic[TPayload, TForward, TReply]):
    """
    Ordered chain of async steps with listener fan-out.

    Each step is called as ``step(payload, control)`` and either forwards a
    value to the next step with ``await control.forward(value)`` or ends the
    chain with ``control.reply(value)``. When the last step forwards, every
    listener is notified with that value. Listeners never affect the reply.

    Composition never mutates: extend() and clone() return new pipes that
    share the immutable step tuple, and start with no listeners.
    """

    # Keeps non-blocking notifications alive until all their listeners settle
    _background: Set[asyncio.Future] = set()

    def __init__(self, steps: Tuple[Step, ...] = ()):
        self._steps: Tuple[Step, ...] = tuple(steps)
        self._listeners: List[Listener] = []

    @classmethod
    def of(cls, pipe_like: Any) -> "Pipe":
        """Create a pipe from a bare step or from another pipe's steps."""
        return cls().extend(pipe_like)

    @classmethod
    def forwarding_pipe(cls, fn: Callable[[Any], Any]) -> "Pipe":
        """Pipe whose single step forwards the (awaited) return value of ``fn``."""
        return cls.of(forwarding_step(fn))

    @classmethod
    def replying_pipe(cls, fn: Callable[[Any], Any]) -> "Pipe":
        """Pipe whose single step replies with the (awaited) return value of ``fn``."""
        return cls.of(replying_step(fn))

    @staticmethod
    def _assert_is_pipe_like(value: Any) -> None:
        if not is_pipe_like(value):
            raise InvalidStepError(value)

    @property
    def has_listeners(self) -> bool:
        return len(self._listeners) > 0

    def extend(self, pipe_like: Any) -> "Pipe":
        """
        Return a new pipe running this pipe's steps followed by ``pipe_like``.

        A Pipe argument is flattened into its steps rather than nested.

        Raises:
            InvalidStepError: If ``pipe_like`` is neither a Pipe nor callable
            HasListenersError: If this pipe already has listeners
        """
        Pipe._assert_is_pipe_like(pipe_like)

        if self.has_listeners:
            raise HasListenersError()

        if isinstance(pipe_like, Pipe):
            added = pipe_like._steps
        else:
            added = (pipe_like,)

        logger.debug(f"Extending {self!r} with {len(added)} step(s)")
        return type(self)(self._steps + added)

    def clone(self) -> "Pipe":
        """Return a pipe with the same steps and no listeners."""
        logger.debug(f"Cloning {self!r}")
        return type(self)(self._steps)

    def subscribe(self, listener: Listener) -> None:
        """Register a listener for values forwarded by the last step."""
        if not callable(listener):
            raise TypeError(f"'{listener!r}' is not callable")
        self._listeners.append(listener)

    def route_to(self, pipe: "Pipe") -> "Pipe":
        """
        Send every value this pipe forwards into ``pipe``.

        Registers a listener; no steps are copied. Returns self so several
        targets can be chained.
        """
        if not isinstance(pipe, Pipe):
            raise InvalidStepError(pipe)

        def route(value: Any):
            return pipe.send(value)

        route.__name__ = f"route_to({pipe!r})"
        logger.debug(f"Routing {self!r} to {pipe!r}")
        self.subscribe(route)
        return self

    async def send(self, payload: TPayload) -> TReply:
        """Run the chain; does not wait for listeners to finish."""
        return await self._process_payload(payload, blocking=False)

    async def blocking_send(self, payload: TPayload) -> TReply:
        """Run the chain and wait until every listener has settled."""
        return await self._process_payload(payload, blocking=True)

    async def _process_payload(self, payload: TPayload, blocking: bool) -> TReply:
        execution = ExecutionContext(blocking=blocking)
        mode = "blocking send" if blocking else "send"
        logger.debug(f"Starting {mode} through {self!r}")
        await self._run_from(0, payload, execution)
        logger.debug(f"Finished {mode} through {self!r} (replied={execution.replied})")
        return execution.reply_value

    async def _run_from(self, index: int, payload: Any, execution: ExecutionContext) -> None:
        if index >= len(self._steps):
            await self._finish(payload, execution)
            return

        step = self._steps[index]
        result = step(payload, PipeControl(self, index + 1, execution))
        if inspect.isawaitable(result):
            await result

    async def _finish(self, value: Any, execution: ExecutionContext) -> None:
        if not self._listeners:
            return

        settled = self._notify_listeners(value)
        if execution.blocking:
            await settled
        else:
            Pipe._background.add(settled)
            settled.add_done_callback(Pipe._background.discard)

    def _notify_listeners(self, value: Any) -> asyncio.Future:
        """
        Start every listener now and return a future that settles when all do.

        Failures are logged and dropped; they never reach the caller or stop
        sibling listeners.
        """
        listeners = tuple(self._listeners)
        pending = []
        names = []
        for listener in listeners:
            try:
                result = listener(value)
            except Exception:
                logger.warning(
                    f"Listener {step_name(listener)} of {self!r} failed", exc_info=True
                )
                continue
            if inspect.isawaitable(result):
                pending.append(asyncio.ensure_future(result))
                names.append(step_name(listener))

        settled = asyncio.gather(*pending, return_exceptions=True)

        def log_failures(future: asyncio.Future) -> None:
            if future.cancelled():
                return
            for name, outcome in zip(names, future.result()):
                if isinstance(outcome, Exception):
                    logger.warning(
                        f"Listener {name} of {self!r} failed: {outcome!r}",
                        exc_info=outcome,
                    )

        settled.add_done_callback(log_failures)
        return settled

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        step_names = [step_name(s) for s in self._steps]
        return f"Pipe(steps={step_names})"
