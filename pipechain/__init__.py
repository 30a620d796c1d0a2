"""pipechain - chain async steps that forward, reply or fan out to listeners."""

from .pipeline import (
    ExecutionContext,
    HasListenersError,
    InvalidStepError,
    Listener,
    Pipe,
    PipeControl,
    PipeError,
    Step,
    forwarding_step,
    is_pipe_like,
    replying_step,
)

__version__ = "0.1.0"

__all__ = [
    "Pipe",
    "PipeControl",
    "ExecutionContext",
    "Step",
    "Listener",
    "is_pipe_like",
    "forwarding_step",
    "replying_step",
    "PipeError",
    "InvalidStepError",
    "HasListenersError",
]
