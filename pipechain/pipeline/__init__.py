"""Composable async pipes.

This module provides a pipeline abstraction where:
- Each step receives a payload and a control to forward or reply
- Pipes are extended and cloned without mutating the originals
- Listeners observe the last forwarded value without affecting the reply
- Pipes can be routed into other pipes to build fan-out graphs
"""

from .base import Listener, Pipe, Step, is_pipe_like
from .control import ExecutionContext, PipeControl
from .errors import HasListenersError, InvalidStepError, PipeError
from .steps import forwarding_step, replying_step

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
