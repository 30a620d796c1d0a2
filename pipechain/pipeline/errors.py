"""Composition errors raised eagerly by Pipe."""


class PipeError(Exception):
    """Base class for pipe composition and usage errors."""


class InvalidStepError(PipeError, TypeError):
    """Raised when a value that is neither a callable nor a Pipe is composed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"'{value!r}' is not a 'PipeLike'")


class HasListenersError(PipeError):
    """Raised when extending a pipe whose output is already being observed."""

    def __init__(self) -> None:
        super().__init__(
            "Cannot extend a pipe that has listeners. You should clone it first."
        )
