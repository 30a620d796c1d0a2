"""Adapters that turn plain functions into steps."""

import inspect
from typing import Any, Awaitable, Callable, TypeVar, Union

from .control import PipeControl

T = TypeVar("T")
U = TypeVar("U")

MaybeAwaitable = Union[U, Awaitable[U]]


async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


def forwarding_step(fn: Callable[[T], MaybeAwaitable[U]]):
    """Build a step that always forwards ``fn(payload)``."""

    async def step(payload: T, control: PipeControl) -> None:
        await control.forward(await resolve(fn(payload)))

    step.__name__ = f"forward({step_name(fn)})"
    return step


def replying_step(fn: Callable[[T], MaybeAwaitable[U]]):
    """Build a step that always replies with ``fn(payload)``."""

    async def step(payload: T, control: PipeControl) -> None:
        control.reply(await resolve(fn(payload)))

    step.__name__ = f"reply({step_name(fn)})"
    return step


def step_name(step: Callable) -> str:
    return getattr(step, "__name__", None) or type(step).__name__
