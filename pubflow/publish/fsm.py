from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from pubflow.core.result import Err, Ok, Result
from pubflow.publish.errors import PublishError

S = TypeVar("S")
K = TypeVar("K")


@dataclass(frozen=True, slots=True)
class StepAdvance(Generic[S]):
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish(Generic[S]):
    session: S


StepOutcome = StepAdvance[S] | StepFinish[S]
StepHandler = Callable[[S], Awaitable[Result[StepOutcome[S], PublishError]]]
OnTransition = Callable[[S], None]


def advance(session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


def finish(session: S) -> StepFinish[S]:
    return StepFinish(session=session)


async def run_steps(
    *,
    initial_state: S,
    get_step: Callable[[S], K],
    handlers: Mapping[K, StepHandler[S]],
    on_transition: OnTransition[S],
) -> Result[S, PublishError]:
    """Drive handlers until one finishes or fails.

    Each handler receives the current session and returns the next one;
    every intermediate session is reported through on_transition before the
    next handler runs. Errors are returned as-is, rollback is the caller's job.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return Err(PublishError(kind="internal", message=f"no handler for step: {step}"))

        outcome = await handler(current)
        if isinstance(outcome, Err):
            return outcome

        current = outcome.value.session
        on_transition(current)
        if isinstance(outcome.value, StepFinish):
            return Ok(current)
