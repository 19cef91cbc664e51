"""Fixed-budget retry loop for directory lookups."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from bulkadd.domain.errors import LookupFailedError, RetryExhaustedError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from bulkadd.config import RetryBudget

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]
type Accept[T] = Callable[[T], bool]


def _accept_any(_: object) -> bool:
    return True


async def retry_lookup[T](
    operation: Callable[[], Awaitable[T]],
    *,
    budget: RetryBudget,
    label: str,
    accept: Accept[T] = _accept_any,
    empty_reason: str = "no results",
    give_up_on: tuple[type[LookupFailedError], ...] = (),
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Call ``operation`` until it succeeds with an accepted value.

    At most ``budget.attempts`` calls are made, with ``budget.delay_seconds``
    between consecutive attempts (never after the last one). A value rejected
    by ``accept`` counts as a failed attempt with ``empty_reason``. Errors listed
    in ``give_up_on`` are definitive answers and are re-raised at once. Only
    ``LookupFailedError`` is retried; adapters translate transport failures into it.

    Raises:
        RetryExhaustedError: every attempt failed; carries the last reason.
    """

    last_error = "no attempts made"
    for attempt in range(1, budget.attempts + 1):
        if attempt > 1 and budget.delay_seconds > 0:
            await sleep(budget.delay_seconds)
        try:
            value = await operation()
        except give_up_on:
            raise
        except LookupFailedError as exc:
            last_error = str(exc) or type(exc).__name__
        else:
            if accept(value):
                return value
            last_error = empty_reason
        log.warning("%s failed (attempt %d/%d): %s", label, attempt, budget.attempts, last_error)

    log.error("%s gave up after %d attempts: %s", label, budget.attempts, last_error)
    raise RetryExhaustedError(
        f"{label} failed after {budget.attempts} attempts: {last_error}",
        attempts=budget.attempts,
        last_error=last_error,
    )
