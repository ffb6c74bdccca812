"""
Exponential backoff for calls against the remote management API.

Any coroutine function can be wrapped. When the call raises an error whose
first structured sub-error carries one of the configured transient reasons
(rate limit, quota, user rate limit, backend error), the call is retried with
the same arguments after a delay that starts at backoff.start_delay_ms and
doubles on every retry. Once backoff.max_attempts attempts have failed, or for
any other error, the error of the last attempt is raised unchanged.
"""

# Standard
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Iterable, Optional
import asyncio
import functools

# First Party
import alog

# Local
from . import config

log = alog.use_channel("BKOFF")

SLEEP_FUNCTION = Callable[[float], Awaitable[Any]]


def get_error_reason(error: BaseException) -> Optional[str]:
    """Get the reason of the first structured sub-error of the given error

    Args:
        error:  BaseException
            The error raised by a remote call

    Returns:
        reason:  Optional[str]
            The reason string if the error exposes a non-empty errors list whose
            first entry has one, None otherwise
    """
    errors = getattr(error, "errors", None)
    if not isinstance(errors, (list, tuple)) or not errors:
        return None
    first = errors[0]
    if isinstance(first, Mapping):
        return first.get("reason")
    return getattr(first, "reason", None)


def is_transient(error: BaseException, reasons: Optional[Iterable[str]] = None) -> bool:
    """Whether the given error should be retried"""
    reasons = config.backoff.retry_reasons if reasons is None else reasons
    reason = get_error_reason(error)
    return reason is not None and reason in reasons


def backoff(
    func: Optional[Callable[..., Awaitable[Any]]] = None,
    *,
    max_attempts: Optional[int] = None,
    start_delay_ms: Optional[float] = None,
    reasons: Optional[Iterable[str]] = None,
    sleep: Optional[SLEEP_FUNCTION] = None,
):
    """Wrap a coroutine function with exponential backoff for transient
    remote errors. Can be used bare (@backoff) or with arguments
    (@backoff(max_attempts=3)).

    Args:
        func:  Optional[Callable[..., Awaitable[Any]]]
            The coroutine function to wrap
        max_attempts:  Optional[int]
            Total number of attempts before giving up. Defaults to
            config.backoff.max_attempts
        start_delay_ms:  Optional[float]
            Delay in milliseconds before the first retry. Defaults to
            config.backoff.start_delay_ms
        reasons:  Optional[Iterable[str]]
            Transient error reasons. Defaults to config.backoff.retry_reasons
        sleep:  Optional[SLEEP_FUNCTION]
            Awaitable sleep taking seconds. Defaults to asyncio.sleep

    Returns:
        wrapped:  Callable[..., Awaitable[Any]]
            A coroutine function with the same success contract as func
    """
    if func is None:
        return functools.partial(
            backoff,
            max_attempts=max_attempts,
            start_delay_ms=start_delay_ms,
            reasons=reasons,
            sleep=sleep,
        )

    @functools.wraps(func)
    async def wrapped(*args, **kwargs):
        attempts = (
            config.backoff.max_attempts if max_attempts is None else max_attempts
        )
        delay_ms = (
            config.backoff.start_delay_ms if start_delay_ms is None else start_delay_ms
        )
        sleeper = sleep or asyncio.sleep
        name = getattr(func, "__name__", repr(func))
        count = 0
        while True:
            try:
                return await func(*args, **kwargs)
            except Exception as err:
                if count + 1 >= attempts or not is_transient(err, reasons):
                    if count:
                        log.debug(
                            "Giving up on %s after %d retries: %s",
                            name,
                            count,
                            err,
                        )
                    raise
                log.debug2(
                    "Transient error [%s] from %s. Retrying in %sms (%d/%d)",
                    get_error_reason(err),
                    name,
                    delay_ms,
                    count + 1,
                    attempts - 1,
                )
                await sleeper(delay_ms / 1000.0)
                delay_ms *= 2
                count += 1

    return wrapped
