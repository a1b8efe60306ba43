"""
The given / when / then / extract chain.

These four stages are shared by every backend. Each one hands the caller's
block the object of its stage and returns what the next stage needs:

    given(block)    -> RequestSpecification
    when(block)     -> Response
    then(block)     -> ValidatableResponse
    extract(block)  -> whatever the block returns

Only ``then`` does anything beyond calling the block: when the validatable
response supports deferred assertion, it collects every expectation the block
registers and evaluates them together once the block is done.
"""

import logging
from typing import Any, Callable, Optional, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class SupportsDeferredAssertion(Protocol):
    """A validatable response whose expectations can be collected and evaluated later."""

    def force_disable_eager_assert(self) -> None:
        ...

    def force_validate_response(self) -> None:
        ...


def given(factory: Callable[[], Any], block: Optional[Callable[[Any], Any]] = None):
    """
    Create a request specification and let the block configure it.

    A block may return the specification (as chained setters do) or mutate it
    and return None; either way the configured specification is returned.
    """
    specification = factory()
    if block is None:
        return specification
    configured = block(specification)
    logger.debug(f"Configured request specification {specification!r}")
    return specification if configured is None else configured


def when(sender: Any, block: Callable[[Any], T]) -> T:
    """Let the block dispatch one request with the sender and return its response."""
    response = block(sender)
    logger.debug(f"Dispatch block returned {response!r}")
    return response


def then(response: Any, block: Callable[[Any], Any]):
    """
    Validate a response with the expectations the block registers.

    Deferred assertion is switched on before the block runs and the collected
    expectations are evaluated after it, even when the block raises. If the
    block raises, that exception is the one that propagates; expectation
    failures found at that point are only logged. Validatable responses that
    cannot defer assertion are handed to the block as they are.
    """
    validatable = response.then()
    deferred = isinstance(validatable, SupportsDeferredAssertion)
    if deferred:
        validatable.force_disable_eager_assert()
    else:
        logger.debug(f"{type(validatable).__name__} does not support deferred assertion")

    try:
        block(validatable)
    except BaseException:
        if deferred:
            try:
                validatable.force_validate_response()
            except Exception as masked:
                logger.warning(f"Expectation failures hidden by an exception raised in the then block:\n{masked}")
        raise

    if deferred:
        validatable.force_validate_response()
    return validatable


def extract(validatable: Any, block: Callable[[Any], T]) -> T:
    """Hand the block an extractable view of the response and return what it extracts."""
    return block(validatable.extract())
