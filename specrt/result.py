"""
specrt Choice and Result Values

Three shapes of value travel through semantics code:

- ``Ok(x)`` / ``Err(e)``: a plain fallible result.
- ``ChoiceValue(x)``: x was chosen by the non-determinism oracle. It can
  never carry an error.
- ``ChoiceOk(x)`` / ``ChoiceErr(e)``: a choice that may also have failed.
  This is the return type of semantics functions.

Short-circuiting works the same way for all three. Inside a function
decorated with ``@choice_fn``, ``propagate(v)`` yields the success payload
of ``v`` or leaves the function early with ``ChoiceErr(e)``; ``fail(e)``
leaves early unconditionally:

    @choice_fn
    def load(mem, ptr):
        offset = propagate(check_ptr(mem, ptr))     # Err -> ChoiceErr
        byte = propagate(pick(UniformInt(0, 255), lambda b: True))
        if byte == 0:
            fail("uninit")
        return byte                                 # -> ChoiceOk(byte)

The early exit is an internal ``BaseException`` so that ``except Exception``
blocks between ``propagate`` and the decorated boundary do not catch it.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, NoReturn, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


# ============================================================================
# Plain results
# ============================================================================

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


# ============================================================================
# Choices
# ============================================================================

@dataclass(frozen=True)
class ChoiceValue(Generic[T]):
    """A value produced by a non-deterministic choice."""
    value: T

    def map(self, f: Callable[[T], U]) -> ChoiceValue[U]:
        return ChoiceValue(f(self.value))

    def __repr__(self) -> str:
        return f"ChoiceValue({self.value!r})"


class ChoiceResult(Generic[T, E]):
    """Either ``ChoiceOk(value)`` or ``ChoiceErr(error)``."""

    __slots__ = ()

    @property
    def is_ok(self) -> bool:
        return isinstance(self, ChoiceOk)

    def and_then(self, f: Callable[[T], ChoiceResult[U, E]]) -> ChoiceResult[U, E]:
        """Monadic bind: an error is returned unchanged, a success feeds `f`."""
        if isinstance(self, ChoiceErr):
            return self
        return f(self.value)

    def map(self, f: Callable[[T], U]) -> ChoiceResult[U, E]:
        if isinstance(self, ChoiceErr):
            return self
        return ChoiceOk(f(self.value))

    def into_result(self) -> Result:
        """The plain result underneath the choice."""
        if isinstance(self, ChoiceErr):
            return Err(self.error)
        return Ok(self.value)

    @staticmethod
    def from_result(result: Result) -> ChoiceResult:
        if isinstance(result, Err):
            return ChoiceErr(result.error)
        return ChoiceOk(result.value)


@dataclass(frozen=True)
class ChoiceOk(ChoiceResult[T, E]):
    value: T


@dataclass(frozen=True)
class ChoiceErr(ChoiceResult[T, E]):
    error: E


# ============================================================================
# Short-circuit propagation
# ============================================================================

class _Residual(BaseException):
    """Carries an error payload from ``propagate``/``fail`` to ``choice_fn``."""

    def __init__(self, error: Any):
        super().__init__(error)
        self.error = error


def propagate(value: Any) -> Any:
    """Unwrap a success payload or short-circuit with the error.

    Accepts ``ChoiceOk``/``ChoiceErr``, ``Ok``/``Err`` and ``ChoiceValue``.
    Must be called (directly or transitively) from a ``@choice_fn`` function.
    """
    if isinstance(value, (ChoiceErr, Err)):
        raise _Residual(value.error)
    if isinstance(value, (ChoiceOk, Ok, ChoiceValue)):
        return value.value
    raise TypeError(f"cannot propagate a {type(value).__name__}")


def fail(error: Any) -> NoReturn:
    """Leave the enclosing ``@choice_fn`` function with ``ChoiceErr(error)``."""
    raise _Residual(error)


def choice_fn(fn: Callable[..., Any]) -> Callable[..., ChoiceResult]:
    """Make `fn` a ChoiceResult-returning function.

    Short-circuits raised by ``propagate``/``fail`` become ``ChoiceErr``.
    A returned ChoiceResult passes through. A returned ChoiceValue has its
    payload wrapped in ``ChoiceOk``, and a returned ``Ok``/``Err`` is
    converted with ``ChoiceResult.from_result``. Any other value is wrapped
    as is.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> ChoiceResult:
        try:
            out = fn(*args, **kwargs)
        except _Residual as residual:
            return ChoiceErr(residual.error)
        if isinstance(out, ChoiceResult):
            return out
        if isinstance(out, ChoiceValue):
            return ChoiceOk(out.value)
        if isinstance(out, (Ok, Err)):
            return ChoiceResult.from_result(out)
        return ChoiceOk(out)

    return wrapper


def collect_choice(results: Iterable[ChoiceResult[T, E]]) -> ChoiceResult[list, E]:
    """Gather successes into a list, stopping at the first error."""
    values = []
    for r in results:
        if isinstance(r, ChoiceErr):
            return r
        values.append(r.value)
    return ChoiceOk(values)
