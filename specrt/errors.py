"""
specrt Contract Violations

Two failure classes exist in the runtime:

1. Recoverable outcomes are ordinary values: ``None`` for absent lookups,
   ``Err(Conflict)`` from ``try_insert``, ``ChoiceErr`` for semantic errors.
2. Contract violations are programming errors in the semantics being
   executed. They are raised as ``ContractViolation``, which derives from
   ``BaseException`` so that an interpreter's ``except Exception`` recovery
   paths never swallow them.
"""

from __future__ import annotations

from typing import Any, Optional


class ContractViolation(BaseException):
    """Fatal runtime contract violation."""

    def __init__(self, message: str, operation: Optional[str] = None):
        op_str = f" in {operation}" if operation else ""
        super().__init__(f"Contract violation{op_str}: {message}")
        self.operation = operation


class MissingEntry(ContractViolation):
    """A map entry that must exist by construction is absent."""

    def __init__(self, key: Any):
        super().__init__(f"no entry for key {key!r}", "PersistentMap.index_at")
        self.key = key


class IndexOutOfBounds(ContractViolation):
    """A list was indexed outside ``[0, len)``."""

    def __init__(self, index: int, length: int, operation: str = "PersistentList.index_at"):
        super().__init__(f"index {index} out of bounds for length {length}", operation)
        self.index = index
        self.length = length


class PickTimeout(ContractViolation):
    """The sampler's retry budget ran out without an accepted sample."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Timeout! `pick` could not find a valid value in {attempts} attempts",
            "ChoiceSampler.pick",
        )
        self.attempts = attempts


class Unimplemented(ContractViolation):
    """An operation exists in the vocabulary but has no implementation."""

    def __init__(self, operation: str):
        super().__init__("not implemented", operation)
