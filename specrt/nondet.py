"""
specrt Non-determinism

``pick(distribution, predicate)`` realizes "choose any value the predicate
accepts" by rejection sampling: it draws from `distribution` up to a fixed
budget (50 by default) and commits to the first accepted sample. It does not
backtrack or search exhaustively, so predicates whose accepted set is
non-empty but improbable may still time out. A timeout is a fatal
``PickTimeout``.

Randomness comes from an explicit ``random.Random`` owned by a
``ChoiceSampler``. Seeding it (``SamplerConfig.seed``, or ``SPECRT_SEED``
for the process-wide default sampler) makes runs reproducible.

Usage:
    sampler = ChoiceSampler(SamplerConfig(seed=7))
    choice = sampler.pick(UniformInt(0, 255), lambda b: b % 2 == 0)
    choice.value        # an even byte
"""

from __future__ import annotations

import logging
import os
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, TypeVar, Union

from specrt.errors import PickTimeout, Unimplemented
from specrt.result import ChoiceValue

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 50
SEED_ENV_VAR = "SPECRT_SEED"


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class SamplerConfig:
    """Sampler settings.

    Attributes:
        max_attempts: Draws allowed per pick before it times out
        seed: Seed for the sampler's random source; None means OS entropy
        record_history: Whether each pick is appended to ``history``
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    seed: Optional[int] = None
    record_history: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> SamplerConfig:
        """Default config, seeded from ``SPECRT_SEED`` when it is set."""
        environ = os.environ if environ is None else environ
        raw = environ.get(SEED_ENV_VAR, "").strip()
        if not raw:
            return cls()
        try:
            seed = int(raw, 0)
        except ValueError:
            raise ValueError(f"{SEED_ENV_VAR} must be an integer, got {raw!r}") from None
        return cls(seed=seed)


DEFAULT_SAMPLER_CONFIG = SamplerConfig()


# ============================================================================
# Distributions
# ============================================================================

class Distribution(ABC, Generic[T]):
    """Something that can produce a sample from a random source."""

    @abstractmethod
    def sample(self, rng: random.Random) -> T:
        ...


@dataclass(frozen=True)
class Constant(Distribution[T]):
    """Always produces `value`."""
    value: T

    def sample(self, rng: random.Random) -> T:
        return self.value


@dataclass(frozen=True)
class UniformInt(Distribution[int]):
    """Uniform over the inclusive range ``[low, high]``."""
    low: int
    high: int

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ValueError(f"empty range [{self.low}, {self.high}]")

    def sample(self, rng: random.Random) -> int:
        return rng.randint(self.low, self.high)


@dataclass(frozen=True)
class Choose(Distribution[T]):
    """Uniform over a fixed, non-empty sequence of options."""
    options: tuple

    def __init__(self, options: Sequence[T]) -> None:
        object.__setattr__(self, "options", tuple(options))
        if not self.options:
            raise ValueError("Choose needs at least one option")

    def sample(self, rng: random.Random) -> T:
        return rng.choice(self.options)


@dataclass(frozen=True)
class FromFunction(Distribution[T]):
    """Adapts a ``fn(rng) -> sample`` callable."""
    fn: Callable[[random.Random], T]

    def sample(self, rng: random.Random) -> T:
        return self.fn(rng)


DistributionLike = Union[Distribution[T], Callable[[random.Random], T]]


def as_distribution(distribution: DistributionLike) -> Distribution:
    if isinstance(distribution, Distribution):
        return distribution
    if callable(distribution):
        return FromFunction(distribution)
    raise TypeError(f"not a distribution: {distribution!r}")


# ============================================================================
# Sampler
# ============================================================================

class ChoiceSampler:
    """Bounded-retry rejection sampler with its own random source."""

    def __init__(
        self,
        config: SamplerConfig = DEFAULT_SAMPLER_CONFIG,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._config = config
        self._rng = rng if rng is not None else random.Random(config.seed)
        self.history: list[dict[str, Any]] = []

    @property
    def config(self) -> SamplerConfig:
        return self._config

    def reseed(self, seed: Optional[int]) -> None:
        self._rng.seed(seed)

    def pick(self, distribution: DistributionLike, predicate: Callable[[T], bool]) -> ChoiceValue[T]:
        """First sample from `distribution` that `predicate` accepts.

        Raises PickTimeout after ``config.max_attempts`` rejected draws.
        """
        distr = as_distribution(distribution)
        budget = self._config.max_attempts

        for attempt in range(1, budget + 1):
            sample = distr.sample(self._rng)
            if predicate(sample):
                self._log(attempt, accepted=True)
                return ChoiceValue(sample)
            logger.debug("pick: draw %d/%d rejected: %r", attempt, budget, sample)

        self._log(budget, accepted=False)
        logger.error("pick: no accepted sample from %r in %d draws", distr, budget)
        raise PickTimeout(budget)

    def predict(self, predicate: Callable[[T], bool]) -> ChoiceValue[T]:
        """The unique value `predicate` forces. Not implemented."""
        raise Unimplemented("predict")

    def _log(self, draws: int, accepted: bool) -> None:
        if not self._config.record_history:
            return
        self.history.append({
            "step": len(self.history),
            "operation": "pick",
            "draws": draws,
            "accepted": accepted,
        })

    def __repr__(self) -> str:
        return (
            f"<ChoiceSampler budget={self._config.max_attempts} "
            f"seed={self._config.seed} picks={len(self.history)}>"
        )


_default_sampler: Optional[ChoiceSampler] = None


def default_sampler() -> ChoiceSampler:
    """The process-wide sampler used by module-level ``pick``."""
    global _default_sampler
    if _default_sampler is None:
        _default_sampler = ChoiceSampler(SamplerConfig.from_env())
    return _default_sampler


def set_default_sampler(sampler: Optional[ChoiceSampler]) -> None:
    """Replace the process-wide sampler; None re-reads the environment on next use."""
    global _default_sampler
    _default_sampler = sampler


def pick(distribution: DistributionLike, predicate: Callable[[T], bool]) -> ChoiceValue[T]:
    return default_sampler().pick(distribution, predicate)


def predict(predicate: Callable[[T], bool]) -> ChoiceValue[T]:
    return default_sampler().predict(predicate)
