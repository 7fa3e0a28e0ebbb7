"""Injectable random source and sampling helpers.

Every stochastic step in the engine draws from a ``RandomSource`` passed in
by the caller. ``random.Random(seed)`` satisfies the protocol, so seeded
runs are reproducible and each worker in a parallel season can own its
own generator.
"""

import math
import random
from typing import Protocol, Sequence, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Minimal random interface consumed by the simulation."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def gauss(self, mu: float, sigma: float) -> float: ...


class SequenceRandom:
    """Replays a fixed sequence of floats in [0, 1).

    Useful for scripting exact outcomes. The sequence wraps around when
    exhausted. ``uniform``, ``randint`` and ``gauss`` are derived from the
    same stream so a single list drives every call.
    """

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandom needs at least one value")
        self.values = [min(max(float(v), 0.0), 0.999999) for v in values]
        self.index = 0

    def random(self) -> float:
        value = self.values[self.index % len(self.values)]
        self.index += 1
        return value

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def randint(self, a: int, b: int) -> int:
        return a + int(self.random() * (b - a + 1))

    def gauss(self, mu: float, sigma: float) -> float:
        # Map the uniform draw through an approximate inverse normal CDF
        u = min(max(self.random(), 1e-6), 1 - 1e-6)
        z = math.sqrt(2) * _erfinv(2 * u - 1)
        return mu + sigma * z


def _erfinv(y: float) -> float:
    a = 0.147
    ln = math.log(1 - y * y)
    first = 2 / (math.pi * a) + ln / 2
    return math.copysign(math.sqrt(math.sqrt(first * first - ln / a) - first), y)


def create_random(seed: int | None = None) -> random.Random:
    """Create a standard generator, seeded when a seed is given."""
    return random.Random(seed)


def derive_seed(seed: int, index: int) -> int:
    """Derive an independent per-task seed from a season seed."""
    return (seed * 1_000_003 + index * 7_919) & 0xFFFFFFFF


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamped_gauss(rng: RandomSource, mu: float, sigma: float, low: float, high: float) -> float:
    return clamp(rng.gauss(mu, sigma), low, high)


def chance(rng: RandomSource, probability: float) -> bool:
    """Bernoulli trial."""
    return rng.random() < probability


def binomial(rng: RandomSource, trials: int, probability: float) -> int:
    """Count successes over ``trials`` independent trials."""
    return sum(1 for _ in range(max(0, trials)) if rng.random() < probability)


def poisson_sample(rng: RandomSource, lam: float, max_count: int) -> int:
    """Sample a Poisson count with a cumulative-probability walk.

    The walk stops at ``max_count`` so a runaway rate can never produce an
    unbounded count.
    """
    if lam <= 0:
        return 0
    count = 0
    p = math.exp(-lam)
    cumulative = p
    roll = rng.random()
    while roll > cumulative and count < max_count:
        count += 1
        p *= lam / count
        cumulative += p
    return count


def sample_count(
    rng: RandomSource,
    expected: float,
    max_count: int,
    bernoulli_threshold: float = 0.05,
) -> int:
    """Sample a discrete event count around ``expected``.

    Very small rates use a single Bernoulli trial instead of the Poisson
    walk.
    """
    if expected <= 0:
        return 0
    if expected <= bernoulli_threshold:
        return 1 if rng.random() < expected else 0
    return poisson_sample(rng, expected, max_count)


def weighted_choice(rng: RandomSource, options: Sequence[tuple[T, float]]) -> T:
    """Pick one option with probability proportional to its weight."""
    total = sum(max(0.0, weight) for _, weight in options)
    if total <= 0:
        return options[0][0]
    roll = rng.random() * total
    running = 0.0
    for value, weight in options:
        running += max(0.0, weight)
        if roll < running:
            return value
    return options[-1][0]
