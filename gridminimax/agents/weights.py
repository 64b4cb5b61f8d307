"""
Weight vectors for the weighted scorer and the ranges a calibration sweep
draws them from.
"""

import itertools
import math
from dataclasses import dataclass
from typing import Iterator

from gridminimax.errors import ConfigurationError

QUANTIZATION_FACTOR = 10
# absorbs accumulated float drift such as 0.1 * 8 == 0.7999999999999999
QUANTIZATION_TOLERANCE = 1e-9


@dataclass(frozen=True)
class WeightVector:
    """Ordered, named feature coefficients."""

    names: tuple[str, ...]
    values: tuple[float, ...]

    def __post_init__(self):
        if len(self.names) != len(self.values):
            raise ConfigurationError(
                f"Got {len(self.values)} weights for {len(self.names)} feature names"
            )
        if len(set(self.names)) != len(self.names):
            raise ConfigurationError(f"Duplicate feature names in {self.names}")

    @classmethod
    def from_dict(cls, weights: dict[str, float]) -> "WeightVector":
        return cls(names=tuple(weights), values=tuple(float(v) for v in weights.values()))

    @classmethod
    def from_key(
        cls, names: tuple[str, ...], key: tuple[int, ...], factor: int = QUANTIZATION_FACTOR
    ) -> "WeightVector":
        """Rebuild a representative vector from its quantized key."""
        return cls(names=tuple(names), values=tuple(k / factor for k in key))

    def as_dict(self) -> dict[str, float]:
        return dict(zip(self.names, self.values))

    def __getitem__(self, name: str) -> float:
        try:
            return self.values[self.names.index(name)]
        except ValueError:
            raise KeyError(name) from None

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def with_value(self, name: str, value: float) -> "WeightVector":
        index = self.names.index(name)
        values = self.values[:index] + (float(value),) + self.values[index + 1:]
        return WeightVector(names=self.names, values=values)

    def quantized_key(self, factor: int = QUANTIZATION_FACTOR) -> tuple[int, ...]:
        """
        Lossy integer projection used for deduplication and result storage.

        Each coefficient is scaled by factor and floored, so vectors that agree at
        a resolution of 1/factor share a key.
        """
        return tuple(math.floor(v * factor + QUANTIZATION_TOLERANCE) for v in self.values)

    def __str__(self) -> str:
        return ", ".join(f"{name}={value:g}" for name, value in zip(self.names, self.values))


@dataclass(frozen=True)
class WeightRange:
    """Closed range materialised by repeatedly adding step to start while the value stays <= stop."""

    start: float
    stop: float
    step: float

    def __post_init__(self):
        if self.step <= 0:
            raise ConfigurationError(f"Range step must be positive, got {self.step}")
        if self.start > self.stop:
            raise ConfigurationError(f"Empty range: start {self.start} > stop {self.stop}")

    def __iter__(self) -> Iterator[float]:
        value = self.start
        while value <= self.stop:
            yield value
            value += self.step

    def values(self) -> list[float]:
        return list(self)

    def __len__(self) -> int:
        # counted with the same accumulation as __iter__ so both always agree
        return sum(1 for _ in self)


def _validate_ranges(ranges: dict[str, WeightRange]) -> None:
    if not ranges:
        raise ConfigurationError("At least one weight range is required")
    for name, weight_range in ranges.items():
        if not isinstance(weight_range, WeightRange):
            raise ConfigurationError(f"Range for '{name}' must be a WeightRange")


def count_candidates(ranges: dict[str, WeightRange]) -> int:
    _validate_ranges(ranges)
    return math.prod(len(r) for r in ranges.values())


def candidate_vectors(ranges: dict[str, WeightRange]) -> Iterator[WeightVector]:
    """Cartesian product of the ranges, first range varying slowest."""
    _validate_ranges(ranges)
    names = tuple(ranges)
    for values in itertools.product(*(r.values() for r in ranges.values())):
        yield WeightVector(names=names, values=tuple(values))
