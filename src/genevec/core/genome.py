"""
Genome Representation for Real-Valued Vector Species.

This module defines the genome container used by float vector species, the
storage precision a species chooses for its genomes, and the gene accessors
that read and write single genes at that precision.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterable, List

import math
import numpy as np


class Precision(Enum):
    """Storage precision of every genome in a species."""
    SINGLE = "single"
    DOUBLE = "double"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(np.float32) if self is Precision.SINGLE else np.dtype(np.float64)


class GeneAccessor(ABC):
    """
    Reads and writes one gene of a genome.

    Mutation algorithms compute in double precision; the accessor is the only
    place where a value is narrowed to the genome's storage precision.
    """

    precision: Precision

    @abstractmethod
    def get(self, genome: "FloatVectorGenome", index: int) -> float:
        """Return the gene at ``index`` as a Python float."""
        pass

    @abstractmethod
    def set(self, genome: "FloatVectorGenome", index: int, value: float) -> None:
        """Store ``value`` at ``index``, narrowing to the storage precision."""
        pass


class SinglePrecisionAccessor(GeneAccessor):
    """Accessor for genomes stored as 32-bit floats."""

    precision = Precision.SINGLE

    def get(self, genome: "FloatVectorGenome", index: int) -> float:
        return float(genome.values[index])

    def set(self, genome: "FloatVectorGenome", index: int, value: float) -> None:
        if math.isnan(value):
            raise ValueError(f"Refusing to store NaN at gene {index}")
        genome.values[index] = np.float32(value)


class DoublePrecisionAccessor(GeneAccessor):
    """Accessor for genomes stored as 64-bit floats."""

    precision = Precision.DOUBLE

    def get(self, genome: "FloatVectorGenome", index: int) -> float:
        return float(genome.values[index])

    def set(self, genome: "FloatVectorGenome", index: int, value: float) -> None:
        if math.isnan(value):
            raise ValueError(f"Refusing to store NaN at gene {index}")
        genome.values[index] = np.float64(value)


_ACCESSORS: Dict[Precision, GeneAccessor] = {
    Precision.SINGLE: SinglePrecisionAccessor(),
    Precision.DOUBLE: DoublePrecisionAccessor(),
}


def accessor_for(precision: Precision) -> GeneAccessor:
    """Return the shared accessor for a storage precision."""
    return _ACCESSORS[Precision(precision)]


class FloatVectorGenome:
    """
    Fixed-length vector of real-valued genes.

    The values live in a one-dimensional numpy array whose dtype matches the
    genome's precision. Indexing goes through the precision's accessor, so
    ``genome[i] = x`` stores exactly what a mutation operator would store.
    """

    def __init__(self, values: Iterable[float], precision: Precision = Precision.DOUBLE):
        self.precision = Precision(precision)
        self.values: np.ndarray = np.array(list(values), dtype=self.precision.dtype)
        if self.values.ndim != 1:
            raise ValueError("Genome values must be one-dimensional")

    @classmethod
    def zeros(cls, size: int, precision: Precision = Precision.DOUBLE) -> "FloatVectorGenome":
        if size < 0:
            raise ValueError(f"Genome size must be >= 0, got {size}")
        return cls([0.0] * size, precision)

    @property
    def accessor(self) -> GeneAccessor:
        return accessor_for(self.precision)

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def __getitem__(self, index: int) -> float:
        return self.accessor.get(self, index)

    def __setitem__(self, index: int, value: float) -> None:
        self.accessor.set(self, index, value)

    def tolist(self) -> List[float]:
        return [float(v) for v in self.values]

    def clone(self) -> "FloatVectorGenome":
        """Create a deep copy of this genome."""
        return FloatVectorGenome(self.values.copy(), self.precision)

    def to_dict(self) -> Dict[str, Any]:
        """Convert genome to dictionary representation."""
        return {
            "precision": self.precision.value,
            "values": self.tolist()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FloatVectorGenome":
        """Create genome from dictionary representation."""
        return cls(
            values=data["values"],
            precision=Precision(data.get("precision", Precision.DOUBLE.value))
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FloatVectorGenome):
            return NotImplemented
        return self.precision is other.precision and np.array_equal(self.values, other.values)

    def __repr__(self) -> str:
        return f"FloatVectorGenome(size={len(self)}, precision={self.precision.value})"
