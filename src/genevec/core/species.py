"""
Float Vector Species.

This module implements the species for real-valued genomes: it reads the
species configuration, builds one mutation operator per gene through the
hierarchical resolver, and exposes per-gene mutation, initialization and
bounds introspection to the surrounding evolutionary engine.
"""

from typing import Any, Dict, List, Optional

import logging
import math

import logfire
import numpy as np
from pydantic import ValidationError

from src.genevec.core.config import BaseMutation, MutationType, SpeciesConfig
from src.genevec.core.diagnostics import WarningLedger
from src.genevec.core.exceptions import ConfigurationError
from src.genevec.core.genome import FloatVectorGenome, Precision
from src.genevec.core.parameters import ParameterStore, param_key
from src.genevec.core.random_source import RandomSource
from src.genevec.core.segments import SegmentLayout
from src.genevec.mutation.operators import initialize_gene, mutate
from src.genevec.mutation.resolver import MutationResolver


P_GENOME_SIZE = "genome-size"
P_PRECISION = "precision"

FLOAT32_MAX = float(np.finfo(np.float32).max)


class FloatVectorSpecies:
    """
    Species of fixed-length real-valued genomes.

    After ``setup`` every gene index has exactly one immutable mutation
    operator. Operators hold no per-call state, so one species can be shared
    by worker threads as long as each thread mutates its own genomes with its
    own random source.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("genevec.species")
        self.config: Optional[SpeciesConfig] = None
        self.segments: Optional[SegmentLayout] = None
        self.global_mutator: Optional[BaseMutation] = None
        self.mutators: List[BaseMutation] = []
        self.warnings: Optional[WarningLedger] = None
        self._is_setup = False

    def setup(self, store: ParameterStore, base: str, default_base: Optional[str] = None) -> "FloatVectorSpecies":
        """
        Read the species configuration and build the per-gene operators.

        Args:
            store: Parameter store holding the configuration
            base: Parameter base, e.g. ``pop.subpop.0.species``
            default_base: Optional base consulted when a key is missing under ``base``

        Raises:
            ConfigurationError: on any malformed or inconsistent configuration
        """
        with logfire.span("Species setup", base=base):
            genome_size_key = param_key(base, P_GENOME_SIZE)
            default_size_key = param_key(default_base, P_GENOME_SIZE) if default_base else None
            genome_size = store.get_int(genome_size_key, default_size_key)
            if genome_size is None:
                raise ConfigurationError(f"{genome_size_key} must be defined", genome_size_key)

            precision_key = param_key(base, P_PRECISION)
            default_precision_key = param_key(default_base, P_PRECISION) if default_base else None
            precision = store.get_string(precision_key, default_precision_key, Precision.DOUBLE.value)

            try:
                self.config = SpeciesConfig(genome_size=genome_size, precision=precision.lower())
            except ValidationError as e:
                error = e.errors()[0]
                key = precision_key if error["loc"] and error["loc"][0] == "precision" else genome_size_key
                raise ConfigurationError(f"Invalid species configuration at {key}: {error['msg']}", key) from e

            self.segments = SegmentLayout.from_store(store, base, genome_size, default_base)

            self.warnings = WarningLedger()
            resolver = MutationResolver(store, base, default_base, ledger=self.warnings)
            self.global_mutator, self.mutators = resolver.resolve_all(genome_size, self.segments)
            self._is_setup = True

            self.logger.info(
                f"Set up species with {genome_size} {self.config.precision.value}-precision genes "
                f"({len(self.segments) if self.segments else 0} segments, "
                f"global mutation {self.global_mutator.mutation_type})"
            )
            return self

    @property
    def genome_size(self) -> int:
        self._require_setup()
        return self.config.genome_size

    @property
    def precision(self) -> Precision:
        self._require_setup()
        return self.config.precision

    def _require_setup(self) -> None:
        if not self._is_setup:
            raise RuntimeError("FloatVectorSpecies.setup() has not been called")

    def mutator(self, gene: int) -> BaseMutation:
        """Return the operator for a gene; indices past the end map to the last gene."""
        self._require_setup()
        if gene < 0:
            raise IndexError(f"Gene index must be >= 0, got {gene}")
        return self.mutators[min(gene, len(self.mutators) - 1)]

    def mutate(self, genome: FloatVectorGenome, gene: int, rng: RandomSource) -> None:
        """Mutate one gene of ``genome`` in place with that gene's operator."""
        self._check_genome(genome)
        mutate(self.mutators[gene], genome, gene, rng)

    def _check_genome(self, genome: FloatVectorGenome) -> None:
        self._require_setup()
        if len(genome) != self.genome_size:
            raise ValueError(f"Genome has {len(genome)} genes, species expects {self.genome_size}")
        if genome.precision is not self.precision:
            raise ValueError(
                f"Genome precision {genome.precision.value} does not match species precision {self.precision.value}"
            )

    # Per-gene introspection

    def min_gene(self, gene: int) -> float:
        return self.mutator(gene).min_gene

    def max_gene(self, gene: int) -> float:
        return self.mutator(gene).max_gene

    def mutation_is_bounded(self, gene: int) -> bool:
        return self.mutator(gene).mutation_is_bounded

    def mutation_type(self, gene: int) -> MutationType:
        return MutationType(self.mutator(gene).mutation_type)

    def is_integer_type(self, gene: int) -> bool:
        return self.mutator(gene).is_integer_type

    def gauss_mutation_stdev(self, gene: int) -> float:
        """Gaussian standard deviation, or NaN if the gene is not gaussian."""
        return getattr(self.mutator(gene), "stdev", math.nan)

    def random_walk_probability(self, gene: int) -> float:
        """Random-walk continuation probability, or NaN if the gene does not walk."""
        return getattr(self.mutator(gene), "random_walk_probability", math.nan)

    def mutation_distribution_index(self, gene: int) -> Optional[int]:
        return getattr(self.mutator(gene), "distribution_index", None)

    def polynomial_is_alternative(self, gene: int) -> Optional[bool]:
        return getattr(self.mutator(gene), "polynomial_is_alternative", None)

    def out_of_bounds_retries(self, gene: int) -> Optional[int]:
        return getattr(self.mutator(gene), "out_of_bounds_retries", None)

    def in_numerical_type_range(self, value: float) -> bool:
        """Whether ``value`` fits the species' storage precision."""
        if self.precision is Precision.SINGLE:
            return -FLOAT32_MAX <= value <= FLOAT32_MAX
        return True

    # Genome creation

    def new_genome(self, rng: RandomSource) -> FloatVectorGenome:
        """Create a genome and initialize every gene within its bounds."""
        genome = FloatVectorGenome.zeros(self.genome_size, self.precision)
        self.initialize_genome(genome, rng)
        return genome

    def initialize_genome(self, genome: FloatVectorGenome, rng: RandomSource) -> None:
        """Reset every gene: integer genes to integers, the rest to uniform reals."""
        self._check_genome(genome)
        for gene, operator in enumerate(self.mutators):
            initialize_gene(operator, genome, gene, rng)

    # Invariants and reporting

    def rep_ok(self) -> bool:
        """Representation invariant: one ordered, resolved operator per gene."""
        if not self._is_setup:
            return not self.mutators
        return (
            len(self.mutators) == self.config.genome_size
            and all(m is not None for m in self.mutators)
            and all(m.min_gene <= m.max_gene for m in self.mutators)
        )

    def describe(self) -> List[Dict[str, Any]]:
        """One row per gene with its resolved mutation parameters."""
        self._require_setup()
        rows = []
        for gene, operator in enumerate(self.mutators):
            row = {"gene": gene}
            if self.segments is not None:
                row["segment"] = self.segments.segment_for(gene)
            row.update(operator.model_dump())
            rows.append(row)
        return rows

    def to_dict(self) -> Dict[str, Any]:
        """Convert the resolved species to a dictionary."""
        self._require_setup()
        return {
            "genome_size": self.config.genome_size,
            "precision": self.config.precision.value,
            "global": self.global_mutator.model_dump(),
            "genes": self.describe()
        }

    def __repr__(self) -> str:
        if not self._is_setup:
            return "FloatVectorSpecies(not set up)"
        return f"FloatVectorSpecies(genome_size={self.genome_size}, precision={self.precision.value})"
