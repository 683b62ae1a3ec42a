"""
Mutation algorithms for real-valued genes.

Every resolved operator is an immutable value object (see
``src.genevec.core.config``); ``mutate`` dispatches on its ``mutation_type``
and rewrites one gene of a genome in place.

Mutation Types:
- reset: uniform draw from [min_gene, max_gene]
- gauss: gaussian perturbation of the current value, retried while out of bounds
- polynomial: Deb's polynomial perturbation, retried while out of bounds
- integer-reset: uniform integer draw from the gene's range
- integer-random-walk: +/-1 steps while a weighted coin keeps coming up true
"""

import math

import numpy as np

from src.genevec.core import diagnostics
from src.genevec.core.config import (
    MAXIMUM_INTEGER_IN_DOUBLE,
    BaseMutation,
    GaussianMutation,
    IntegerRandomWalkMutation,
    MutationType,
    PolynomialMutation,
)
from src.genevec.core.exceptions import MutationError
from src.genevec.core.genome import FloatVectorGenome, Precision
from src.genevec.core.random_source import INT64_MAX, INT64_MIN, RandomSource
from src.genevec.mutation.sampler import sample_within_bounds


def mutate(operator: BaseMutation, genome: FloatVectorGenome, index: int, rng: RandomSource) -> None:
    """
    Mutate ``genome[index]`` in place according to ``operator``.

    Args:
        operator: Resolved mutation operator for this gene
        genome: Genome owned by the calling thread
        index: Gene index in [0, len(genome))
        rng: Random source owned by the calling thread
    """
    if not 0 <= index < len(genome):
        raise IndexError(f"Gene index {index} outside genome of size {len(genome)}")

    mutation_type = operator.mutation_type
    if mutation_type == MutationType.RESET:
        _mutate_reset(operator, genome, index, rng)
    elif mutation_type == MutationType.GAUSS:
        _mutate_gaussian(operator, genome, index, rng)
    elif mutation_type == MutationType.POLYNOMIAL:
        _mutate_polynomial(operator, genome, index, rng)
    elif mutation_type == MutationType.INTEGER_RESET:
        _mutate_integer_reset(operator, genome, index, rng)
    elif mutation_type == MutationType.INTEGER_RANDOM_WALK:
        _mutate_integer_random_walk(operator, genome, index, rng)
    else:
        raise MutationError(f"Unknown mutation type: {mutation_type}", value=mutation_type)


def initialize_gene(operator: BaseMutation, genome: FloatVectorGenome, index: int, rng: RandomSource) -> None:
    """Set a gene to a fresh value: integer reset for integer operators, reset otherwise."""
    if operator.is_integer_type:
        _mutate_integer_reset(operator, genome, index, rng)
    else:
        _mutate_reset(operator, genome, index, rng)


def _representable_within(value: float, low: float, high: float, precision: Precision) -> float:
    """Clamp ``value`` to [low, high] so it stays there after narrowing to ``precision``."""
    value = min(max(value, low), high)
    if precision is not Precision.SINGLE:
        return value
    narrowed = np.float32(value)
    if float(narrowed) > high:
        narrowed = np.nextafter(narrowed, np.float32(-np.inf))
    elif float(narrowed) < low:
        narrowed = np.nextafter(narrowed, np.float32(np.inf))
    return float(narrowed)


def _mutate_reset(operator: BaseMutation, genome: FloatVectorGenome, index: int, rng: RandomSource) -> None:
    low, high = operator.min_gene, operator.max_gene
    value = low + rng.uniform_closed() * (high - low)
    genome.accessor.set(genome, index, _representable_within(value, low, high, genome.precision))


def _report_retry_limit(operator: BaseMutation, retries: int, index: int) -> None:
    if operator.claim_retry_warning():
        diagnostics.warning(
            f"The limit of out-of-range retries for {operator.mutation_type} mutation ({retries}) was reached",
            mutation_type=str(operator.mutation_type),
            retries=retries,
            gene=index
        )


def _mutate_gaussian(operator: GaussianMutation, genome: FloatVectorGenome, index: int, rng: RandomSource) -> None:
    accessor = genome.accessor
    old_value = accessor.get(genome, index)
    low, high = operator.min_gene, operator.max_gene

    value, exhausted = sample_within_bounds(
        draw=lambda: rng.gaussian() * operator.stdev + old_value,
        in_bounds=lambda v: not operator.mutation_is_bounded or low <= v <= high,
        retries=operator.out_of_bounds_retries,
        fallback=lambda: low + rng.uniform() * (high - low)
    )
    if exhausted:
        _report_retry_limit(operator, operator.out_of_bounds_retries, index)
    if operator.mutation_is_bounded:
        value = _representable_within(value, low, high, genome.precision)
    accessor.set(genome, index, value)


def _pow(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except (ValueError, OverflowError):
        # Negative base with a fractional exponent has no real result
        return math.nan


def polynomial_perturbation(
    rnd: float,
    value: float,
    min_gene: float,
    max_gene: float,
    distribution_index: int,
    alternative: bool
) -> float:
    """
    Return the polynomial-mutation candidate for one uniform draw ``rnd``.

    This is Deb's polynomial distribution; ``alternative`` selects the
    variant designed for genes restricted to [min_gene, max_gene].
    """
    width = max_gene - min_gene
    if width > 0:
        delta1 = (value - min_gene) / width
        delta2 = (max_gene - value) / width
    else:
        delta1 = delta2 = 0.0

    exponent = distribution_index + 1.0
    mut_pow = 1.0 / exponent

    if rnd <= 0.5:
        xy = 1.0 - delta1
        val = 2.0 * rnd + ((1.0 - 2.0 * rnd) * _pow(xy, exponent) if alternative else 0.0)
        deltaq = _pow(val, mut_pow) - 1.0
    else:
        xy = 1.0 - delta2
        val = 2.0 * (1.0 - rnd) + (2.0 * (rnd - 0.5) * _pow(xy, exponent) if alternative else 0.0)
        deltaq = 1.0 - _pow(val, mut_pow)

    return value + deltaq * width


def _mutate_polynomial(operator: PolynomialMutation, genome: FloatVectorGenome, index: int, rng: RandomSource) -> None:
    """
    Perturb the gene with Deb's polynomial distribution.

    NaN candidates are rejected even when the gene is unbounded. A gene whose
    current value lies outside [min_gene, max_gene] often draws NaN under the
    bounded variant; if every draw in the retry budget is NaN the gene is
    reset to a uniform value inside the bounds, whether or not it is bounded.
    """
    accessor = genome.accessor
    old_value = accessor.get(genome, index)
    low, high = operator.min_gene, operator.max_gene

    value, exhausted = sample_within_bounds(
        draw=lambda: polynomial_perturbation(
            rng.uniform(),
            old_value,
            low,
            high,
            operator.distribution_index,
            operator.polynomial_is_alternative
        ),
        in_bounds=lambda v: not operator.mutation_is_bounded or low <= v <= high,
        retries=operator.out_of_bounds_retries,
        fallback=lambda: low + rng.uniform_closed() * (high - low)
    )
    if exhausted:
        _report_retry_limit(operator, operator.out_of_bounds_retries, index)
    if operator.mutation_is_bounded:
        value = _representable_within(value, low, high, genome.precision)
    accessor.set(genome, index, value)


def _floor_to_int64(value: float) -> int:
    if value >= INT64_MAX:
        return INT64_MAX
    if value <= INT64_MIN:
        return INT64_MIN
    return math.floor(value)


def random_integer_in(low: int, high: int, rng: RandomSource) -> int:
    """Uniform integer from the closed range [low, high] of the signed 64-bit domain."""
    if high - low > INT64_MAX:
        # The width does not fit the domain; draw from the whole domain instead
        while True:
            candidate = rng.any_integer()
            if low <= candidate <= high:
                return candidate
    return low + rng.integer(high - low + 1)


def _mutate_integer_reset(operator: BaseMutation, genome: FloatVectorGenome, index: int, rng: RandomSource) -> None:
    low = _floor_to_int64(operator.min_gene)
    high = _floor_to_int64(operator.max_gene)
    value = float(random_integer_in(low, high, rng))
    # Above 2**24 float32 skips integers; keep the stored value inside [low, high]
    genome.accessor.set(genome, index, _representable_within(value, float(low), float(high), genome.precision))


def _mutate_integer_random_walk(
    operator: IntegerRandomWalkMutation,
    genome: FloatVectorGenome,
    index: int,
    rng: RandomSource
) -> None:
    accessor = genome.accessor
    if operator.mutation_is_bounded:
        low, high = operator.min_gene, operator.max_gene
    else:
        low, high = -MAXIMUM_INTEGER_IN_DOUBLE, MAXIMUM_INTEGER_IN_DOUBLE

    def legal(position: int, step: int) -> bool:
        return position + step <= high if step > 0 else position + step >= low

    current = accessor.get(genome, index)
    if not math.isfinite(current):
        raise MutationError(f"Cannot random-walk from non-finite value {current} at gene {index}", value=current)

    position = int(current)
    while True:
        step = 1 if rng.coin() else -1
        if legal(position, step):
            position += step
        elif legal(position, -step):
            position -= step
        else:
            raise MutationError(
                f"No legal +/-1 step from {position} within [{low}, {high}] at gene {index}",
                value=position
            )
        if not rng.coin(operator.random_walk_probability):
            break
    accessor.set(genome, index, float(position))


__all__ = [
    "mutate",
    "initialize_gene",
    "polynomial_perturbation",
    "random_integer_in",
]
