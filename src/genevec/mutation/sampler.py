"""
Bounded-retry rejection sampling.

Gaussian and polynomial mutation draw candidates until one lands inside the
gene's bounds. The retry budget caps how many candidates are drawn before the
operator gives up and resets the gene instead.
"""

from typing import Callable, Tuple

import math


def sample_within_bounds(
    draw: Callable[[], float],
    in_bounds: Callable[[float], bool],
    retries: int,
    fallback: Callable[[], float]
) -> Tuple[float, bool]:
    """
    Draw candidates until one satisfies ``in_bounds``.

    Args:
        draw: Produces one candidate value
        in_bounds: Acceptance predicate; NaN candidates are always rejected
        retries: Maximum number of candidates; 0 means keep drawing forever
        fallback: Produces the value used once the budget is spent

    Returns:
        Tuple of (value, exhausted) where ``exhausted`` is True if the
        fallback supplied the value
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")

    attempts = 0
    while True:
        candidate = draw()
        if not math.isnan(candidate) and in_bounds(candidate):
            return candidate, False
        attempts += 1
        if retries and attempts >= retries:
            return fallback(), True
