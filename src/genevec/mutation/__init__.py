"""
Gene mutation algorithms and the layered resolver that configures them.
"""

from src.genevec.mutation.operators import initialize_gene, mutate, polynomial_perturbation, random_integer_in
from src.genevec.mutation.sampler import sample_within_bounds

__all__ = [
    "mutate",
    "initialize_gene",
    "polynomial_perturbation",
    "random_integer_in",
    "sample_within_bounds",
]
