"""
genevec - Real-valued vector species and gene mutation.

This package provides the float vector species, its gene-level mutation
operators (reset, gaussian, polynomial, integer reset and integer random
walk), and the global, segment and gene layers used to configure them.
"""

from src.genevec.core.config import (
    GaussianMutation,
    IntegerRandomWalkMutation,
    IntegerResetMutation,
    MutationType,
    PolynomialMutation,
    ResetMutation,
    create_operator,
    load_operator,
)
from src.genevec.core.exceptions import (
    ConfigurationError,
    GeneVecError,
    MutationError,
    ParameterError,
)
from src.genevec.core.genome import FloatVectorGenome, Precision
from src.genevec.core.parameters import ParameterStore
from src.genevec.core.random_source import RandomSource
from src.genevec.core.species import FloatVectorSpecies
from src.genevec.mutation.operators import mutate

__version__ = "1.0.0"

__all__ = [
    "FloatVectorSpecies",
    "FloatVectorGenome",
    "Precision",
    "ParameterStore",
    "RandomSource",
    "MutationType",
    "ResetMutation",
    "GaussianMutation",
    "PolynomialMutation",
    "IntegerResetMutation",
    "IntegerRandomWalkMutation",
    "create_operator",
    "load_operator",
    "mutate",
    "GeneVecError",
    "ConfigurationError",
    "ParameterError",
    "MutationError",
]
