"""
Core components of genevec: parameters, genomes, operator models and the species.
"""

from src.genevec.core.config import BaseMutation, MutationOverrides, MutationType, SpeciesConfig, resolve
from src.genevec.core.genome import FloatVectorGenome, GeneAccessor, Precision
from src.genevec.core.parameters import ParameterStore, param_key
from src.genevec.core.random_source import RandomSource
from src.genevec.core.segments import Segment, SegmentLayout

__all__ = [
    "BaseMutation",
    "MutationOverrides",
    "MutationType",
    "SpeciesConfig",
    "resolve",
    "FloatVectorGenome",
    "GeneAccessor",
    "Precision",
    "ParameterStore",
    "param_key",
    "RandomSource",
    "Segment",
    "SegmentLayout",
]
