"""
Genevec Configuration Module.

This module defines the configuration models for real-valued vector species:
the per-layer override records read from the parameter store, the resolved
(immutable) mutation operators built from them, and the merge that turns a
parent operator plus a layer's overrides into a child operator.
"""

from enum import Enum
from typing import Annotated, Any, Callable, Dict, Iterable, Literal, Optional, Type, Union

import math

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter, ValidationError, model_validator

from src.genevec.core.exceptions import ConfigurationError
from src.genevec.core.genome import Precision


DEFAULT_OUT_OF_BOUNDS_RETRIES = 100
MAXIMUM_INTEGER_IN_DOUBLE = 9.007199254740992e15


class MutationType(str, Enum):
    """Mutation algorithms available to a gene."""
    RESET = "reset"
    GAUSS = "gauss"
    POLYNOMIAL = "polynomial"
    INTEGER_RESET = "integer-reset"
    INTEGER_RANDOM_WALK = "integer-random-walk"


class MutationOverrides(BaseModel):
    """
    Parameters explicitly set by one configuration layer.

    A field left as None means "not set at this layer"; the resolved value is
    then inherited from the parent layer.
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    mutation_type: Optional[MutationType] = None
    min_gene: Optional[float] = None
    max_gene: Optional[float] = None
    mutation_is_bounded: Optional[bool] = None
    stdev: Optional[float] = None
    out_of_bounds_retries: Optional[int] = None
    distribution_index: Optional[int] = None
    polynomial_is_alternative: Optional[bool] = None
    random_walk_probability: Optional[float] = None

    def is_empty(self) -> bool:
        """True when this layer overrides nothing."""
        return not self.model_dump(exclude_none=True)


class BaseMutation(BaseModel):
    """Parameters shared by every mutation operator."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    min_gene: float = 0.0
    max_gene: float = 0.0
    mutation_is_bounded: bool = True

    # Set the first time the out-of-bounds retry budget runs out
    _retry_limit_reported: bool = PrivateAttr(default=False)

    @model_validator(mode="after")
    def validate_bounds(self):
        """Ensure the gene bounds are ordered numbers."""
        if math.isnan(self.min_gene) or math.isnan(self.max_gene):
            raise ValueError("min_gene and max_gene must be numbers")
        if self.max_gene < self.min_gene:
            raise ValueError(
                f"max_gene ({self.max_gene}) must be >= min_gene ({self.min_gene})"
            )
        return self

    @property
    def is_integer_type(self) -> bool:
        """True if the gene can only assume integer values."""
        return False

    def claim_retry_warning(self) -> bool:
        """Return True only the first time the retry budget is reported exhausted."""
        if self._retry_limit_reported:
            return False
        self._retry_limit_reported = True
        return True


class ResetMutation(BaseMutation):
    """Replace the gene with a uniform draw from [min_gene, max_gene]."""
    mutation_type: Literal["reset"] = "reset"


class GaussianMutation(BaseMutation):
    """Perturb the gene with gaussian noise."""
    mutation_type: Literal["gauss"] = "gauss"
    stdev: float = Field(
        default=0.0,
        ge=0.0,
        description="Standard deviation of the gaussian perturbation"
    )
    out_of_bounds_retries: int = Field(
        default=DEFAULT_OUT_OF_BOUNDS_RETRIES,
        ge=0,
        description="Draws allowed before giving up and resetting; 0 means never give up"
    )


class PolynomialMutation(BaseMutation):
    """Perturb the gene with noise from a polynomial distribution."""
    mutation_type: Literal["polynomial"] = "polynomial"
    distribution_index: int = Field(
        ge=0,
        description="Shape of the distribution; larger values concentrate noise near zero"
    )
    polynomial_is_alternative: bool = Field(
        default=True,
        description="Use the bounded variant of the distribution"
    )
    out_of_bounds_retries: int = Field(
        default=DEFAULT_OUT_OF_BOUNDS_RETRIES,
        ge=0,
        description="Draws allowed before giving up and resetting; 0 means never give up"
    )


class IntegerResetMutation(BaseMutation):
    """Replace the gene with a uniform integer from the gene's range."""
    mutation_type: Literal["integer-reset"] = "integer-reset"

    @property
    def is_integer_type(self) -> bool:
        return True


class IntegerRandomWalkMutation(BaseMutation):
    """Move the gene by +/-1 steps until a weighted coin comes up false."""
    mutation_type: Literal["integer-random-walk"] = "integer-random-walk"
    random_walk_probability: float = Field(
        ge=0.0,
        le=1.0,
        description="Probability that the walk takes another step"
    )

    @model_validator(mode="after")
    def validate_walk_range(self):
        """A bounded walk needs at least two integers to step between."""
        if self.mutation_is_bounded and math.floor(self.max_gene) - math.ceil(self.min_gene) < 1:
            raise ValueError(
                f"Bounds [{self.min_gene}, {self.max_gene}] are too narrow for a +/-1 random walk step"
            )
        return self

    @property
    def is_integer_type(self) -> bool:
        return True


MutationOperator = Annotated[
    Union[
        ResetMutation,
        GaussianMutation,
        PolynomialMutation,
        IntegerResetMutation,
        IntegerRandomWalkMutation,
    ],
    Field(discriminator="mutation_type")
]

_OPERATOR_ADAPTER = TypeAdapter(MutationOperator)

OPERATOR_TYPES: Dict[MutationType, Type[BaseMutation]] = {
    MutationType.RESET: ResetMutation,
    MutationType.GAUSS: GaussianMutation,
    MutationType.POLYNOMIAL: PolynomialMutation,
    MutationType.INTEGER_RESET: IntegerResetMutation,
    MutationType.INTEGER_RANDOM_WALK: IntegerRandomWalkMutation,
}


class SpeciesConfig(BaseModel):
    """Species-wide settings that are not per-gene."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    genome_size: int = Field(ge=1, description="Number of genes in every genome")
    precision: Precision = Field(
        default=Precision.DOUBLE,
        description="Storage precision of every genome"
    )


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def resolve(
    parent: Optional[BaseMutation],
    overrides: MutationOverrides,
    ancestors: Iterable[BaseMutation] = (),
    on_default: Optional[Callable[[str, Any], None]] = None
) -> BaseMutation:
    """
    Merge a layer's overrides onto its parent's resolved operator.

    Args:
        parent: Resolved operator of the next coarser layer (None at the global layer)
        overrides: Parameters this layer sets explicitly
        ancestors: Resolved operators further up the chain, nearest first
        on_default: Called with (field, value) whenever a hardcoded default is used

    Returns:
        A new, fully resolved operator

    Raises:
        ConfigurationError: if the merged parameters are invalid or incomplete
    """
    def defaulted(name: str, value: Any) -> Any:
        if on_default is not None:
            on_default(name, value)
        return value

    lineage = [op for op in (parent, *ancestors) if op is not None]

    mutation_type = _first(overrides.mutation_type, parent.mutation_type if parent else None)
    if mutation_type is None:
        mutation_type = defaulted("mutation_type", MutationType.RESET)
    mutation_type = MutationType(mutation_type)

    min_gene = _first(overrides.min_gene, parent.min_gene if parent else None, 0.0)
    max_gene = _first(overrides.max_gene, parent.max_gene if parent else None, min_gene)
    bounded = _first(overrides.mutation_is_bounded, parent.mutation_is_bounded if parent else None)
    if bounded is None:
        bounded = defaulted("mutation_is_bounded", True)

    fields: Dict[str, Any] = {
        "min_gene": min_gene,
        "max_gene": max_gene,
        "mutation_is_bounded": bounded,
    }

    # Variant parameters only come from an ancestor of the same variant
    same = next((op for op in lineage if op.mutation_type == mutation_type), None)

    if mutation_type == MutationType.GAUSS:
        stdev = _first(overrides.stdev, getattr(same, "stdev", None))
        if stdev is None:
            stdev = defaulted("stdev", 0.0)
        fields["stdev"] = stdev
        fields["out_of_bounds_retries"] = _first(
            overrides.out_of_bounds_retries,
            getattr(same, "out_of_bounds_retries", None),
            DEFAULT_OUT_OF_BOUNDS_RETRIES
        )
    elif mutation_type == MutationType.POLYNOMIAL:
        index = _first(overrides.distribution_index, getattr(same, "distribution_index", None))
        if index is None:
            raise ConfigurationError(
                "Polynomial mutation requires a distribution index >= 0",
                "distribution_index"
            )
        fields["distribution_index"] = index
        alternative = _first(
            overrides.polynomial_is_alternative,
            getattr(same, "polynomial_is_alternative", None)
        )
        if alternative is None:
            alternative = defaulted("polynomial_is_alternative", True)
        fields["polynomial_is_alternative"] = alternative
        fields["out_of_bounds_retries"] = _first(
            overrides.out_of_bounds_retries,
            getattr(same, "out_of_bounds_retries", None),
            DEFAULT_OUT_OF_BOUNDS_RETRIES
        )
    elif mutation_type == MutationType.INTEGER_RANDOM_WALK:
        probability = _first(
            overrides.random_walk_probability,
            getattr(same, "random_walk_probability", None)
        )
        if probability is None:
            raise ConfigurationError(
                "Integer random walk mutation requires a random walk probability",
                "random_walk_probability"
            )
        fields["random_walk_probability"] = probability

    try:
        return OPERATOR_TYPES[mutation_type](**fields)
    except ValidationError as e:
        error = e.errors()[0]
        # Model-level validators have no location; they all concern the bounds
        field = str(error["loc"][0]) if error.get("loc") else "max_gene"
        raise ConfigurationError(
            f"Invalid {mutation_type.value} mutation parameters: {error['msg']}",
            field,
            fields.get(field)
        ) from e


def create_operator(mutation_type: Union[MutationType, str], **parameters: Any) -> BaseMutation:
    """Build a stand-alone operator from explicit parameters."""
    overrides = MutationOverrides(mutation_type=MutationType(mutation_type), **parameters)
    return resolve(None, overrides)


def load_operator(data: Dict[str, Any]) -> BaseMutation:
    """Rebuild an operator from ``model_dump()`` output; ``mutation_type`` selects the model."""
    return _OPERATOR_ADAPTER.validate_python(data)
