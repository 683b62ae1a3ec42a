"""
Hierarchical mutation configuration resolver.

Mutation parameters can be given at three layers, coarsest first:

    base.mutation-stdev = 0.5               # global
    base.segment.1.mutation-stdev = 0.1     # segment 1
    base.mutation-stdev.7 = 0.05            # gene 7

The resolver reads each layer's explicit overrides from the parameter store
and merges them onto the already-resolved operator of the next coarser layer,
producing one immutable operator per gene.
"""

from typing import Any, Dict, List, Optional, Tuple

import logfire

from src.genevec.core.config import (
    BaseMutation,
    MutationOverrides,
    MutationType,
    resolve,
)
from src.genevec.core.diagnostics import WarningLedger
from src.genevec.core.exceptions import ConfigurationError
from src.genevec.core.parameters import ParameterStore, param_key
from src.genevec.core.segments import P_SEGMENT, SegmentLayout


P_MIN_GENE = "min-gene"
P_MAX_GENE = "max-gene"
P_MUTATION_TYPE = "mutation-type"
P_STDEV = "mutation-stdev"
P_MUTATION_DISTRIBUTION_INDEX = "mutation-distribution-index"
P_POLYNOMIAL_ALTERNATIVE = "alternative-polynomial-version"
P_RANDOM_WALK_PROBABILITY = "random-walk-probability"
P_OUT_OF_BOUNDS_RETRIES = "out-of-bounds-retries"
P_MUTATION_BOUNDED = "mutation-bounded"

# Override field -> (parameter name, store getter)
PARAMETERS: Dict[str, Tuple[str, str]] = {
    "min_gene": (P_MIN_GENE, "get_float"),
    "max_gene": (P_MAX_GENE, "get_float"),
    "mutation_is_bounded": (P_MUTATION_BOUNDED, "get_bool"),
    "stdev": (P_STDEV, "get_float"),
    "out_of_bounds_retries": (P_OUT_OF_BOUNDS_RETRIES, "get_int"),
    "distribution_index": (P_MUTATION_DISTRIBUTION_INDEX, "get_int"),
    "polynomial_is_alternative": (P_POLYNOMIAL_ALTERNATIVE, "get_bool"),
    "random_walk_probability": (P_RANDOM_WALK_PROBABILITY, "get_float"),
}

DEFAULT_WARNINGS = {
    "mutation_type": f"No {P_MUTATION_TYPE} given, assuming '{MutationType.RESET.value}' mutation",
    "mutation_is_bounded": f"'{P_MUTATION_BOUNDED}' is not defined, assuming 'true'",
    "polynomial_is_alternative": (
        f"Polynomial mutation is used but '{P_POLYNOMIAL_ALTERNATIVE}' is not defined, assuming 'true'"
    ),
    "stdev": f"Gaussian mutation is used but '{P_STDEV}' is not defined, assuming 0",
}

INTEGER_TYPE_WARNING = (
    "{mutation_type} mutation is used; be advised that during initialization "
    "these genes will only be set to integer values"
)


class Layer:
    """Addresses one configuration layer in the parameter store."""

    def __init__(self, name: str, base: str, default_base: Optional[str], prefix: Tuple[Any, ...] = (), suffix: Optional[int] = None):
        self.name = name
        self._base = base
        self._default_base = default_base
        self._prefix = prefix
        self._suffix = suffix

    def key(self, parameter: str) -> str:
        return param_key(self._base, *self._prefix, parameter, self._suffix)

    def default_key(self, parameter: str) -> Optional[str]:
        if not self._default_base:
            return None
        return param_key(self._default_base, *self._prefix, parameter, self._suffix)

    @classmethod
    def global_layer(cls, base: str, default_base: Optional[str] = None) -> "Layer":
        return cls("global", base, default_base)

    @classmethod
    def segment_layer(cls, base: str, segment: int, default_base: Optional[str] = None) -> "Layer":
        return cls(f"segment {segment}", base, default_base, prefix=(P_SEGMENT, segment))

    @classmethod
    def gene_layer(cls, base: str, gene: int, default_base: Optional[str] = None) -> "Layer":
        return cls(f"gene {gene}", base, default_base, suffix=gene)


class MutationResolver:
    """
    Builds one resolved mutation operator per gene.

    Resolution order is global, then segment (if segments are configured),
    then gene. A layer that leaves a parameter unset inherits the value
    resolved by the layer above it.
    """

    def __init__(self, store: ParameterStore, base: str, default_base: Optional[str] = None, ledger: Optional[WarningLedger] = None):
        self.store = store
        self.base = base
        self.default_base = default_base
        self.ledger = ledger or WarningLedger()

    def read_overrides(self, layer: Layer) -> MutationOverrides:
        """Read the parameters a single layer sets explicitly."""
        values: Dict[str, Any] = {}

        type_key = layer.key(P_MUTATION_TYPE)
        raw_type = self.store.get_string(type_key, layer.default_key(P_MUTATION_TYPE))
        if raw_type is not None:
            try:
                values["mutation_type"] = MutationType(raw_type.lower())
            except ValueError:
                raise ConfigurationError(
                    f"Bad mutation type {raw_type!r} at {type_key}; expected one of "
                    f"{', '.join(t.value for t in MutationType)}",
                    type_key,
                    raw_type
                )

        for field, (parameter, getter) in PARAMETERS.items():
            value = getattr(self.store, getter)(layer.key(parameter), layer.default_key(parameter))
            if value is not None:
                values[field] = value

        return MutationOverrides(**values)

    def resolve_layer(
        self,
        layer: Layer,
        parent: Optional[BaseMutation],
        ancestors: Tuple[BaseMutation, ...] = ()
    ) -> BaseMutation:
        """Resolve one layer against its parent, translating errors to parameter keys."""
        overrides = self.read_overrides(layer)
        try:
            operator = resolve(parent, overrides, ancestors, on_default=self._on_default)
        except ConfigurationError as e:
            parameter = PARAMETERS.get(e.key, (P_MUTATION_TYPE, None))[0]
            key = layer.key(parameter)
            raise ConfigurationError(f"{e} ({key})", key, e.value) from e

        if operator.is_integer_type:
            self.ledger.warn_once(
                INTEGER_TYPE_WARNING.format(mutation_type=operator.mutation_type),
                mutation_type=str(operator.mutation_type)
            )
        return operator

    def _on_default(self, field: str, value: Any) -> None:
        message = DEFAULT_WARNINGS.get(field)
        if message:
            self.ledger.warn_once(message, parameter=field, base=self.base)

    def resolve_global(self) -> BaseMutation:
        return self.resolve_layer(Layer.global_layer(self.base, self.default_base), None)

    def resolve_all(
        self,
        genome_size: int,
        segments: Optional[SegmentLayout] = None
    ) -> Tuple[BaseMutation, List[BaseMutation]]:
        """
        Resolve every layer.

        Returns:
            Tuple of (global operator, per-gene operators)
        """
        with logfire.span("Resolve mutation operators", base=self.base, genome_size=genome_size):
            global_operator = self.resolve_global()

            segment_operators: List[BaseMutation] = []
            if segments is not None:
                for segment in segments:
                    layer = Layer.segment_layer(self.base, segment.index, self.default_base)
                    segment_operators.append(self.resolve_layer(layer, global_operator))

            operators: List[BaseMutation] = []
            for gene in range(genome_size):
                layer = Layer.gene_layer(self.base, gene, self.default_base)
                if segment_operators:
                    parent = segment_operators[segments.segment_for(gene)]
                    operators.append(self.resolve_layer(layer, parent, (global_operator,)))
                else:
                    operators.append(self.resolve_layer(layer, global_operator))

            return global_operator, operators
