"""
genevec - Command Line Entry Point

Loads a species parameter file, sets up the float vector species with
Logfire observability, prints the resolved per-gene mutation operators and
optionally runs a few mutation rounds on a freshly initialized genome.
"""

import argparse
import json
import sys
from typing import List, Optional

import logfire
from dotenv import load_dotenv

from src.core.config import Settings
from src.genevec.core.diagnostics import setup_logger
from src.genevec.core.exceptions import GeneVecError
from src.genevec.core.parameters import ParameterStore
from src.genevec.core.random_source import RandomSource
from src.genevec.core.species import FloatVectorSpecies


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genevec",
        description="Resolve per-gene mutation operators of a float vector species"
    )
    parser.add_argument(
        "params",
        nargs="?",
        default=settings.genevec_params_file,
        help="Parameter file (default: $GENEVEC_PARAMS_FILE)"
    )
    parser.add_argument("--base", default=settings.genevec_base, help="Species parameter base")
    parser.add_argument("--default-base", default=settings.genevec_default_base, help="Fallback parameter base")
    parser.add_argument("--seed", type=int, default=settings.genevec_random_seed, help="Random seed")
    parser.add_argument(
        "--mutations",
        type=int,
        default=0,
        help="Number of mutation rounds to run on an initialized genome"
    )
    parser.add_argument("--json", action="store_true", help="Print the resolved species as JSON")
    return parser


def format_table(species: FloatVectorSpecies) -> str:
    """Render one line per gene with its resolved operator."""
    lines = [f"{'gene':>5}  {'type':<20} {'min':>12} {'max':>12}  parameters"]
    for row in species.describe():
        extras = {
            k: v for k, v in row.items()
            if k not in ("gene", "segment", "mutation_type", "min_gene", "max_gene")
        }
        details = ", ".join(f"{k}={v}" for k, v in extras.items())
        lines.append(
            f"{row['gene']:>5}  {row['mutation_type']:<20} {row['min_gene']:>12g} {row['max_gene']:>12g}  {details}"
        )
    return "\n".join(lines)


def run(args: argparse.Namespace) -> int:
    """Set up the species and report; returns the process exit code."""
    if not args.params:
        print("genevec: no parameter file given", file=sys.stderr)
        return 2

    with logfire.span("genevec run", params=args.params, seed=args.seed):
        store = ParameterStore.from_file(args.params)
        species = FloatVectorSpecies().setup(store, args.base, args.default_base)

        if args.json:
            print(json.dumps(species.to_dict(), indent=2))
        else:
            print(format_table(species))

        if args.mutations > 0:
            rng = RandomSource(args.seed)
            genome = species.new_genome(rng)
            print(f"initial: {genome.tolist()}")
            for round_number in range(1, args.mutations + 1):
                for gene in range(species.genome_size):
                    species.mutate(genome, gene, rng)
                print(f"round {round_number}: {genome.tolist()}")

            logfire.info("Mutation rounds completed", rounds=args.mutations, genome_size=species.genome_size)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables
    load_dotenv()
    settings = Settings()

    # Configure Logfire for observability
    logfire.configure(console=False, **settings.get_logfire_settings())
    setup_logger(settings.genevec_log_level)

    args = build_parser(settings).parse_args(argv)
    try:
        return run(args)
    except (GeneVecError, OSError) as e:
        logfire.error("genevec run failed", error=str(e))
        print(f"genevec: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
